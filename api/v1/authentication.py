from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from api.deps import get_current_profile
from core.config import settings
from core.database import get_db
from core.logging import get_logger
from models.profile import Profile
from repositories.profile import ProfileRepository
from schemas.authentication import PhoneRequest, VerifyOtpRequest
from schemas.responses import StandardSuccessResponse, SessionSuccessResponse, SessionCheckResponse
from scripts.authentication_helpers import full_phone, is_valid_phone_number
from services.authentication_service import (
    create_otp_session,
    create_user_session,
    invalidate_session,
    verify_otp_helper,
)
from services.sms_service import sms_service

logger = get_logger(__name__)

router = APIRouter()


@router.post("/request-otp/", response_model=SessionSuccessResponse)
async def request_otp(request: PhoneRequest, db: AsyncSession = Depends(get_db)):
    if not is_valid_phone_number(request.country_code, request.phone_number):
        raise HTTPException(status_code=400, detail="Invalid phone number")

    profile = await ProfileRepository(db).get_by_phone(request.phone_number, request.country_code)
    if not profile:
        raise HTTPException(status_code=400, detail="No user found with this phone number")

    contact = full_phone(request.country_code, request.phone_number)
    otp, session_id = await create_otp_session(db, contact, profile.id)
    await sms_service.send_otp(contact, otp)

    return {
        "success": True,
        "message": "OTP has been sent to your phone",
        "session_id": session_id
    }


@router.post("/verify-otp/", response_model=StandardSuccessResponse)
async def verify_otp(request: Request, response: Response, body: VerifyOtpRequest, db: AsyncSession = Depends(get_db)):
    verified, profile_id, msg = await verify_otp_helper(db, body.session_id, body.otp)
    if not verified:
        raise HTTPException(status_code=400, detail=msg)
    if not profile_id:
        raise HTTPException(status_code=400, detail="No user found for this session")

    session_id = await create_user_session(
        db,
        profile_id,
        user_agent=request.headers.get("User-Agent", ""),
        ip_address=request.client.host if request.client else ""
    )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        max_age=settings.SESSION_DURATION * 60,
        samesite="lax"
    )

    return {
        "success": True,
        "message": msg
    }


@router.post("/session/", response_model=SessionCheckResponse)
async def session_auth(profile: Profile = Depends(get_current_profile)):
    return {
        "success": True,
        "profile_id": profile.id,
        "first_name": profile.first_name,
        "registration_type": profile.registration_type.value,
    }


@router.post("/logout/", response_model=StandardSuccessResponse)
async def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    db: AsyncSession = Depends(get_db)
):
    if session_id:
        await invalidate_session(db, session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}
