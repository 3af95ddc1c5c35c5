import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_webhook_transport
from core.database import get_db
from models.enums import RegistrationType
from schemas.authentication import PhoneRequest, VerifyOtpRequest
from schemas.onboarding import (
    OnboardingData,
    PhoneCheckRequest,
    PhoneCheckResponse,
    RegistrationResult,
    StepValidationRequest,
    StepValidationResponse,
    WizardStep,
    WizardStepsResponse,
)
from schemas.responses import SessionSuccessResponse, StandardSuccessResponse
from scripts.authentication_helpers import full_phone, is_valid_phone_number
from services import onboarding_flow
from services.authentication_service import create_otp_session, verify_otp_helper
from services.onboarding_service import OnboardingService
from services.sms_service import sms_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/steps", response_model=WizardStepsResponse, summary="List wizard screens for a registration type")
async def get_steps(registration_type: Optional[RegistrationType] = Query(None, alias="registrationType")):
    steps = [
        WizardStep(
            index=index,
            name=name,
            progress=onboarding_flow.progress(registration_type, index),
        )
        for index, name in enumerate(onboarding_flow.steps_for(registration_type))
    ]
    return WizardStepsResponse(
        registration_type=registration_type,
        total_steps=onboarding_flow.total_steps(registration_type),
        steps=steps,
    )


@router.post("/validate-step", response_model=StepValidationResponse, response_model_by_alias=True)
async def validate_step(request: StepValidationRequest):
    try:
        errors = onboarding_flow.validate_step(request.step, request.data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return StepValidationResponse(step=request.step, valid=not errors, errors=errors)


@router.post("/check-phone", response_model=PhoneCheckResponse)
async def check_phone(request: PhoneCheckRequest, db: AsyncSession = Depends(get_db)):
    exists = await OnboardingService(db).check_phone_number_exists(request.phone_number, request.country_code)
    return PhoneCheckResponse(exists=exists)


@router.post("/request-otp", response_model=SessionSuccessResponse)
async def request_onboarding_otp(request: PhoneRequest, db: AsyncSession = Depends(get_db)):
    if not is_valid_phone_number(request.country_code, request.phone_number):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid phone number")

    contact = full_phone(request.country_code, request.phone_number)
    otp, session_id = await create_otp_session(db, contact)
    await sms_service.send_otp(contact, otp)
    logger.info(f"Onboarding OTP sent for session {session_id}")

    return {
        "success": True,
        "message": "OTP has been sent to your phone",
        "session_id": session_id
    }


@router.post("/verify-otp", response_model=StandardSuccessResponse)
async def verify_onboarding_otp(body: VerifyOtpRequest, db: AsyncSession = Depends(get_db)):
    verified, _, msg = await verify_otp_helper(db, body.session_id, body.otp)
    if not verified:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg)
    return {"success": True, "message": msg}


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationResult,
    response_model_by_alias=True,
    summary="Complete registration from wizard data",
)
async def register(
    data: OnboardingData,
    db: AsyncSession = Depends(get_db),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_webhook_transport),
):
    return await OnboardingService(db, webhook_transport=transport).save_onboarding_data(data)
