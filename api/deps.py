"""
Dependency injection utilities for API endpoints.
"""

from typing import Optional

import httpx
from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from models.profile import ElderlyProfile, Profile
from repositories.profile import ElderlyProfileRepository, ProfileRepository
from services.authentication_service import get_profile_id_from_session


def get_webhook_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outbound webhook calls; ``None`` uses httpx's network transport."""
    return None


async def get_current_profile(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """Resolve the session cookie to the signed-in profile."""
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated: Missing session cookie"
        )

    profile_id = await get_profile_id_from_session(db, session_id)
    if not profile_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated: Invalid or expired session"
        )

    profile = await ProfileRepository(db).get(profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found. Please complete registration."
        )
    return profile


async def get_own_elderly_profile(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
) -> ElderlyProfile:
    """The elderly profile a ``myself`` registrant manages for themselves."""
    elderly_profile = await ElderlyProfileRepository(db).get_by_profile_id(profile.id)
    if not elderly_profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Elderly profile not found")
    return elderly_profile


async def get_family_elderly_profile(
    elderly_profile_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
) -> ElderlyProfile:
    """An elderly profile the signed-in caregiver manages, taken from the path."""
    elderly_profile = await ElderlyProfileRepository(db).get_for_caregiver(elderly_profile_id, profile.id)
    if not elderly_profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Elderly profile not found")
    return elderly_profile
