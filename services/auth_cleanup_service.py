"""
Removal of auth identities left behind by interrupted registrations.

An auth user is orphaned when sign-up created it but no profile row was
ever written for its phone number. Such a user blocks a fresh sign-up
because the derived email is already taken.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ValidationFailedError
from core.logging import get_logger
from repositories.profile import AuthUserRepository, ProfileRepository
from scripts.authentication_helpers import temp_email_for_phone

logger = get_logger(__name__)


async def cleanup_orphaned_auth(
    db: AsyncSession,
    phone_number: Optional[str],
    country_code: Optional[str],
) -> dict:
    if not phone_number or not country_code:
        raise ValidationFailedError("Phone number and country code are required")

    complete = {
        "success": False,
        "message": "User already has a complete registration",
        "hasProfile": True,
    }
    profile_repo = ProfileRepository(db)
    if await profile_repo.get_by_phone(phone_number, country_code):
        return complete

    email = temp_email_for_phone(phone_number)
    auth_repo = AuthUserRepository(db)
    auth_user = await auth_repo.get_by_email(email)
    if not auth_user:
        return {
            "success": True,
            "message": "No orphaned auth user found",
            "cleaned": False,
        }

    # Same number under another country code
    if await profile_repo.get_by_auth_user(auth_user.id):
        return complete

    await auth_repo.delete_by_email(email)
    logger.info("Orphaned auth user removed", email=email)
    return {
        "success": True,
        "message": "Orphaned auth user cleaned up successfully",
        "cleaned": True,
    }
