from datetime import datetime, timedelta
from typing import Optional, Tuple

from pytz import utc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from core.config import settings
from core.logging import get_logger
from models.authentication import OtpSession, UserSession
from scripts.authentication_helpers import generate_otp, hash_otp, is_expired

logger = get_logger(__name__)


async def create_otp_session(db: AsyncSession, contact: str, profile_id: Optional[int] = None) -> Tuple[str, str]:
    """Store a hashed one-time code for ``contact`` and return ``(otp, session_id)``.

    ``profile_id`` is set for logins; onboarding sessions have no profile yet.
    """
    otp = generate_otp()
    otp_hash = hash_otp(otp)
    expires_at = datetime.now(tz=utc) + timedelta(minutes=settings.OTP_TTL_MINUTES)

    otp_session = OtpSession(contact=contact, otp_hash=otp_hash, expires_at=expires_at, profile_id=profile_id)

    db.add(otp_session)
    await db.commit()
    await db.refresh(otp_session)

    return otp, otp_session.session_id


async def verify_otp_helper(db: AsyncSession, session_id: str, otp: str) -> Tuple[bool, Optional[int], str]:
    """Check a code against its session; returns ``(verified, profile_id, message)``."""
    result = await db.execute(select(OtpSession).where(OtpSession.session_id == session_id))
    otp_session = result.scalar_one_or_none()

    if not otp_session or otp_session.verified:
        return False, None, "Invalid session ID."

    if is_expired(otp_session.expires_at):
        return False, None, "OTP has expired."

    if otp_session.attempts >= settings.MAX_ATTEMPTS:
        return False, None, "Maximum attempts exceeded."

    if otp_session.otp_hash == hash_otp(otp):
        otp_session.verified = True
        await db.commit()
        return True, otp_session.profile_id, "OTP verified successfully."

    otp_session.attempts += 1
    await db.commit()
    return False, None, "Invalid OTP."


async def is_contact_verified(db: AsyncSession, session_id: Optional[str], contact: str) -> bool:
    """True when ``session_id`` is a verified OTP session for ``contact``."""
    if not session_id:
        return False
    result = await db.execute(
        select(OtpSession).where(
            OtpSession.session_id == session_id,
            OtpSession.contact == contact,
            OtpSession.verified.is_(True),
        )
    )
    return result.scalar_one_or_none() is not None


async def create_user_session(db: AsyncSession, profile_id: int, user_agent: str = "", ip_address: str = "") -> str:
    expires_at = datetime.now(tz=utc) + timedelta(minutes=settings.SESSION_DURATION)
    session = UserSession(profile_id=profile_id, expires_at=expires_at, user_agent=user_agent, ip_address=ip_address)

    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info("User session created", profile_id=profile_id)
    return session.session_id


async def get_profile_id_from_session(db: AsyncSession, session_id: str) -> Optional[int]:
    result = await db.execute(select(UserSession).where(
        UserSession.session_id == session_id,
        UserSession.is_active.is_(True),
    ))
    session = result.scalar_one_or_none()
    if not session or is_expired(session.expires_at):
        return None
    return session.profile_id


async def invalidate_session(db: AsyncSession, session_id: str):
    await db.execute(
        update(UserSession)
        .where(UserSession.session_id == session_id)
        .values(is_active=False)
    )
    await db.commit()
