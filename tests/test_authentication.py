from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from core.config import settings
from models.authentication import OtpSession, UserSession
from services.authentication_service import (
    create_otp_session,
    create_user_session,
    get_profile_id_from_session,
    invalidate_session,
    is_contact_verified,
    verify_otp_helper,
)
from tests.factories import create_profile, sign_in


async def test_otp_round_trip(db_session, fixed_otp):
    otp, session_id = await create_otp_session(db_session, "+15551234567", profile_id=None)

    assert otp == fixed_otp
    stored = await db_session.get(OtpSession, session_id)
    assert stored.otp_hash != otp

    assert await verify_otp_helper(db_session, session_id, fixed_otp) == (True, None, "OTP verified successfully.")
    assert await is_contact_verified(db_session, session_id, "+15551234567")
    assert not await is_contact_verified(db_session, session_id, "+15550000000")


async def test_verified_session_cannot_be_reused(db_session, fixed_otp):
    _, session_id = await create_otp_session(db_session, "+15551234567")
    await verify_otp_helper(db_session, session_id, fixed_otp)

    assert await verify_otp_helper(db_session, session_id, fixed_otp) == (False, None, "Invalid session ID.")


async def test_wrong_otp_counts_attempts(db_session, fixed_otp):
    _, session_id = await create_otp_session(db_session, "+15551234567")

    for _ in range(settings.MAX_ATTEMPTS):
        assert (await verify_otp_helper(db_session, session_id, "000000"))[2] == "Invalid OTP."

    # Locked even with the right code
    assert await verify_otp_helper(db_session, session_id, fixed_otp) == (False, None, "Maximum attempts exceeded.")


async def test_expired_otp(db_session, fixed_otp):
    _, session_id = await create_otp_session(db_session, "+15551234567")
    stored = await db_session.get(OtpSession, session_id)
    stored.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await db_session.commit()

    assert await verify_otp_helper(db_session, session_id, fixed_otp) == (False, None, "OTP has expired.")


async def test_unknown_session_id(db_session):
    assert await verify_otp_helper(db_session, "missing", "123456") == (False, None, "Invalid session ID.")


async def test_user_session_lifecycle(db_session):
    profile = await create_profile(db_session)
    session_id = await create_user_session(db_session, profile.id, user_agent="pytest")

    assert await get_profile_id_from_session(db_session, session_id) == profile.id

    await invalidate_session(db_session, session_id)
    assert await get_profile_id_from_session(db_session, session_id) is None


async def test_expired_user_session(db_session):
    profile = await create_profile(db_session)
    session_id = await create_user_session(db_session, profile.id)
    stored = (await db_session.execute(
        select(UserSession).where(UserSession.session_id == session_id)
    )).scalar_one()
    stored.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    await db_session.commit()

    assert await get_profile_id_from_session(db_session, session_id) is None


# ── API ──────────────────────────────────────────────────────────────────────


async def test_login_flow(client, db_session, fixed_otp):
    profile = await create_profile(db_session)

    response = await client.post(
        "/api/v1/auth/request-otp/",
        json={"phone_number": "5551234567", "country_code": "+1"},
    )
    assert response.status_code == 200
    session_id = response.json()["session_id"]

    response = await client.post("/api/v1/auth/verify-otp/", json={"session_id": session_id, "otp": fixed_otp})
    assert response.status_code == 200
    assert response.json()["success"] is True
    cookie = response.headers["set-cookie"]
    assert "HttpOnly" in cookie
    assert f"Max-Age={settings.SESSION_DURATION * 60}" in cookie

    response = await client.post("/api/v1/auth/session/")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "profile_id": profile.id,
        "first_name": "Maria",
        "registration_type": "myself",
    }

    response = await client.post("/api/v1/auth/logout/")
    assert response.status_code == 200

    client.cookies.clear()
    response = await client.post("/api/v1/auth/session/")
    assert response.status_code == 401


async def test_request_otp_for_unknown_phone(client):
    response = await client.post(
        "/api/v1/auth/request-otp/",
        json={"phone_number": "5551234567", "country_code": "+1"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "No user found with this phone number"


async def test_verify_otp_with_wrong_code(client, db_session, fixed_otp):
    profile = await create_profile(db_session)
    _, session_id = await create_otp_session(db_session, "+15551234567", profile.id)

    response = await client.post("/api/v1/auth/verify-otp/", json={"session_id": session_id, "otp": "999999"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid OTP."
    assert "set-cookie" not in response.headers


async def test_onboarding_otp_session_cannot_sign_in(client, db_session, fixed_otp):
    _, session_id = await create_otp_session(db_session, "+15551234567")

    response = await client.post("/api/v1/auth/verify-otp/", json={"session_id": session_id, "otp": fixed_otp})

    assert response.status_code == 400


async def test_session_without_cookie(client):
    response = await client.post("/api/v1/auth/session/")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authenticated: Missing session cookie"


async def test_session_with_invalidated_cookie(client, db_session):
    profile = await create_profile(db_session)
    session_id = await sign_in(client, db_session, profile)
    await invalidate_session(db_session, session_id)

    response = await client.post("/api/v1/auth/session/")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authenticated: Invalid or expired session"
