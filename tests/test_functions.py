import httpx
import pytest
from sqlalchemy import select

from api.deps import get_webhook_transport
from core.exceptions import ValidationFailedError
from main import app
from models.profile import AuthUser
from services.auth_cleanup_service import cleanup_orphaned_auth
from services.webhook_service import WebhookError, forward_registration, send_registration_webhook
from tests.factories import create_profile

CLEANUP_URL = "/api/v1/functions/cleanup-orphaned-auth"
WEBHOOK_ENDPOINT = "/api/v1/functions/send-registration-webhook"


async def add_orphan(db, phone_number="5551234567"):
    db.add(AuthUser(email=f"{phone_number}@aasha-temp.com", phone=f"+1{phone_number}"))
    await db.commit()


# ── cleanup-orphaned-auth ────────────────────────────────────────────────────


async def test_cleanup_requires_phone_and_country_code(db_session):
    with pytest.raises(ValidationFailedError):
        await cleanup_orphaned_auth(db_session, "5551234567", None)


async def test_cleanup_removes_orphan(db_session):
    await add_orphan(db_session)

    result = await cleanup_orphaned_auth(db_session, "5551234567", "+1")

    assert result == {
        "success": True,
        "message": "Orphaned auth user cleaned up successfully",
        "cleaned": True,
    }
    remaining = (await db_session.execute(select(AuthUser))).scalars().all()
    assert remaining == []


async def test_cleanup_keeps_users_with_a_profile(db_session):
    await create_profile(db_session)

    result = await cleanup_orphaned_auth(db_session, "5551234567", "+1")

    assert result["success"] is False
    assert result["hasProfile"] is True


async def test_cleanup_keeps_auth_user_owning_a_profile_under_another_country_code(db_session):
    await create_profile(db_session, country_code="+44")

    result = await cleanup_orphaned_auth(db_session, "5551234567", "+1")

    assert result["hasProfile"] is True
    assert len((await db_session.execute(select(AuthUser))).scalars().all()) == 1


async def test_cleanup_endpoint(client, db_session):
    response = await client.post(CLEANUP_URL, json={"phoneNumber": "5551234567", "countryCode": "+1"})
    assert response.status_code == 200
    assert response.json()["cleaned"] is False

    await add_orphan(db_session)
    response = await client.post(CLEANUP_URL, json={"phoneNumber": "5551234567", "countryCode": "+1"})
    assert response.json()["cleaned"] is True


async def test_cleanup_endpoint_rejects_missing_fields(client):
    response = await client.post(CLEANUP_URL, json={"phoneNumber": "5551234567"})

    assert response.status_code == 400
    assert response.json() == {"error": "Phone number and country code are required"}


async def test_cleanup_answers_cors_preflight(client):
    response = await client.options(
        CLEANUP_URL,
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


# ── send-registration-webhook ────────────────────────────────────────────────


async def test_forward_registration_returns_json_reply(webhook_url, webhook_transport, webhook_requests):
    reply = await forward_registration({"profileId": 1}, transport=webhook_transport)

    assert reply == {"ok": True}
    assert webhook_requests[0].method == "POST"


async def test_forward_registration_non_json_reply(webhook_url):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="accepted"))

    assert await forward_registration({}, transport=transport) == {"success": True}


async def test_forward_registration_raises_on_error_status(webhook_url):
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))

    with pytest.raises(WebhookError, match="503"):
        await forward_registration({}, transport=transport)


async def test_send_registration_webhook_swallows_failures(webhook_url):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))

    assert await send_registration_webhook({}, transport=transport) is None


async def test_webhook_endpoint_success(client, webhook_url):
    response = await client.post(WEBHOOK_ENDPOINT, json={"profileId": 7, "firstName": "Maria"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "webhookResponse": {"ok": True}}


async def test_webhook_endpoint_failure(client, webhook_url):
    app.dependency_overrides[get_webhook_transport] = lambda: httpx.MockTransport(
        lambda request: httpx.Response(500, text="boom")
    )

    response = await client.post(WEBHOOK_ENDPOINT, json={"profileId": 7})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Webhook failed with status 500"}


async def test_webhook_endpoint_without_url(client):
    response = await client.post(WEBHOOK_ENDPOINT, json={"profileId": 7})

    assert response.status_code == 500
    assert response.json()["success"] is False
