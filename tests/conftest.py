"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
db_session       - AsyncSession on a fresh in-memory SQLite database
sync_session     - blocking Session on its own in-memory database (Celery jobs)
webhook_requests - outbound webhook requests captured by an httpx MockTransport
client           - httpx AsyncClient wired to the app, database and mock transport
fixed_otp        - pins generated verification codes to ``FIXED_OTP``
"""

import os

# Settings are read at import time
os.environ["ENV"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["ENABLE_REQUEST_LOGGING"] = "false"
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["SENTRY_DSN"] = ""
os.environ["REGISTRATION_WEBHOOK_URL"] = ""
os.environ["RETELL_WEBHOOK_SECRET"] = ""

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from api.deps import get_webhook_transport
from core.database import Base, get_db
from main import app
from models.enums import RegistrationType
from tests.factories import create_elderly_profile, create_profile

FIXED_OTP = "123456"
WEBHOOK_URL = "https://hooks.example.test/registration"


# ── Database ─────────────────────────────────────────────────────────────────


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def sync_session():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()
    engine.dispose()


# ── HTTP ─────────────────────────────────────────────────────────────────────


@pytest.fixture
def webhook_requests():
    """Requests sent to the registration webhook; the mock answers ``{"ok": true}``."""
    return []


@pytest.fixture
def webhook_transport(webhook_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        webhook_requests.append(request)
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler)


@pytest.fixture
async def client(session_factory, webhook_transport):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_webhook_transport] = lambda: webhook_transport

    # https so the Secure session cookie is sent back
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="https://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def fixed_otp(monkeypatch):
    monkeypatch.setattr("services.authentication_service.generate_otp", lambda: FIXED_OTP)
    return FIXED_OTP


@pytest.fixture
def webhook_url(monkeypatch):
    from core.config import settings

    monkeypatch.setattr(settings, "REGISTRATION_WEBHOOK_URL", WEBHOOK_URL)
    return WEBHOOK_URL


# ── Domain rows ──────────────────────────────────────────────────────────────


@pytest.fixture
async def myself_user(db_session):
    """A ``myself`` registrant and the elderly profile they manage."""
    profile = await create_profile(db_session)
    elderly_profile = await create_elderly_profile(db_session, profile_id=profile.id)
    return profile, elderly_profile


@pytest.fixture
async def caregiver(db_session):
    """A ``loved-one`` registrant caring for one elderly profile."""
    profile = await create_profile(
        db_session,
        phone_number="5559876543",
        first_name="Ana",
        registration_type=RegistrationType.LOVED_ONE,
    )
    elderly_profile = await create_elderly_profile(
        db_session, caregiver_profile_id=profile.id, phone_number="5550001111"
    )
    return profile, elderly_profile

