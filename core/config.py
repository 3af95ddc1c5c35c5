"""
Configuration settings for Aasha Backend.

Uses Pydantic Settings for environment variable management.
"""

import os
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Logging Control
    ENABLE_FILE_LOGGING: bool = Field(default=True)
    ENABLE_REQUEST_LOGGING: bool = Field(default=True)
    LOGS_DIR: str = Field(default="logs")

    # Application
    APP_NAME: str = Field(default="Aasha Backend")
    VERSION: str = Field(default="1.0.0")

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
        "https://aasha.care",
    ]

    DATABASE_URL: Optional[str] = Field(default=None)
    PRODUCTION_DATABASE_URL: Optional[str] = Field(default=None)
    DATABASE_POOL_SIZE: int = Field(default=10)
    DATABASE_MAX_OVERFLOW: int = Field(default=20)

    # Auth
    OTP_TTL_MINUTES: int = 10
    MAX_ATTEMPTS: int = 5
    SESSION_DURATION: int = 60 * 24 * 30  # minutes, 30 days
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_COOKIE_SECURE: bool = True
    TEMP_EMAIL_DOMAIN: str = "aasha-temp.com"

    # Security
    SECRET_KEY: str = Field(default="secret-key")
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: Optional[str] = Field(default=None)

    # SMS Configuration (Twilio)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(default=None)
    TWILIO_AUTH_TOKEN: Optional[str] = Field(default=None)
    TWILIO_PHONE_NUMBER: Optional[str] = Field(default=None)

    # Registration webhook (call initiation workflow)
    REGISTRATION_WEBHOOK_URL: Optional[str] = Field(default=None)
    REGISTRATION_WEBHOOK_TIMEOUT: float = Field(default=10.0)

    # Retell post-call webhook
    RETELL_WEBHOOK_SECRET: Optional[str] = Field(default=None)

    # Call data retention and alerting
    TRANSCRIPT_RETENTION_DAYS: int = Field(default=90)
    NO_CONVERSATION_ALERT_DAYS: int = Field(default=2)

    # Sentry (Optional)
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_ENVIRONMENT: str = Field(default="development")

    @property
    def database_url(self) -> str:
        if self.ENV == "development":
            return self.DATABASE_URL or "sqlite+aiosqlite:///./aasha.db"
        return self.PRODUCTION_DATABASE_URL or ""

    @property
    def celery_broker_url(self) -> str:
        return self.REDIS_URL


def get_env_file() -> str:
    """Get the appropriate environment file based on ENV setting."""
    env_file = f".env.{os.getenv('ENV', 'development')}"
    if os.path.exists(env_file):
        return env_file
    return ".env"


settings = Settings(_env_file=get_env_file())
