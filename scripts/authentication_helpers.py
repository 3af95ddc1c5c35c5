import hashlib
import secrets
from datetime import datetime, timezone

from core.config import settings
from scripts.utils import as_utc


def generate_otp(length=6):
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_otp(otp: str) -> str:
    return hashlib.sha256(otp.encode()).hexdigest()


def is_expired(expires_at: datetime) -> bool:
    return datetime.now(timezone.utc) > as_utc(expires_at)


def full_phone(country_code: str, phone_number: str) -> str:
    return f"{country_code}{phone_number}"


def temp_email_for_phone(phone_number: str) -> str:
    """Email the auth identity is registered under; one per phone number."""
    return f"{phone_number}@{settings.TEMP_EMAIL_DOMAIN}"


def is_valid_phone_number(country_code: str, phone_number: str) -> bool:
    if not country_code or not country_code.startswith('+'):
        return False
    if not country_code[1:].isdigit():
        return False
    if not phone_number or not phone_number.isdigit():
        return False

    # E.164 caps the full number at 15 digits
    total_digits = len(country_code) - 1 + len(phone_number)
    return 7 <= len(phone_number) and total_digits <= 15
