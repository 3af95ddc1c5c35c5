"""
Verification code delivery over Twilio SMS.

When Twilio credentials are missing the service stays usable but sends
nothing, so local development and tests run without an account.
"""

from typing import Optional

from fastapi.concurrency import run_in_threadpool
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from core.config import settings
from core.logging import get_logger

logger = get_logger(__name__)


def mask_number(phone: str) -> str:
    return f"***{phone[-4:]}" if len(phone) > 4 else "***"


class SMSService:

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
    ):
        account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER

        if account_sid and auth_token and self.from_number:
            self.client = Client(account_sid, auth_token)
        else:
            self.client = None
            logger.warning("Twilio configuration incomplete, SMS delivery disabled")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def send_sms(self, to_number: str, body: str) -> bool:
        """Send one text message; returns False instead of raising on delivery failure."""
        if not self.enabled:
            logger.warning(f"SMS to {mask_number(to_number)} not sent, Twilio is not configured")
            return False

        try:
            # The Twilio client is blocking
            message = await run_in_threadpool(
                self.client.messages.create, body=body, from_=self.from_number, to=to_number
            )
        except TwilioException as e:
            logger.error(f"Failed to send SMS to {mask_number(to_number)}: {e}")
            return False

        logger.info(f"SMS sent to {mask_number(to_number)}, SID: {message.sid}")
        return True

    async def send_otp(self, to_number: str, otp_code: str) -> bool:
        body = (
            f"Your Aasha verification code is {otp_code}. "
            f"It expires in {settings.OTP_TTL_MINUTES} minutes."
        )
        return await self.send_sms(to_number, body)


sms_service = SMSService()
