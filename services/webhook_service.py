"""
Forwarding of completed registrations to the call-initiation workflow.
"""

from typing import Any, Optional

import httpx

from core.config import settings
from core.logging import get_logger

logger = get_logger(__name__)


class WebhookError(Exception):
    """The registration webhook answered with a non-2xx status."""


async def forward_registration(
    payload: dict,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """POST a registration to ``REGISTRATION_WEBHOOK_URL`` and return its JSON reply.

    Non-JSON replies are reported as ``{"success": True}``. Raises
    ``WebhookError`` for non-2xx responses and when no URL is configured.
    """
    url = settings.REGISTRATION_WEBHOOK_URL
    if not url:
        raise WebhookError("Registration webhook URL is not configured")

    async with httpx.AsyncClient(transport=transport, timeout=settings.REGISTRATION_WEBHOOK_TIMEOUT) as client:
        response = await client.post(url, json=payload)

    if not response.is_success:
        logger.error("Webhook failed", status_code=response.status_code, body=response.text)
        raise WebhookError(f"Webhook failed with status {response.status_code}")

    try:
        return response.json()
    except ValueError:
        return {"success": True}


async def send_registration_webhook(
    payload: dict,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Fire-and-forget variant used after registration; failures are only logged."""
    if not settings.REGISTRATION_WEBHOOK_URL:
        logger.warning("Registration webhook URL not configured, skipping webhook")
        return

    try:
        await forward_registration(payload, transport=transport)
    except (WebhookError, httpx.HTTPError) as e:
        logger.error("Error sending registration webhook", error=str(e))
