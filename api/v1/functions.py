"""
Edge functions called directly by the web client.

These keep the bare ``{"error": ...}`` reply shape the client expects
instead of the application-wide error envelope.
"""

from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_webhook_transport
from core.database import get_db
from core.exceptions import ValidationFailedError
from core.logging import get_logger
from schemas.onboarding import CleanupRequest
from services.auth_cleanup_service import cleanup_orphaned_auth
from services.webhook_service import WebhookError, forward_registration

logger = get_logger(__name__)

router = APIRouter()


@router.post("/cleanup-orphaned-auth")
async def cleanup_orphaned_auth_user(request: CleanupRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await cleanup_orphaned_auth(db, request.phone_number, request.country_code)
    except ValidationFailedError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except SQLAlchemyError as e:
        logger.error("Error cleaning up orphaned auth user", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to cleanup orphaned auth user", "details": str(e)},
        )


@router.post("/send-registration-webhook")
async def send_registration_webhook(
    payload: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_webhook_transport),
):
    logger.info("Forwarding registration to webhook")
    try:
        webhook_response = await forward_registration(payload, transport=transport)
    except (WebhookError, httpx.HTTPError) as e:
        logger.error("Error in send-registration-webhook", error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
    return {"success": True, "webhookResponse": webhook_response}
