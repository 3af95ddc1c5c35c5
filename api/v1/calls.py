import hashlib
import hmac
import json
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from schemas.call import WebhookProcessingResult
from services.call_service import CallService

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-retell-signature"


def verify_signature(raw_payload: bytes, signature: str, secret: str) -> bool:
    """Hex HMAC-SHA256 of the raw request body keyed with the webhook secret."""
    digest = hmac.new(secret.encode("utf-8"), raw_payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(digest, signature.strip())


@router.post("/webhook/{elderly_profile_id}", response_model=WebhookProcessingResult)
async def retell_webhook(elderly_profile_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    start_time = time.time()
    request_id = f"retell_{elderly_profile_id}_{int(start_time * 1000)}"

    raw_payload = await request.body()

    secret = settings.RETELL_WEBHOOK_SECRET
    if secret:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning(f"Request {request_id}: Missing signature header")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing signature")
        if not verify_signature(raw_payload, signature, secret):
            logger.warning(f"Request {request_id}: Invalid signature")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    try:
        payload = json.loads(raw_payload.decode("utf-8"))
    except ValueError as e:
        logger.error(f"Request {request_id}: Invalid JSON payload: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")

    result = await CallService(db).process_retell_webhook(elderly_profile_id, payload)

    duration = time.time() - start_time
    if not result.success:
        logger.error(f"Request {request_id}: Webhook processing failed in {duration:.2f}s: {result.error}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=result.model_dump())

    logger.info(f"Request {request_id}: Processed call {result.call_id} in {duration:.2f}s")
    return result
