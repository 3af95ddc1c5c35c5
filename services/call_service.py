"""
Retell post-call webhook processing and call analytics.

A call row may be created ahead of time when a call is placed; the webhook
then fills the newest such row for the elderly profile instead of inserting
a duplicate. Analysis, transcript and cost sub-records are best effort: a
failure to store one of them is logged and the call is still reported as
processed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import utcnow
from models.call import CallAnalysis, CallCost, CallTranscript
from models.enums import AlertSeverity, AlertType, CallStatus, UserSentiment
from repositories.call import CallRepository, DailyMedicineLogRepository
from repositories.family import AlertRepository
from repositories.profile import ElderlyProfileRepository
from schemas.call import (
    CallAnalytics,
    CallInDB,
    DailyMedicineLogInDB,
    MedicineAdherence,
    RetellWebhookData,
    SentimentCounts,
    WebhookProcessingResult,
)
from scripts.utils import days_ago, percent

logger = logging.getLogger(__name__)


def unwrap_webhook_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Retell posts ``{"event": ..., "call": {...}}``; older senders post the call object itself."""
    if isinstance(payload.get("call"), dict) and "event" in payload:
        return payload["call"]
    return payload


def _from_timestamp(value: int) -> datetime:
    # Retell timestamps are epoch seconds
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _as_bool(value: Any) -> bool:
    # Custom analysis fields may arrive as "true"/"false" strings
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_sentiment(value: Optional[str]) -> Optional[UserSentiment]:
    if not value:
        return None
    try:
        return UserSentiment(value)
    except ValueError:
        logger.warning(f"Ignoring unrecognised user sentiment {value!r}")
        return None


class CallService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.calls = CallRepository(db)
        self.medicine_log = DailyMedicineLogRepository(db)
        self.elderly_profiles = ElderlyProfileRepository(db)
        self.alerts = AlertRepository(db)

    async def process_retell_webhook(self, elderly_profile_id: int, payload: Dict[str, Any]) -> WebhookProcessingResult:
        try:
            data = RetellWebhookData.model_validate(unwrap_webhook_payload(payload))

            existing = await self.calls.get_by_retell_id(data.call_id)
            if existing:
                return WebhookProcessingResult(call_id=str(existing.id), success=True, error="Call already processed")

            if not await self.elderly_profiles.get(elderly_profile_id):
                raise LookupError(f"Elderly profile {elderly_profile_id} not found")

            duration_seconds = data.end_timestamp - data.start_timestamp if data.end_timestamp else 0
            values = {
                "retell_call_id": data.call_id,
                "call_type": data.call_type,
                "call_status": data.call_status,
                "started_at": _from_timestamp(data.start_timestamp),
                "ended_at": _from_timestamp(data.end_timestamp) if data.end_timestamp else None,
                "duration_seconds": duration_seconds,
                "agent_id": data.agent_id or None,
                "raw_webhook_data": data.model_dump(mode="json"),
                "retell_webhook_received": True,
            }

            pre_populated = await self.calls.get_latest_unfilled(elderly_profile_id)
            if pre_populated:
                call = await self.calls.update(pre_populated, values)
                logger.info(f"Updated pre-populated call {call.id} with Retell call {data.call_id}")
            else:
                call = await self.calls.create({"elderly_profile_id": elderly_profile_id, **values})
                logger.info(f"Created call {call.id} for Retell call {data.call_id}")
            call_id = call.id
        except Exception as e:
            logger.error(f"Error processing Retell webhook: {e}")
            return WebhookProcessingResult(call_id="", success=False, error=str(e))

        await self._save_sub_records(call_id, elderly_profile_id, data)
        return WebhookProcessingResult(call_id=str(call_id), success=True)

    async def _save_sub_records(self, call_id: int, elderly_profile_id: int, data: RetellWebhookData):
        analysis = data.call_analysis
        custom_data = (analysis.custom_analysis_data or {}) if analysis else {}
        medicine_taken = custom_data.get("medicine_taken")
        if medicine_taken is not None:
            medicine_taken = _as_bool(medicine_taken)

        if analysis:
            try:
                await self.calls.add_record(CallAnalysis(
                    call_id=call_id,
                    call_summary=analysis.call_summary or "",
                    user_sentiment=_as_sentiment(analysis.user_sentiment),
                    call_successful=analysis.call_successful or False,
                    in_voicemail=analysis.in_voicemail or False,
                    medicine_taken=medicine_taken,
                    custom_analysis_data=custom_data,
                ))
            except SQLAlchemyError as e:
                logger.error(f"Error inserting call analysis: {e}")

            if medicine_taken is not None:
                await self._track_medicine_from_call(elderly_profile_id, call_id, medicine_taken)

        if data.transcript:
            try:
                await self.calls.add_record(CallTranscript(
                    call_id=call_id,
                    transcript_text=data.transcript,
                    speaker_segments=data.transcript_with_tool_calls or [],
                    expires_at=utcnow() + timedelta(days=settings.TRANSCRIPT_RETENTION_DAYS),
                ))
            except SQLAlchemyError as e:
                logger.error(f"Error inserting call transcript: {e}")

        if data.call_cost:
            cost = data.call_cost
            try:
                await self.calls.add_record(CallCost(
                    call_id=call_id,
                    combined_cost=cost.combined_cost or 0,
                    llm_tokens_used=cost.llm_tokens_used or 0,
                    llm_average_tokens=cost.llm_average_tokens or 0,
                    llm_num_requests=cost.llm_num_requests or 0,
                    llm_token_values=cost.llm_token_values or [],
                ))
            except SQLAlchemyError as e:
                logger.error(f"Error inserting call costs: {e}")

    async def _track_medicine_from_call(self, elderly_profile_id: int, call_id: int, medicine_taken: bool):
        try:
            await self.medicine_log.upsert(elderly_profile_id, utcnow().date(), medicine_taken, call_id)
        except SQLAlchemyError as e:
            logger.error(f"Error tracking medicine from call: {e}")
            return

        if medicine_taken:
            return

        elderly_profile = await self.elderly_profiles.get(elderly_profile_id)
        if not elderly_profile or not elderly_profile.caregiver_profile_id:
            return
        try:
            await self.alerts.create({
                "elderly_profile_id": elderly_profile_id,
                "family_member_id": elderly_profile.caregiver_profile_id,
                "alert_type": AlertType.MEDICATION_MISSED,
                "severity": AlertSeverity.HIGH,
                "title": "Medication missed",
                "description": (
                    f"{elderly_profile.first_name} said they had not taken their medicine "
                    f"during today's call."
                ),
                "related_entity_id": str(call_id),
            })
        except SQLAlchemyError as e:
            logger.error(f"Error creating medication missed alert: {e}")

    async def get_call_analytics(self, elderly_profile_id: int, days: int = 30) -> CallAnalytics:
        calls = await self.calls.list_for_profile(elderly_profile_id, since=days_ago(days))

        total_calls = len(calls)
        total_duration = sum(call.duration_seconds or 0 for call in calls)
        total_cost = sum(call.call_costs[0].combined_cost or 0 for call in calls if call.call_costs)

        sentiment_counts = SentimentCounts()
        for call in calls:
            sentiment = call.call_analysis[0].user_sentiment if call.call_analysis else None
            if isinstance(sentiment, UserSentiment):
                setattr(sentiment_counts, sentiment.value, getattr(sentiment_counts, sentiment.value) + 1)

        return CallAnalytics(
            total_calls=total_calls,
            successful_calls=sum(1 for c in calls if c.call_status == CallStatus.SUCCESSFUL),
            voicemail_calls=sum(1 for c in calls if c.call_status == CallStatus.VOICEMAIL),
            failed_calls=sum(1 for c in calls if c.call_status == CallStatus.FAILED),
            total_duration=total_duration,
            avg_duration=int(total_duration / total_calls + 0.5) if total_calls else 0,
            total_cost=f"{total_cost:.2f}",
            sentiment_counts=sentiment_counts,
            calls=[CallInDB.model_validate(call) for call in calls],
        )

    async def get_medicine_adherence(self, elderly_profile_id: int, days: int = 30) -> MedicineAdherence:
        since = days_ago(days).date()
        logs = await self.medicine_log.list_since(elderly_profile_id, since)

        total_days = len(logs)
        taken_days = sum(1 for log in logs if log.medicine_taken)
        return MedicineAdherence(
            total_days=total_days,
            taken_days=taken_days,
            missed_days=total_days - taken_days,
            adherence_rate=percent(taken_days, total_days),
            logs=[DailyMedicineLogInDB.model_validate(log) for log in logs],
        )
