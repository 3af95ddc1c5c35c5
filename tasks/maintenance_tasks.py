"""
Periodic housekeeping run by Celery beat.

The job bodies take a synchronous session so they can be called directly;
the Celery tasks open one from ``SessionLocal`` per run.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import Session

from celery_app import celery_app
from core.config import settings
from core.database import SessionLocal
from models.call import Call, CallTranscript
from models.enums import AlertSeverity, AlertType, CallStatus
from models.family import FamilyMemberAlert
from models.profile import ElderlyProfile

logger = logging.getLogger(__name__)


def purge_expired_transcripts(db: Session) -> int:
    """Delete transcripts whose retention window has passed; returns the count removed."""
    now = datetime.now(timezone.utc)
    try:
        result = db.execute(
            delete(CallTranscript)
            .where(CallTranscript.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error purging expired transcripts: {e}")
        raise
    logger.info(f"Purged {result.rowcount} expired call transcripts")
    return result.rowcount


def raise_no_conversation_alerts(db: Session, days: int = None) -> int:
    """Alert caregivers whose loved one had no successful call in ``days`` days.

    At most one unacknowledged ``no_conversation`` alert is kept per elderly
    profile and caregiver. Returns the number of alerts created.
    """
    days = days if days is not None else settings.NO_CONVERSATION_ALERT_DAYS
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)

    recent_call = exists().where(
        Call.elderly_profile_id == ElderlyProfile.id,
        Call.call_status == CallStatus.SUCCESSFUL,
        Call.started_at >= cutoff,
    )
    open_alert = exists().where(
        FamilyMemberAlert.elderly_profile_id == ElderlyProfile.id,
        FamilyMemberAlert.family_member_id == ElderlyProfile.caregiver_profile_id,
        FamilyMemberAlert.alert_type == AlertType.NO_CONVERSATION,
        FamilyMemberAlert.is_acknowledged.is_(False),
    )
    silent_profiles = db.execute(
        select(ElderlyProfile).where(
            ElderlyProfile.caregiver_profile_id.is_not(None),
            ~recent_call,
            ~open_alert,
        )
    ).scalars().all()

    try:
        for elderly_profile in silent_profiles:
            db.add(FamilyMemberAlert(
                elderly_profile_id=elderly_profile.id,
                family_member_id=elderly_profile.caregiver_profile_id,
                alert_type=AlertType.NO_CONVERSATION,
                severity=AlertSeverity.MEDIUM,
                title="No recent conversation",
                description=(
                    f"{elderly_profile.first_name} has not had a conversation "
                    f"in the last {days} days."
                ),
            ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating no-conversation alerts: {e}")
        raise

    logger.info(f"Created {len(silent_profiles)} no-conversation alerts")
    return len(silent_profiles)


@celery_app.task(name="purge_expired_transcripts")
def purge_expired_transcripts_task():
    db = SessionLocal()
    try:
        return purge_expired_transcripts(db)
    finally:
        db.close()


@celery_app.task(name="raise_no_conversation_alerts")
def raise_no_conversation_alerts_task():
    db = SessionLocal()
    try:
        return raise_no_conversation_alerts(db)
    finally:
        db.close()
