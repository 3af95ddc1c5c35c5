from celery import Celery
from core.config import settings
from celery.schedules import crontab

celery_app = Celery(
    settings.APP_NAME,
    broker=settings.celery_broker_url,
    backend=settings.celery_broker_url,
    include=["tasks.maintenance_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "daily-purge-expired-transcripts": {
            "task": "purge_expired_transcripts",
            "schedule": crontab(hour=3, minute=0),
        },
        "hourly-no-conversation-alerts": {
            "task": "raise_no_conversation_alerts",
            "schedule": crontab(minute=15),
        },
    }
)

celery_app.conf.task_annotations = {
    "*": {"max_retries": 3, "default_retry_delay": 5}
}
