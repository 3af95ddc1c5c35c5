"""
Enumerations shared by the ORM models and the API schemas.
"""

from enum import Enum as PyEnum
from sqlalchemy import Enum as SQLEnum


def enum_type(enum_cls, name: str) -> SQLEnum:
    """Column type storing the enum values rather than member names."""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class RegistrationType(str, PyEnum):
    MYSELF = "myself"
    LOVED_ONE = "loved-one"


class CallTimePreference(str, PyEnum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class MedicationStatus(str, PyEnum):
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


class EventType(str, PyEnum):
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    APPOINTMENT = "appointment"
    FAMILY_VISIT = "family_visit"
    HOLIDAY = "holiday"
    OTHER = "other"


class CallType(str, PyEnum):
    ONBOARDING = "onboarding"
    DAILY_CHECKIN = "daily_checkin"


class CallStatus(str, PyEnum):
    SUCCESSFUL = "successful"
    VOICEMAIL = "voicemail"
    FAILED = "failed"


class UserSentiment(str, PyEnum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


class AlertType(str, PyEnum):
    MEDICATION_MISSED = "medication_missed"
    NO_CONVERSATION = "no_conversation"
    MOOD_CHANGE = "mood_change"
    HEALTH_CONCERN = "health_concern"
    SYSTEM_NOTIFICATION = "system_notification"


class AlertSeverity(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ContentType(str, PyEnum):
    FAMILY_NEWS = "family_news"
    PHOTO = "photo"
    MILESTONE = "milestone"
    REMINDER = "reminder"
    CONVERSATION_TOPIC = "conversation_topic"


class Priority(str, PyEnum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class ActivityAction(str, PyEnum):
    PROFILE_UPDATED = "profile_updated"
    MEDICATION_ADDED = "medication_added"
    MEDICATION_UPDATED = "medication_updated"
    MEDICATION_DELETED = "medication_deleted"
    EVENT_CREATED = "event_created"
    EVENT_UPDATED = "event_updated"
    EVENT_DELETED = "event_deleted"
    CONTENT_UPLOADED = "content_uploaded"
    INTEREST_ADDED = "interest_added"
    INTEREST_REMOVED = "interest_removed"
    ALERT_ACKNOWLEDGED = "alert_acknowledged"


class EntityType(str, PyEnum):
    PROFILE = "profile"
    MEDICATION = "medication"
    EVENT = "event"
    INTEREST = "interest"
    CONTENT = "content"
    CONVERSATION = "conversation"
    ALERT = "alert"


class PromptCategory(str, PyEnum):
    MEMORY = "memory"
    FAMILY_UPDATE = "family_update"
    HEALTH_CHECK = "health_check"
    ACTIVITY_SUGGESTION = "activity_suggestion"
    GENERAL = "general"
