"""
Family/caregiver models: alerts, shared content, activity log, conversation prompts.
"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, JSON

from core.database import Base, utcnow
from models.enums import (
    AlertType, AlertSeverity, ContentType, Priority, ActivityAction, EntityType, PromptCategory, enum_type
)


class FamilyMemberAlert(Base):
    __tablename__ = "family_member_alerts"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    family_member_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    alert_type = Column(enum_type(AlertType, "alert_type"), nullable=False)
    severity = Column(enum_type(AlertSeverity, "alert_severity"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    related_entity_id = Column(String(100), nullable=True)
    is_acknowledged = Column(Boolean, nullable=False, default=False)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class SharedContent(Base):
    """News, photos and topics a family member wants the companion to mention."""

    __tablename__ = "shared_content"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_by = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    content_type = Column(enum_type(ContentType, "content_type"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    file_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_approved = Column(Boolean, nullable=False, default=True)
    mention_priority = Column(enum_type(Priority, "mention_priority"), nullable=False, default=Priority.NORMAL)
    expiration_date = Column(Date, nullable=True)
    mentioned_count = Column(Integer, nullable=False, default=0)
    last_mentioned_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class FamilyActivityLog(Base):
    __tablename__ = "family_activity_log"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    family_member_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    action_type = Column(enum_type(ActivityAction, "activity_action"), nullable=False)
    entity_type = Column(enum_type(EntityType, "entity_type"), nullable=False)
    entity_id = Column(String(100), nullable=True)
    description = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class ConversationPrompt(Base):
    __tablename__ = "conversation_prompts"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    prompt_text = Column(Text, nullable=False)
    category = Column(enum_type(PromptCategory, "prompt_category"), nullable=False)
    priority = Column(enum_type(Priority, "prompt_priority"), nullable=False, default=Priority.NORMAL)
    is_active = Column(Boolean, nullable=False, default=True)
    used_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
