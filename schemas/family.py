from datetime import datetime, date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import (
    AlertType, AlertSeverity, ContentType, Priority, ActivityAction, EntityType, PromptCategory
)


# -------- Alerts --------

class AlertCreate(BaseModel):
    elderly_profile_id: int
    family_member_id: int
    alert_type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    related_entity_id: Optional[str] = None


class AlertInDB(AlertCreate):
    id: int
    is_acknowledged: bool
    acknowledged_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------- Shared content --------

class SharedContentBase(BaseModel):
    content_type: ContentType
    title: str
    description: str
    file_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_approved: bool = True
    mention_priority: Priority = Priority.NORMAL
    expiration_date: Optional[date] = None


class SharedContentCreate(SharedContentBase):
    elderly_profile_id: int
    uploaded_by: int


class SharedContentUpdate(BaseModel):
    content_type: Optional[ContentType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None
    tags: Optional[List[str]] = None
    is_approved: Optional[bool] = None
    mention_priority: Optional[Priority] = None
    expiration_date: Optional[date] = None


class SharedContentInDB(SharedContentBase):
    id: int
    elderly_profile_id: int
    uploaded_by: int
    mentioned_count: int
    last_mentioned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------- Activity log --------

class ActivityLogCreate(BaseModel):
    elderly_profile_id: int
    family_member_id: int
    action_type: ActivityAction
    entity_type: EntityType
    entity_id: Optional[str] = None
    description: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ActivityLogInDB(ActivityLogCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------- Conversation prompts --------

class ConversationPromptBase(BaseModel):
    prompt_text: str
    category: PromptCategory
    priority: Priority = Priority.NORMAL
    is_active: bool = True


class ConversationPromptCreate(ConversationPromptBase):
    elderly_profile_id: int
    created_by: int


class ConversationPromptUpdate(BaseModel):
    prompt_text: Optional[str] = None
    category: Optional[PromptCategory] = None
    priority: Optional[Priority] = None
    is_active: Optional[bool] = None


class ConversationPromptInDB(ConversationPromptBase):
    id: int
    elderly_profile_id: int
    created_by: int
    used_count: int
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AlertRequest(BaseModel):
    alert_type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    related_entity_id: Optional[str] = None
