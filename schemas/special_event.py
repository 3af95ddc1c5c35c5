from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from models.enums import EventType


class SpecialEventBase(BaseModel):
    event_name: str
    event_date: date
    event_type: EventType
    description: str = ""
    is_recurring: bool = False


class SpecialEventCreate(SpecialEventBase):
    elderly_profile_id: int


class SpecialEventUpdate(BaseModel):
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    event_type: Optional[EventType] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None


class SpecialEventInDB(SpecialEventBase):
    id: int
    elderly_profile_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
