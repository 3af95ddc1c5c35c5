from datetime import datetime, date
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from models.enums import CallTimePreference
from scripts.validation import validate_date, validate_required_string


class ElderlyProfileBase(BaseModel):
    phone_number: str
    country_code: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: str
    language: str
    marital_status: str
    call_time_preference: CallTimePreference
    relationship_to_caregiver: Optional[str] = None


class ElderlyProfileCreate(ElderlyProfileBase):
    profile_id: Optional[int] = None
    caregiver_profile_id: Optional[int] = None


class ElderlyProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    language: Optional[str] = None
    marital_status: Optional[str] = None
    call_time_preference: Optional[CallTimePreference] = None

    @field_validator("first_name", "last_name", "gender", "language", "marital_status", mode="before")
    @classmethod
    def required_when_present(cls, value, info):
        # Omit a field to leave it unchanged; null or blank is never stored
        if not isinstance(value, str) or not validate_required_string(value):
            raise ValueError(f"{info.field_name} must not be empty")
        return value.strip()

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def valid_birth_date(cls, value):
        if value is None or (isinstance(value, str) and not validate_date(value)):
            raise ValueError("Valid date of birth is required (YYYY-MM-DD)")
        return value

    @field_validator("call_time_preference", mode="before")
    @classmethod
    def call_time_required(cls, value):
        if value is None:
            raise ValueError("call_time_preference must not be empty")
        return value


class ElderlyProfileInDB(ElderlyProfileBase):
    id: int
    profile_id: Optional[int] = None
    caregiver_profile_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
