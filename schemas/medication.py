from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from models.enums import MedicationStatus


class MedicationBase(BaseModel):
    name: str
    dosage: str
    frequency: str
    time: str

    @field_validator("name", "dosage", "frequency", "time")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class MedicationCreate(MedicationBase):
    elderly_profile_id: int


class MedicationUpdate(BaseModel):
    name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    time: Optional[str] = None


class MedicationInDB(MedicationBase):
    id: int
    elderly_profile_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationTrackingRequest(BaseModel):
    scheduled_datetime: datetime
    status: MedicationStatus
    notes: Optional[str] = None


class MedicationTrackingInDB(BaseModel):
    id: int
    medication_id: int
    scheduled_datetime: datetime
    taken_datetime: Optional[datetime] = None
    status: MedicationStatus
    notes: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationAdherenceStats(BaseModel):
    total_scheduled: int
    total_taken: int
    total_missed: int
    total_skipped: int
    adherence_rate: int
