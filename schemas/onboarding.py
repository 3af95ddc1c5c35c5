"""
Schemas for the onboarding wizard and the registration webhook.

The wizard posts camelCase keys; both spellings are accepted.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.enums import RegistrationType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeRange(CamelModel):
    start: str
    end: str


class OnboardingMedication(CamelModel):
    name: str
    dosage: str
    frequency: str
    time: str


class OnboardingData(CamelModel):
    registration_type: Optional[RegistrationType] = None
    phone_number: str = ""
    country_code: str = "+1"
    agreed_to_terms: bool = False
    otp: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    gender: str = ""
    language: str = "English"
    marital_status: str = ""
    relationship: Optional[str] = None
    loved_one_first_name: Optional[str] = None
    loved_one_last_name: Optional[str] = None
    loved_one_date_of_birth: Optional[str] = None
    loved_one_gender: Optional[str] = None
    loved_one_language: Optional[str] = "English"
    loved_one_marital_status: Optional[str] = None
    loved_one_phone_number: Optional[str] = None
    loved_one_country_code: Optional[str] = "+1"
    loved_one_otp: Optional[str] = None
    call_time: str = ""
    custom_time_range: Optional[TimeRange] = None
    medications: List[OnboardingMedication] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    # OTP sessions proving ownership of the submitted phone numbers
    otp_session_id: Optional[str] = None
    loved_one_otp_session_id: Optional[str] = None


class StepValidationRequest(CamelModel):
    step: str
    data: OnboardingData


class StepValidationResponse(CamelModel):
    step: str
    valid: bool
    errors: List[dict] = Field(default_factory=list)


class WizardStep(CamelModel):
    index: int
    name: str
    progress: float


class WizardStepsResponse(CamelModel):
    registration_type: Optional[RegistrationType] = None
    total_steps: int
    steps: List[WizardStep]


class PhoneCheckRequest(CamelModel):
    phone_number: str
    country_code: str


class PhoneCheckResponse(CamelModel):
    exists: bool


class RegistrationResult(CamelModel):
    user_id: int
    profile_id: int
    elderly_profile_id: int


class LovedOnePayload(CamelModel):
    phone_number: str
    country_code: str
    first_name: str
    last_name: str
    date_of_birth: str
    gender: str
    language: str
    marital_status: str
    relationship: str


class RegistrationWebhookPayload(CamelModel):
    user_id: int
    profile_id: int
    elderly_profile_id: int
    registration_type: RegistrationType
    phone_number: str
    country_code: str
    first_name: str
    last_name: str
    date_of_birth: str
    gender: str
    language: str
    marital_status: str
    call_time_preference: str
    medications: List[OnboardingMedication] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    loved_one: Optional[LovedOnePayload] = None


class CleanupRequest(CamelModel):
    phone_number: Optional[str] = None
    country_code: Optional[str] = None
