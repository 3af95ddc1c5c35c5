"""
Onboarding wizard navigation and per-step validation.

The wizard is a fixed, linear sequence of screens selected by the
registration type. Navigation never skips or reorders screens; the only
branching happens at step 0 where the registration type is chosen.
"""

from typing import List, Optional

from models.enums import RegistrationType
from schemas.onboarding import OnboardingData
from scripts.authentication_helpers import is_valid_phone_number
from scripts.validation import validate_onboarding_data, validate_required_string

MYSELF_STEPS = [
    "registration-type",
    "phone",
    "otp",
    "profile",
    "call-time",
    "medications",
    "interests",
    "thank-you",
]

LOVED_ONE_STEPS = [
    "registration-type",
    "phone",
    "otp",
    "family-profile",
    "loved-one-profile",
    "loved-one-phone",
    "loved-one-otp",
    "call-time",
    "medications",
    "interests",
    "thank-you",
]

CALL_TIME_OPTIONS = ("morning", "afternoon", "evening", "custom")
OTP_LENGTH = 6


def _is_loved_one(registration_type) -> bool:
    return registration_type in (RegistrationType.LOVED_ONE, RegistrationType.LOVED_ONE.value)


def steps_for(registration_type: Optional[RegistrationType]) -> List[str]:
    """Screens shown for a registration type; unknown types follow ``myself``."""
    if _is_loved_one(registration_type):
        return LOVED_ONE_STEPS
    return MYSELF_STEPS


def total_steps(registration_type: Optional[RegistrationType]) -> int:
    """Length of the progress bar.

    The loved-one bar counts 9 steps even though its sequence has 11
    screens, so progress is clamped at 100 on the last screens.
    """
    return 9 if _is_loved_one(registration_type) else 8


def step_at(registration_type: Optional[RegistrationType], index: int) -> Optional[str]:
    steps = steps_for(registration_type)
    if index < 0 or index >= len(steps):
        return None
    return steps[index]


def next_step(registration_type: Optional[RegistrationType], index: int) -> int:
    return min(index + 1, len(steps_for(registration_type)) - 1)


def previous_step(registration_type: Optional[RegistrationType], index: int) -> int:
    return max(index - 1, 0)


def progress(registration_type: Optional[RegistrationType], index: int) -> float:
    value = (index + 1) / total_steps(registration_type) * 100
    return min(value, 100.0)


def _error(field: str, message: str) -> dict:
    return {"field": field, "message": message}


def _prefixed(errors: List[dict], prefix: str) -> List[dict]:
    return [
        _error(prefix + e["field"][0].upper() + e["field"][1:], e["message"])
        for e in errors
    ]


def _validate_otp(field: str, otp: Optional[str]) -> List[dict]:
    if not otp or len(otp) != OTP_LENGTH or not otp.isdigit():
        return [_error(field, "Enter the 6-digit verification code")]
    return []


def validate_step(step: str, data: OnboardingData) -> List[dict]:
    """Validate the fields a single wizard screen collects.

    Returns a list of ``{field, message}`` errors; an empty list means the
    user may advance. Raises ``ValueError`` for an unknown step name.
    """
    if step == "registration-type":
        if data.registration_type is None:
            return [_error("registrationType", "Please choose who you are registering")]
        return []

    if step == "phone":
        errors = []
        if not validate_required_string(data.phone_number):
            errors.append(_error("phoneNumber", "Phone number is required"))
        elif not is_valid_phone_number(data.country_code, data.phone_number):
            errors.append(_error("phoneNumber", "Enter a valid phone number"))
        if not data.agreed_to_terms:
            errors.append(_error("agreedToTerms", "You must agree to the terms to continue"))
        return errors

    if step == "otp":
        return _validate_otp("otp", data.otp)

    if step == "profile":
        return validate_onboarding_data(
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            language=data.language,
            marital_status=data.marital_status,
        )

    if step == "family-profile":
        errors = []
        if not validate_required_string(data.first_name):
            errors.append(_error("firstName", "First name is required"))
        if not validate_required_string(data.last_name):
            errors.append(_error("lastName", "Last name is required"))
        if not validate_required_string(data.relationship):
            errors.append(_error("relationship", "Relationship is required"))
        return errors

    if step == "loved-one-profile":
        errors = validate_onboarding_data(
            first_name=data.loved_one_first_name,
            last_name=data.loved_one_last_name,
            date_of_birth=data.loved_one_date_of_birth,
            gender=data.loved_one_gender,
            language=data.loved_one_language,
            marital_status=data.loved_one_marital_status,
        )
        return _prefixed(errors, "lovedOne")

    if step == "loved-one-phone":
        if not validate_required_string(data.loved_one_phone_number):
            return [_error("lovedOnePhoneNumber", "Phone number is required")]
        if not is_valid_phone_number(data.loved_one_country_code or "", data.loved_one_phone_number):
            return [_error("lovedOnePhoneNumber", "Enter a valid phone number")]
        return []

    if step == "loved-one-otp":
        return _validate_otp("lovedOneOtp", data.loved_one_otp)

    if step == "call-time":
        if data.call_time not in CALL_TIME_OPTIONS:
            return [_error("callTime", "Please choose a call time")]
        if data.call_time == "custom" and (
            data.custom_time_range is None or not validate_required_string(data.custom_time_range.start)
        ):
            return [_error("customTimeRange", "Please choose a start time")]
        return []

    if step == "medications":
        errors = []
        for position, medication in enumerate(data.medications):
            for field in ("name", "dosage", "frequency", "time"):
                if not validate_required_string(getattr(medication, field)):
                    errors.append(_error(f"medications[{position}].{field}", f"Medication {field} is required"))
        return errors

    if step == "interests":
        if not data.interests:
            return [_error("interests", "Please choose at least one interest")]
        return []

    if step == "thank-you":
        return []

    raise ValueError(f"Unknown onboarding step: {step}")
