"""
Form validation for onboarding and profile edits.

Dates are exchanged as ``YYYY-MM-DD`` strings, the format the wizard's date
inputs produce.
"""

import re
from datetime import date
from typing import List, Optional

# ASCII digits only, no trailing newline
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MIN_BIRTH_YEAR = 1900


def validate_date(date_string: Optional[str]) -> bool:
    if not date_string or not date_string.strip():
        return False

    if not DATE_PATTERN.fullmatch(date_string):
        return False

    year, month, day = (int(part) for part in date_string.split("-"))

    if year < MIN_BIRTH_YEAR or year > date.today().year:
        return False

    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def is_valid_date_in_past(date_string: str) -> bool:
    if not validate_date(date_string):
        return False
    return date.fromisoformat(date_string) <= date.today()


def sanitize_date(date_string: Optional[str]) -> Optional[str]:
    if not date_string or not date_string.strip():
        return None
    if not validate_date(date_string):
        return None
    return date_string.strip()


def validate_required_string(value: Optional[str]) -> bool:
    return bool(value) and value.strip() != ""


def validate_onboarding_data(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    date_of_birth: Optional[str] = None,
    gender: Optional[str] = None,
    language: Optional[str] = None,
    marital_status: Optional[str] = None,
) -> List[dict]:
    """Return one ``{field, message}`` entry per invalid profile field."""
    errors = []

    if not validate_required_string(first_name):
        errors.append({"field": "firstName", "message": "First name is required"})

    if not validate_required_string(last_name):
        errors.append({"field": "lastName", "message": "Last name is required"})

    if not validate_date(date_of_birth):
        errors.append({"field": "dateOfBirth", "message": "Valid date of birth is required (YYYY-MM-DD)"})

    if not validate_required_string(gender):
        errors.append({"field": "gender", "message": "Gender is required"})

    if not validate_required_string(language):
        errors.append({"field": "language", "message": "Language is required"})

    if not validate_required_string(marital_status):
        errors.append({"field": "maritalStatus", "message": "Marital status is required"})

    return errors
