import pytest

from models.enums import CallTimePreference, RegistrationType
from schemas.onboarding import OnboardingData, OnboardingMedication, TimeRange
from services import onboarding_flow
from services.onboarding_service import map_call_time_to_preference

MYSELF = RegistrationType.MYSELF
LOVED_ONE = RegistrationType.LOVED_ONE


def test_myself_sequence():
    assert onboarding_flow.steps_for(MYSELF) == [
        "registration-type", "phone", "otp", "profile",
        "call-time", "medications", "interests", "thank-you",
    ]


def test_loved_one_sequence_adds_family_screens():
    steps = onboarding_flow.steps_for(LOVED_ONE)
    assert len(steps) == 11
    assert steps[3:7] == ["family-profile", "loved-one-profile", "loved-one-phone", "loved-one-otp"]


def test_unknown_type_follows_myself():
    assert onboarding_flow.steps_for(None) == onboarding_flow.MYSELF_STEPS
    assert onboarding_flow.total_steps(None) == 8


def test_navigation_is_clamped():
    assert onboarding_flow.next_step(MYSELF, 7) == 7
    assert onboarding_flow.next_step(LOVED_ONE, 7) == 8
    assert onboarding_flow.previous_step(MYSELF, 0) == 0
    assert onboarding_flow.step_at(MYSELF, 8) is None
    assert onboarding_flow.step_at(MYSELF, -1) is None
    assert onboarding_flow.step_at(LOVED_ONE, 10) == "thank-you"


def test_progress():
    assert onboarding_flow.progress(MYSELF, 0) == pytest.approx(12.5)
    assert onboarding_flow.progress(MYSELF, 7) == 100.0
    # 11 loved-one screens share a 9-step bar
    assert onboarding_flow.progress(LOVED_ONE, 8) == 100.0
    assert onboarding_flow.progress(LOVED_ONE, 10) == 100.0


def _fields(errors):
    return [e["field"] for e in errors]


def test_registration_type_step():
    assert _fields(onboarding_flow.validate_step("registration-type", OnboardingData())) == ["registrationType"]
    assert onboarding_flow.validate_step("registration-type", OnboardingData(registration_type=MYSELF)) == []


def test_phone_step_requires_terms():
    data = OnboardingData(phone_number="5551234567", country_code="+1")
    assert _fields(onboarding_flow.validate_step("phone", data)) == ["agreedToTerms"]

    data.agreed_to_terms = True
    assert onboarding_flow.validate_step("phone", data) == []

    data.phone_number = "12"
    assert _fields(onboarding_flow.validate_step("phone", data)) == ["phoneNumber"]


@pytest.mark.parametrize("otp,valid", [("123456", True), ("12345", False), ("12345a", False), ("", False)])
def test_otp_step(otp, valid):
    assert (onboarding_flow.validate_step("otp", OnboardingData(otp=otp)) == []) is valid


def test_loved_one_profile_fields_are_prefixed():
    errors = onboarding_flow.validate_step("loved-one-profile", OnboardingData(loved_one_first_name="Rosa"))
    fields = _fields(errors)
    assert "lovedOneLastName" in fields
    assert "lovedOneDateOfBirth" in fields
    assert "lovedOneFirstName" not in fields


def test_family_profile_requires_relationship():
    data = OnboardingData(first_name="Ana", last_name="Lopez")
    assert _fields(onboarding_flow.validate_step("family-profile", data)) == ["relationship"]


def test_call_time_step():
    assert _fields(onboarding_flow.validate_step("call-time", OnboardingData(call_time="noon"))) == ["callTime"]
    assert _fields(onboarding_flow.validate_step("call-time", OnboardingData(call_time="custom"))) == ["customTimeRange"]
    data = OnboardingData(call_time="custom", custom_time_range=TimeRange(start="09:00", end="10:00"))
    assert onboarding_flow.validate_step("call-time", data) == []


def test_medications_step_indexes_errors():
    data = OnboardingData(medications=[
        OnboardingMedication(name="Aspirin", dosage="100mg", frequency="daily", time="08:00"),
        OnboardingMedication(name="Metformin", dosage="", frequency="daily", time="20:00"),
    ])
    assert _fields(onboarding_flow.validate_step("medications", data)) == ["medications[1].dosage"]


def test_interests_step():
    assert _fields(onboarding_flow.validate_step("interests", OnboardingData())) == ["interests"]
    assert onboarding_flow.validate_step("interests", OnboardingData(interests=["gardening"])) == []


def test_unknown_step_raises():
    with pytest.raises(ValueError):
        onboarding_flow.validate_step("payment", OnboardingData())


@pytest.mark.parametrize(
    "call_time,start,expected",
    [
        ("morning", None, CallTimePreference.MORNING),
        ("evening", None, CallTimePreference.EVENING),
        ("custom", "06:30", CallTimePreference.MORNING),
        ("custom", "11:59", CallTimePreference.MORNING),
        ("custom", "12:00", CallTimePreference.AFTERNOON),
        ("custom", "16:45", CallTimePreference.AFTERNOON),
        ("custom", "17:00", CallTimePreference.EVENING),
        ("custom", "05:00", CallTimePreference.EVENING),
        ("custom", None, CallTimePreference.AFTERNOON),
        ("", None, CallTimePreference.AFTERNOON),
    ],
)
def test_map_call_time_to_preference(call_time, start, expected):
    time_range = TimeRange(start=start, end="23:00") if start else None
    assert map_call_time_to_preference(call_time, time_range) == expected
