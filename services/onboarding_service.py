"""
Registration of new accounts from completed onboarding wizard data.
"""

import logging
from datetime import date
from typing import Optional

import httpx
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AashaError, AuthenticationError, ConflictError, RegistrationError, ValidationFailedError
from models.enums import CallTimePreference, RegistrationType
from models.profile import AuthUser, ElderlyProfile, Profile
from repositories.interest import InterestRepository
from repositories.medication import MedicationRepository
from repositories.profile import AuthUserRepository, ElderlyProfileRepository, ProfileRepository
from schemas.onboarding import (
    LovedOnePayload,
    OnboardingData,
    RegistrationResult,
    RegistrationWebhookPayload,
    TimeRange,
)
from scripts.authentication_helpers import full_phone, is_valid_phone_number, temp_email_for_phone
from scripts.validation import sanitize_date, validate_onboarding_data, validate_required_string
from services.auth_cleanup_service import cleanup_orphaned_auth
from services.authentication_service import is_contact_verified
from services.webhook_service import send_registration_webhook

logger = logging.getLogger(__name__)

PARTIAL_REGISTRATION_MESSAGE = (
    "This phone number has a partial registration. Please try again in a few moments."
)


def map_call_time_to_preference(call_time: str, custom_time_range: Optional[TimeRange] = None) -> CallTimePreference:
    """Collapse the wizard's call-time choice into a stored preference bucket.

    A custom range is bucketed by its start hour: 06-11 morning, 12-16
    afternoon, anything else evening. Unknown choices default to afternoon.
    """
    if call_time in ("morning", "afternoon", "evening"):
        return CallTimePreference(call_time)

    if call_time == "custom" and custom_time_range:
        try:
            start_hour = int(custom_time_range.start.split(":")[0])
        except ValueError:
            return CallTimePreference.EVENING
        if 6 <= start_hour < 12:
            return CallTimePreference.MORNING
        if 12 <= start_hour < 17:
            return CallTimePreference.AFTERNOON
        return CallTimePreference.EVENING

    return CallTimePreference.AFTERNOON


class OnboardingService:
    """Turns a finished wizard submission into auth user, profile and elderly profile rows."""

    def __init__(self, db: AsyncSession, webhook_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.db = db
        self.webhook_transport = webhook_transport
        self.auth_users = AuthUserRepository(db)
        self.profiles = ProfileRepository(db)
        self.elderly_profiles = ElderlyProfileRepository(db)
        self.medications = MedicationRepository(db)
        self.interests = InterestRepository(db)

    async def check_phone_number_exists(self, phone_number: str, country_code: str) -> bool:
        """Whether a profile is already registered for this phone; lookup errors read as ``False``."""
        try:
            return await self.profiles.get_by_phone(phone_number, country_code) is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking phone number: {e}")
            return False

    async def save_onboarding_data(self, data: OnboardingData) -> RegistrationResult:
        try:
            if data.registration_type == RegistrationType.MYSELF:
                return await self._save_myself_registration(data)
            elif data.registration_type == RegistrationType.LOVED_ONE:
                return await self._save_loved_one_registration(data)
            raise RegistrationError("Invalid registration type")
        except AashaError as e:
            logger.error(f"Error saving onboarding data: {e.message}")
            raise

    async def _save_myself_registration(self, data: OnboardingData) -> RegistrationResult:
        errors = validate_onboarding_data(
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            language=data.language,
            marital_status=data.marital_status,
        )
        if errors:
            raise ValidationFailedError("Invalid onboarding data", errors)

        await self._ensure_phone_verified(data.otp_session_id, data.country_code, data.phone_number)

        profile = await self._create_account(data, RegistrationType.MYSELF)
        call_time_preference = map_call_time_to_preference(data.call_time, data.custom_time_range)

        elderly_profile = await self._create_elderly_profile(ElderlyProfile(
            profile_id=profile.id,
            caregiver_profile_id=None,
            phone_number=data.phone_number,
            country_code=data.country_code,
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=date.fromisoformat(sanitize_date(data.date_of_birth)),
            gender=data.gender,
            language=data.language,
            marital_status=data.marital_status,
            call_time_preference=call_time_preference,
            relationship_to_caregiver=None,
        ))

        await self._save_medications(elderly_profile.id, data)
        await self._save_interests(elderly_profile.id, data)

        result = RegistrationResult(
            user_id=profile.auth_user_id,
            profile_id=profile.id,
            elderly_profile_id=elderly_profile.id,
        )
        await self._send_webhook(result, data, call_time_preference)
        return result

    async def _save_loved_one_registration(self, data: OnboardingData) -> RegistrationResult:
        errors = []
        if not validate_required_string(data.first_name):
            errors.append({"field": "firstName", "message": "First name is required"})
        if not validate_required_string(data.last_name):
            errors.append({"field": "lastName", "message": "Last name is required"})
        if not validate_required_string(data.relationship):
            errors.append({"field": "relationship", "message": "Relationship is required"})
        loved_one_errors = validate_onboarding_data(
            first_name=data.loved_one_first_name,
            last_name=data.loved_one_last_name,
            date_of_birth=data.loved_one_date_of_birth,
            gender=data.loved_one_gender,
            language=data.loved_one_language,
            marital_status=data.loved_one_marital_status,
        )
        errors.extend(
            {"field": "lovedOne" + e["field"][0].upper() + e["field"][1:], "message": e["message"]}
            for e in loved_one_errors
        )
        if not is_valid_phone_number(data.loved_one_country_code or "", data.loved_one_phone_number or ""):
            errors.append({"field": "lovedOnePhoneNumber", "message": "Enter a valid phone number"})
        if errors:
            raise ValidationFailedError("Invalid onboarding data", errors)

        await self._ensure_phone_verified(data.otp_session_id, data.country_code, data.phone_number)
        same_number = (
            data.loved_one_phone_number == data.phone_number
            and data.loved_one_country_code == data.country_code
        )
        if not same_number:
            await self._ensure_phone_verified(
                data.loved_one_otp_session_id, data.loved_one_country_code, data.loved_one_phone_number
            )

        caregiver_profile = await self._create_account(data, RegistrationType.LOVED_ONE)
        call_time_preference = map_call_time_to_preference(data.call_time, data.custom_time_range)

        elderly_profile = await self._create_elderly_profile(ElderlyProfile(
            profile_id=None,
            caregiver_profile_id=caregiver_profile.id,
            phone_number=data.loved_one_phone_number,
            country_code=data.loved_one_country_code,
            first_name=data.loved_one_first_name,
            last_name=data.loved_one_last_name,
            date_of_birth=date.fromisoformat(sanitize_date(data.loved_one_date_of_birth)),
            gender=data.loved_one_gender,
            language=data.loved_one_language,
            marital_status=data.loved_one_marital_status,
            call_time_preference=call_time_preference,
            relationship_to_caregiver=data.relationship,
        ))

        await self._save_medications(elderly_profile.id, data)
        await self._save_interests(elderly_profile.id, data)

        result = RegistrationResult(
            user_id=caregiver_profile.auth_user_id,
            profile_id=caregiver_profile.id,
            elderly_profile_id=elderly_profile.id,
        )
        await self._send_webhook(result, data, call_time_preference)
        return result

    async def _ensure_phone_verified(self, otp_session_id: Optional[str], country_code: str, phone_number: str):
        contact = full_phone(country_code, phone_number)
        if not await is_contact_verified(self.db, otp_session_id, contact):
            raise AuthenticationError(f"Phone number {contact} has not been verified")

    async def _create_account(self, data: OnboardingData, registration_type: RegistrationType) -> Profile:
        if await self.profiles.get_by_phone(data.phone_number, data.country_code):
            raise ConflictError("User already registered")

        auth_user = await self._create_auth_user(data)

        dob = sanitize_date(data.date_of_birth)
        try:
            return await self.profiles.create({
                "auth_user_id": auth_user.id,
                "phone_number": data.phone_number,
                "country_code": data.country_code,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "date_of_birth": date.fromisoformat(dob) if dob else None,
                "gender": data.gender or None,
                "language": data.language,
                "marital_status": data.marital_status or None,
                "registration_type": registration_type,
            })
        except SQLAlchemyError as e:
            raise RegistrationError(f"Failed to create profile: {e}")

    async def _create_auth_user(self, data: OnboardingData) -> AuthUser:
        """Create the login identity, clearing an orphaned one left by an earlier attempt."""
        values = {
            "email": temp_email_for_phone(data.phone_number),
            "phone": full_phone(data.country_code, data.phone_number),
        }
        try:
            return await self.auth_users.create(values)
        except IntegrityError:
            logger.warning(f"Auth user already exists for {values['email']}, attempting cleanup")

        try:
            await cleanup_orphaned_auth(self.db, data.phone_number, data.country_code)
            return await self.auth_users.create(values)
        except (AashaError, SQLAlchemyError) as e:
            logger.error(f"Cleanup error: {e}")
            raise RegistrationError(PARTIAL_REGISTRATION_MESSAGE)

    async def _create_elderly_profile(self, elderly_profile: ElderlyProfile) -> ElderlyProfile:
        try:
            self.db.add(elderly_profile)
            await self.db.commit()
            await self.db.refresh(elderly_profile)
            return elderly_profile
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Elderly profile insert error: {e}")
            raise RegistrationError(f"Failed to create elderly profile: {e}")

    async def _save_medications(self, elderly_profile_id: int, data: OnboardingData):
        if not data.medications:
            return
        try:
            await self.medications.create_bulk(elderly_profile_id, [m.model_dump() for m in data.medications])
        except SQLAlchemyError as e:
            raise RegistrationError(f"Failed to save medications: {e}")

    async def _save_interests(self, elderly_profile_id: int, data: OnboardingData):
        if not data.interests:
            return
        try:
            await self.interests.create_bulk(elderly_profile_id, data.interests)
        except SQLAlchemyError as e:
            raise RegistrationError(f"Failed to save interests: {e}")

    async def _send_webhook(
        self,
        result: RegistrationResult,
        data: OnboardingData,
        call_time_preference: CallTimePreference,
    ):
        loved_one = None
        if data.registration_type == RegistrationType.LOVED_ONE:
            loved_one = LovedOnePayload(
                phone_number=data.loved_one_phone_number,
                country_code=data.loved_one_country_code,
                first_name=data.loved_one_first_name,
                last_name=data.loved_one_last_name,
                date_of_birth=data.loved_one_date_of_birth,
                gender=data.loved_one_gender,
                language=data.loved_one_language,
                marital_status=data.loved_one_marital_status,
                relationship=data.relationship,
            )

        payload = RegistrationWebhookPayload(
            user_id=result.user_id,
            profile_id=result.profile_id,
            elderly_profile_id=result.elderly_profile_id,
            registration_type=data.registration_type,
            phone_number=data.phone_number,
            country_code=data.country_code,
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            language=data.language,
            marital_status=data.marital_status,
            call_time_preference=call_time_preference.value,
            medications=data.medications,
            interests=data.interests,
            loved_one=loved_one,
        )
        await send_registration_webhook(
            payload.model_dump(by_alias=True, mode="json", exclude_none=True),
            transport=self.webhook_transport,
        )
