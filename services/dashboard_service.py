"""
Self-service dashboard operations.

Every method is scoped by the elderly profile the caller manages; rows that
belong to a different elderly profile are reported as not found.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.database import utcnow
from core.exceptions import AuthenticationError, NotFoundError
from models.call import Call
from models.enums import MedicationStatus
from models.interest import Interest
from models.medication import Medication, MedicationTracking
from models.profile import ElderlyProfile, Profile
from models.special_event import SpecialEvent
from repositories.call import CallRepository
from repositories.interest import InterestRepository
from repositories.medication import MedicationRepository, MedicationTrackingRepository
from repositories.profile import ElderlyProfileRepository, ProfileRepository
from repositories.special_event import SpecialEventRepository
from schemas.medication import MedicationCreate, MedicationTrackingRequest, MedicationUpdate
from schemas.profile import ElderlyProfileUpdate
from schemas.special_event import SpecialEventCreate, SpecialEventUpdate

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.elderly_profiles = ElderlyProfileRepository(db)
        self.medications = MedicationRepository(db)
        self.tracking = MedicationTrackingRepository(db)
        self.calls = CallRepository(db)
        self.interests = InterestRepository(db)
        self.events = SpecialEventRepository(db)

    async def get_elderly_profile_for_user(self, profile: Optional[Profile]) -> Optional[ElderlyProfile]:
        """The elderly profile a ``myself`` registrant manages; ``None`` for caregivers."""
        if profile is None:
            raise AuthenticationError("User not authenticated")

        if not await self.profiles.get(profile.id):
            raise NotFoundError("Profile not found. Please complete registration.")

        return await self.elderly_profiles.get_by_profile_id(profile.id)

    async def update_elderly_profile(self, elderly_profile_id: int, updates: ElderlyProfileUpdate) -> ElderlyProfile:
        elderly_profile = await self.elderly_profiles.get(elderly_profile_id)
        if not elderly_profile:
            raise NotFoundError("Elderly profile not found")
        elderly_profile = await self.elderly_profiles.update(elderly_profile, updates)
        logger.info(f"Updated elderly profile {elderly_profile_id}")
        return elderly_profile

    # -------- Medications --------

    async def get_medications(self, elderly_profile_id: int) -> List[Medication]:
        return await self.medications.list_for_profile(elderly_profile_id)

    async def add_medication(self, medication: MedicationCreate) -> Medication:
        created = await self.medications.create(medication)
        logger.info(f"Added medication {created.name} for elderly profile {medication.elderly_profile_id}")
        return created

    async def get_medication(self, elderly_profile_id: int, medication_id: int) -> Medication:
        medication = await self.medications.get(medication_id)
        if not medication or medication.elderly_profile_id != elderly_profile_id:
            raise NotFoundError("Medication not found")
        return medication

    async def update_medication(
        self, elderly_profile_id: int, medication_id: int, updates: MedicationUpdate
    ) -> Medication:
        medication = await self.get_medication(elderly_profile_id, medication_id)
        return await self.medications.update(medication, updates)

    async def delete_medication(self, elderly_profile_id: int, medication_id: int) -> Medication:
        """Delete a medication and return the row as it was."""
        medication = await self.get_medication(elderly_profile_id, medication_id)
        await self.medications.delete(medication_id)
        return medication

    async def get_medication_tracking(
        self,
        elderly_profile_id: int,
        medication_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[MedicationTracking]:
        await self.get_medication(elderly_profile_id, medication_id)
        return await self.tracking.list_for_medication(medication_id, start, end)

    async def track_medication_taken(
        self, elderly_profile_id: int, medication_id: int, request: MedicationTrackingRequest
    ) -> MedicationTracking:
        """Record one scheduled dose; ``taken_datetime`` is stamped only for taken doses."""
        await self.get_medication(elderly_profile_id, medication_id)
        return await self.tracking.create({
            "medication_id": medication_id,
            "scheduled_datetime": request.scheduled_datetime,
            "taken_datetime": utcnow() if request.status == MedicationStatus.TAKEN else None,
            "status": request.status,
            "notes": request.notes or "",
        })

    # -------- Calls --------

    async def get_calls(self, elderly_profile_id: int, limit: Optional[int] = None) -> List[Call]:
        return await self.calls.list_for_profile(elderly_profile_id, limit=limit)

    async def get_call(self, elderly_profile_id: int, call_id: int) -> Call:
        call = await self.calls.get_with_details(call_id, elderly_profile_id)
        if not call:
            raise NotFoundError("Call not found")
        return call

    # -------- Interests --------

    async def get_interests(self, elderly_profile_id: int) -> List[Interest]:
        return await self.interests.list_for_profile(elderly_profile_id)

    async def add_interest(self, elderly_profile_id: int, interest: str) -> Interest:
        return await self.interests.create({"elderly_profile_id": elderly_profile_id, "interest": interest})

    async def delete_interest(self, elderly_profile_id: int, interest_id: int) -> Interest:
        interest = await self.interests.get(interest_id)
        if not interest or interest.elderly_profile_id != elderly_profile_id:
            raise NotFoundError("Interest not found")
        await self.interests.delete(interest_id)
        return interest

    # -------- Special events --------

    async def get_special_events(self, elderly_profile_id: int) -> List[SpecialEvent]:
        return await self.events.list_for_profile(elderly_profile_id)

    async def add_special_event(self, event: SpecialEventCreate) -> SpecialEvent:
        return await self.events.create(event)

    async def get_special_event(self, elderly_profile_id: int, event_id: int) -> SpecialEvent:
        event = await self.events.get(event_id)
        if not event or event.elderly_profile_id != elderly_profile_id:
            raise NotFoundError("Special event not found")
        return event

    async def update_special_event(
        self, elderly_profile_id: int, event_id: int, updates: SpecialEventUpdate
    ) -> SpecialEvent:
        event = await self.get_special_event(elderly_profile_id, event_id)
        return await self.events.update(event, updates)

    async def delete_special_event(self, elderly_profile_id: int, event_id: int) -> SpecialEvent:
        event = await self.get_special_event(elderly_profile_id, event_id)
        await self.events.delete(event_id)
        return event
