"""
Family/caregiver dashboard operations.

A caregiver only sees elderly profiles whose ``caregiver_profile_id`` is
their own profile. Writes made on behalf of a loved one are recorded in the
family activity log.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.database import utcnow
from core.exceptions import NotFoundError
from models.enums import ActivityAction, EntityType, MedicationStatus
from models.family import FamilyMemberAlert, SharedContent, FamilyActivityLog, ConversationPrompt
from models.interest import Interest
from models.medication import Medication
from models.profile import ElderlyProfile, Profile
from models.special_event import SpecialEvent
from repositories.family import (
    AlertRepository,
    SharedContentRepository,
    ActivityLogRepository,
    ConversationPromptRepository,
)
from repositories.medication import MedicationRepository, MedicationTrackingRepository
from repositories.profile import ElderlyProfileRepository
from schemas.family import (
    AlertCreate,
    SharedContentBase,
    SharedContentUpdate,
    ConversationPromptBase,
    ConversationPromptUpdate,
)
from schemas.medication import MedicationAdherenceStats, MedicationCreate, MedicationUpdate
from schemas.profile import ElderlyProfileUpdate
from schemas.special_event import SpecialEventCreate, SpecialEventUpdate
from scripts.utils import days_ago, percent
from services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class FamilyDashboardService:

    def __init__(self, db: AsyncSession, family_member: Profile):
        self.db = db
        self.family_member = family_member
        self.dashboard = DashboardService(db)
        self.elderly_profiles = ElderlyProfileRepository(db)
        self.alerts = AlertRepository(db)
        self.content = SharedContentRepository(db)
        self.activity = ActivityLogRepository(db)
        self.prompts = ConversationPromptRepository(db)
        self.medications = MedicationRepository(db)
        self.tracking = MedicationTrackingRepository(db)

    # -------- Elderly profiles --------

    async def get_elderly_profiles(self) -> List[ElderlyProfile]:
        return await self.elderly_profiles.list_by_caregiver(self.family_member.id)

    async def get_elderly_profile(self, elderly_profile_id: int) -> ElderlyProfile:
        elderly_profile = await self.elderly_profiles.get_for_caregiver(elderly_profile_id, self.family_member.id)
        if not elderly_profile:
            raise NotFoundError("Elderly profile not found")
        return elderly_profile

    async def update_elderly_profile(self, elderly_profile_id: int, updates: ElderlyProfileUpdate) -> ElderlyProfile:
        elderly_profile = await self.dashboard.update_elderly_profile(elderly_profile_id, updates)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.PROFILE_UPDATED,
            EntityType.PROFILE,
            elderly_profile_id,
            f"Updated profile of {elderly_profile.first_name} {elderly_profile.last_name}",
            updates.model_dump(exclude_unset=True, mode="json"),
        )
        return elderly_profile

    # -------- Alerts --------

    async def get_alerts(self, elderly_profile_id: int, unacknowledged_only: bool = False) -> List[FamilyMemberAlert]:
        return await self.alerts.list_for_family_member(self.family_member.id, elderly_profile_id, unacknowledged_only)

    async def acknowledge_alert(self, alert_id: int) -> FamilyMemberAlert:
        alert = await self.alerts.get(alert_id)
        if not alert or alert.family_member_id != self.family_member.id:
            raise NotFoundError("Alert not found")
        alert = await self.alerts.update(alert, {"is_acknowledged": True, "acknowledged_at": utcnow()})
        await self.log_activity(
            alert.elderly_profile_id,
            ActivityAction.ALERT_ACKNOWLEDGED,
            EntityType.ALERT,
            alert.id,
            f"Acknowledged alert: {alert.title}",
        )
        return alert

    async def create_alert(self, alert: AlertCreate) -> FamilyMemberAlert:
        created = await self.alerts.create(alert)
        logger.info(f"Created {alert.alert_type.value} alert for family member {alert.family_member_id}")
        return created

    # -------- Shared content --------

    async def get_shared_content(self, elderly_profile_id: int) -> List[SharedContent]:
        return await self.content.list_for_profile(elderly_profile_id)

    async def add_shared_content(self, elderly_profile_id: int, content: SharedContentBase) -> SharedContent:
        created = await self.content.create({
            **content.model_dump(),
            "elderly_profile_id": elderly_profile_id,
            "uploaded_by": self.family_member.id,
        })
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.CONTENT_UPLOADED,
            EntityType.CONTENT,
            created.id,
            f"Uploaded content: {content.title}",
        )
        return created

    async def _get_content(self, elderly_profile_id: int, content_id: int) -> SharedContent:
        content = await self.content.get(content_id)
        if not content or content.elderly_profile_id != elderly_profile_id:
            raise NotFoundError("Shared content not found")
        return content

    async def update_shared_content(
        self, elderly_profile_id: int, content_id: int, updates: SharedContentUpdate
    ) -> SharedContent:
        content = await self._get_content(elderly_profile_id, content_id)
        return await self.content.update(content, updates)

    async def delete_shared_content(self, elderly_profile_id: int, content_id: int) -> None:
        await self._get_content(elderly_profile_id, content_id)
        await self.content.delete(content_id)

    # -------- Activity log --------

    async def get_activity_log(self, elderly_profile_id: int, limit: int = 50) -> List[FamilyActivityLog]:
        return await self.activity.list_for_profile(elderly_profile_id, limit)

    async def log_activity(
        self,
        elderly_profile_id: int,
        action_type: ActivityAction,
        entity_type: EntityType,
        entity_id: Optional[int],
        description: str,
        details: Optional[dict] = None,
    ) -> FamilyActivityLog:
        return await self.activity.create({
            "elderly_profile_id": elderly_profile_id,
            "family_member_id": self.family_member.id,
            "action_type": action_type,
            "entity_type": entity_type,
            "entity_id": str(entity_id) if entity_id is not None else None,
            "description": description,
            "details": details or {},
        })

    # -------- Conversation prompts --------

    async def get_conversation_prompts(self, elderly_profile_id: int) -> List[ConversationPrompt]:
        return await self.prompts.list_for_profile(elderly_profile_id)

    async def add_conversation_prompt(self, elderly_profile_id: int, prompt: ConversationPromptBase) -> ConversationPrompt:
        return await self.prompts.create({
            **prompt.model_dump(),
            "elderly_profile_id": elderly_profile_id,
            "created_by": self.family_member.id,
        })

    async def _get_prompt(self, elderly_profile_id: int, prompt_id: int) -> ConversationPrompt:
        prompt = await self.prompts.get(prompt_id)
        if not prompt or prompt.elderly_profile_id != elderly_profile_id:
            raise NotFoundError("Conversation prompt not found")
        return prompt

    async def update_conversation_prompt(
        self, elderly_profile_id: int, prompt_id: int, updates: ConversationPromptUpdate
    ) -> ConversationPrompt:
        prompt = await self._get_prompt(elderly_profile_id, prompt_id)
        return await self.prompts.update(prompt, updates)

    async def delete_conversation_prompt(self, elderly_profile_id: int, prompt_id: int) -> None:
        await self._get_prompt(elderly_profile_id, prompt_id)
        await self.prompts.delete(prompt_id)

    # -------- Adherence --------

    async def get_medication_adherence_stats(self, elderly_profile_id: int, days: int = 30) -> MedicationAdherenceStats:
        medications = await self.medications.list_for_profile(elderly_profile_id)
        if not medications:
            return MedicationAdherenceStats(
                total_scheduled=0,
                total_taken=0,
                total_missed=0,
                total_skipped=0,
                adherence_rate=0,
            )

        tracking = await self.tracking.list_for_medications_since([m.id for m in medications], days_ago(days))

        total_scheduled = len(tracking)
        total_taken = sum(1 for t in tracking if t.status == MedicationStatus.TAKEN)
        return MedicationAdherenceStats(
            total_scheduled=total_scheduled,
            total_taken=total_taken,
            total_missed=sum(1 for t in tracking if t.status == MedicationStatus.MISSED),
            total_skipped=sum(1 for t in tracking if t.status == MedicationStatus.SKIPPED),
            adherence_rate=percent(total_taken, total_scheduled),
        )

    # -------- Care plan writes on behalf of the loved one --------

    async def add_medication(self, medication: MedicationCreate) -> Medication:
        created = await self.dashboard.add_medication(medication)
        await self.log_activity(
            medication.elderly_profile_id,
            ActivityAction.MEDICATION_ADDED,
            EntityType.MEDICATION,
            created.id,
            f"Added medication: {created.name}",
        )
        return created

    async def update_medication(
        self, elderly_profile_id: int, medication_id: int, updates: MedicationUpdate
    ) -> Medication:
        medication = await self.dashboard.update_medication(elderly_profile_id, medication_id, updates)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.MEDICATION_UPDATED,
            EntityType.MEDICATION,
            medication.id,
            f"Updated medication: {medication.name}",
            updates.model_dump(exclude_unset=True),
        )
        return medication

    async def delete_medication(self, elderly_profile_id: int, medication_id: int) -> None:
        medication = await self.dashboard.delete_medication(elderly_profile_id, medication_id)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.MEDICATION_DELETED,
            EntityType.MEDICATION,
            medication_id,
            f"Deleted medication: {medication.name}",
        )

    async def add_special_event(self, event: SpecialEventCreate) -> SpecialEvent:
        created = await self.dashboard.add_special_event(event)
        await self.log_activity(
            event.elderly_profile_id,
            ActivityAction.EVENT_CREATED,
            EntityType.EVENT,
            created.id,
            f"Created event: {created.event_name}",
        )
        return created

    async def update_special_event(
        self, elderly_profile_id: int, event_id: int, updates: SpecialEventUpdate
    ) -> SpecialEvent:
        event = await self.dashboard.update_special_event(elderly_profile_id, event_id, updates)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.EVENT_UPDATED,
            EntityType.EVENT,
            event.id,
            f"Updated event: {event.event_name}",
            updates.model_dump(exclude_unset=True, mode="json"),
        )
        return event

    async def delete_special_event(self, elderly_profile_id: int, event_id: int) -> None:
        event = await self.dashboard.delete_special_event(elderly_profile_id, event_id)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.EVENT_DELETED,
            EntityType.EVENT,
            event_id,
            f"Deleted event: {event.event_name}",
        )

    async def add_interest(self, elderly_profile_id: int, interest: str) -> Interest:
        created = await self.dashboard.add_interest(elderly_profile_id, interest)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.INTEREST_ADDED,
            EntityType.INTEREST,
            created.id,
            f"Added interest: {interest}",
        )
        return created

    async def delete_interest(self, elderly_profile_id: int, interest_id: int) -> None:
        interest = await self.dashboard.delete_interest(elderly_profile_id, interest_id)
        await self.log_activity(
            elderly_profile_id,
            ActivityAction.INTEREST_REMOVED,
            EntityType.INTEREST,
            interest_id,
            f"Removed interest: {interest.interest}",
        )
