"""
Family dashboard endpoints.

Routes under ``/profiles/{elderly_profile_id}`` resolve the elderly profile
through ``get_family_elderly_profile``, which only matches profiles the
signed-in caregiver manages.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_profile, get_family_elderly_profile
from core.database import get_db
from models.profile import ElderlyProfile, Profile
from schemas.call import CallAnalytics, CallInDB, MedicineAdherence
from schemas.family import (
    ActivityLogInDB,
    AlertCreate,
    AlertInDB,
    AlertRequest,
    ConversationPromptBase,
    ConversationPromptInDB,
    ConversationPromptUpdate,
    SharedContentBase,
    SharedContentInDB,
    SharedContentUpdate,
)
from schemas.interest import InterestCreate, InterestInDB
from schemas.medication import (
    MedicationAdherenceStats,
    MedicationBase,
    MedicationCreate,
    MedicationInDB,
    MedicationUpdate,
)
from schemas.profile import ElderlyProfileInDB, ElderlyProfileUpdate
from schemas.responses import StandardSuccessResponse
from schemas.special_event import SpecialEventBase, SpecialEventCreate, SpecialEventInDB, SpecialEventUpdate
from services.call_service import CallService
from services.family_dashboard_service import FamilyDashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_family_service(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
) -> FamilyDashboardService:
    return FamilyDashboardService(db, profile)


# -------- Elderly profiles --------

@router.get("/profiles", response_model=List[ElderlyProfileInDB], summary="List loved ones managed by the caller")
async def list_profiles(service: FamilyDashboardService = Depends(get_family_service)):
    return await service.get_elderly_profiles()


@router.get("/profiles/{elderly_profile_id}", response_model=ElderlyProfileInDB)
async def get_profile(elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile)):
    return elderly_profile


@router.patch("/profiles/{elderly_profile_id}", response_model=ElderlyProfileInDB)
async def update_profile(
    updates: ElderlyProfileUpdate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.update_elderly_profile(elderly_profile.id, updates)


# -------- Alerts --------

@router.get("/profiles/{elderly_profile_id}/alerts", response_model=List[AlertInDB])
async def list_alerts(
    unacknowledged_only: bool = Query(False),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.get_alerts(elderly_profile.id, unacknowledged_only)


@router.post("/profiles/{elderly_profile_id}/alerts", response_model=AlertInDB, status_code=status.HTTP_201_CREATED)
async def create_alert(
    request: AlertRequest,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.create_alert(AlertCreate(
        elderly_profile_id=elderly_profile.id,
        family_member_id=service.family_member.id,
        **request.model_dump(),
    ))


@router.post("/alerts/{alert_id}/acknowledge", response_model=AlertInDB)
async def acknowledge_alert(alert_id: int, service: FamilyDashboardService = Depends(get_family_service)):
    logger.info(f"Family member {service.family_member.id} acknowledging alert {alert_id}")
    return await service.acknowledge_alert(alert_id)


# -------- Shared content --------

@router.get("/profiles/{elderly_profile_id}/content", response_model=List[SharedContentInDB])
async def list_content(
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.get_shared_content(elderly_profile.id)


@router.post(
    "/profiles/{elderly_profile_id}/content",
    response_model=SharedContentInDB,
    status_code=status.HTTP_201_CREATED,
)
async def add_content(
    content: SharedContentBase,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.add_shared_content(elderly_profile.id, content)


@router.put("/profiles/{elderly_profile_id}/content/{content_id}", response_model=SharedContentInDB)
async def update_content(
    content_id: int,
    updates: SharedContentUpdate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.update_shared_content(elderly_profile.id, content_id, updates)


@router.delete("/profiles/{elderly_profile_id}/content/{content_id}", response_model=StandardSuccessResponse)
async def delete_content(
    content_id: int,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    await service.delete_shared_content(elderly_profile.id, content_id)
    return {"success": True, "message": "Shared content deleted"}


# -------- Activity log --------

@router.get("/profiles/{elderly_profile_id}/activity", response_model=List[ActivityLogInDB])
async def list_activity(
    limit: int = Query(50, ge=1, le=500),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.get_activity_log(elderly_profile.id, limit)


# -------- Conversation prompts --------

@router.get("/profiles/{elderly_profile_id}/prompts", response_model=List[ConversationPromptInDB])
async def list_prompts(
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.get_conversation_prompts(elderly_profile.id)


@router.post(
    "/profiles/{elderly_profile_id}/prompts",
    response_model=ConversationPromptInDB,
    status_code=status.HTTP_201_CREATED,
)
async def add_prompt(
    prompt: ConversationPromptBase,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.add_conversation_prompt(elderly_profile.id, prompt)


@router.put("/profiles/{elderly_profile_id}/prompts/{prompt_id}", response_model=ConversationPromptInDB)
async def update_prompt(
    prompt_id: int,
    updates: ConversationPromptUpdate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.update_conversation_prompt(elderly_profile.id, prompt_id, updates)


@router.delete("/profiles/{elderly_profile_id}/prompts/{prompt_id}", response_model=StandardSuccessResponse)
async def delete_prompt(
    prompt_id: int,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    await service.delete_conversation_prompt(elderly_profile.id, prompt_id)
    return {"success": True, "message": "Conversation prompt deleted"}


# -------- Adherence and calls --------

@router.get("/profiles/{elderly_profile_id}/adherence-stats", response_model=MedicationAdherenceStats)
async def adherence_stats(
    days: int = Query(30, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.get_medication_adherence_stats(elderly_profile.id, days)


@router.get("/profiles/{elderly_profile_id}/calls", response_model=List[CallInDB])
async def list_calls(
    limit: int = Query(20, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.dashboard.get_calls(elderly_profile.id, limit)


@router.get("/profiles/{elderly_profile_id}/analytics", response_model=CallAnalytics)
async def call_analytics(
    days: int = Query(30, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await CallService(db).get_call_analytics(elderly_profile.id, days)


@router.get("/profiles/{elderly_profile_id}/medicine-adherence", response_model=MedicineAdherence)
async def medicine_adherence(
    days: int = Query(30, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await CallService(db).get_medicine_adherence(elderly_profile.id, days)


# -------- Care plan --------

@router.get("/profiles/{elderly_profile_id}/medications", response_model=List[MedicationInDB])
async def list_medications(
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.dashboard.get_medications(elderly_profile.id)


@router.post(
    "/profiles/{elderly_profile_id}/medications",
    response_model=MedicationInDB,
    status_code=status.HTTP_201_CREATED,
)
async def add_medication(
    medication: MedicationBase,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.add_medication(
        MedicationCreate(elderly_profile_id=elderly_profile.id, **medication.model_dump())
    )


@router.put("/profiles/{elderly_profile_id}/medications/{medication_id}", response_model=MedicationInDB)
async def update_medication(
    medication_id: int,
    updates: MedicationUpdate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.update_medication(elderly_profile.id, medication_id, updates)


@router.delete(
    "/profiles/{elderly_profile_id}/medications/{medication_id}",
    response_model=StandardSuccessResponse,
)
async def delete_medication(
    medication_id: int,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    await service.delete_medication(elderly_profile.id, medication_id)
    return {"success": True, "message": "Medication deleted"}


@router.get("/profiles/{elderly_profile_id}/events", response_model=List[SpecialEventInDB])
async def list_events(
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.dashboard.get_special_events(elderly_profile.id)


@router.post(
    "/profiles/{elderly_profile_id}/events",
    response_model=SpecialEventInDB,
    status_code=status.HTTP_201_CREATED,
)
async def add_event(
    event: SpecialEventBase,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.add_special_event(
        SpecialEventCreate(elderly_profile_id=elderly_profile.id, **event.model_dump())
    )


@router.put("/profiles/{elderly_profile_id}/events/{event_id}", response_model=SpecialEventInDB)
async def update_event(
    event_id: int,
    updates: SpecialEventUpdate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.update_special_event(elderly_profile.id, event_id, updates)


@router.delete("/profiles/{elderly_profile_id}/events/{event_id}", response_model=StandardSuccessResponse)
async def delete_event(
    event_id: int,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    await service.delete_special_event(elderly_profile.id, event_id)
    return {"success": True, "message": "Special event deleted"}


@router.get("/profiles/{elderly_profile_id}/interests", response_model=List[InterestInDB])
async def list_interests(
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.dashboard.get_interests(elderly_profile.id)


@router.post(
    "/profiles/{elderly_profile_id}/interests",
    response_model=InterestInDB,
    status_code=status.HTTP_201_CREATED,
)
async def add_interest(
    request: InterestCreate,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    return await service.add_interest(elderly_profile.id, request.interest)


@router.delete("/profiles/{elderly_profile_id}/interests/{interest_id}", response_model=StandardSuccessResponse)
async def delete_interest(
    interest_id: int,
    elderly_profile: ElderlyProfile = Depends(get_family_elderly_profile),
    service: FamilyDashboardService = Depends(get_family_service),
):
    await service.delete_interest(elderly_profile.id, interest_id)
    return {"success": True, "message": "Interest deleted"}
