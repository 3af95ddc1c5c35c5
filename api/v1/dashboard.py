"""
Self-service dashboard endpoints.

All routes act on the elderly profile owned by the signed-in ``myself``
registrant.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_profile, get_own_elderly_profile
from core.database import get_db
from models.profile import ElderlyProfile, Profile
from schemas.call import CallAnalytics, CallInDB, MedicineAdherence
from schemas.interest import InterestCreate, InterestInDB
from schemas.medication import (
    MedicationBase,
    MedicationCreate,
    MedicationInDB,
    MedicationTrackingInDB,
    MedicationTrackingRequest,
    MedicationUpdate,
)
from schemas.profile import ElderlyProfileInDB, ElderlyProfileUpdate
from schemas.responses import StandardSuccessResponse
from schemas.special_event import SpecialEventBase, SpecialEventCreate, SpecialEventInDB, SpecialEventUpdate
from services.call_service import CallService
from services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=ElderlyProfileInDB, summary="Get the signed-in user's elderly profile")
async def get_profile(profile: Profile = Depends(get_current_profile), db: AsyncSession = Depends(get_db)):
    elderly_profile = await DashboardService(db).get_elderly_profile_for_user(profile)
    if not elderly_profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Elderly profile not found")
    return elderly_profile


@router.patch("/profile", response_model=ElderlyProfileInDB)
async def update_profile(
    updates: ElderlyProfileUpdate,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    logger.info(f"Updating elderly profile {elderly_profile.id}")
    return await DashboardService(db).update_elderly_profile(elderly_profile.id, updates)


# -------- Medications --------

@router.get("/medications", response_model=List[MedicationInDB])
async def list_medications(
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_medications(elderly_profile.id)


@router.post("/medications", response_model=MedicationInDB, status_code=status.HTTP_201_CREATED)
async def add_medication(
    medication: MedicationBase,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    start_time = time.time()
    request_id = f"add_medication_{int(start_time * 1000)}"
    logger.info(f"Request {request_id}: Adding medication {medication.name} for elderly profile {elderly_profile.id}")

    created = await DashboardService(db).add_medication(
        MedicationCreate(elderly_profile_id=elderly_profile.id, **medication.model_dump())
    )

    duration = time.time() - start_time
    logger.info(f"Request {request_id}: Created medication {created.id} in {duration:.2f}s")
    return created


@router.put("/medications/{medication_id}", response_model=MedicationInDB)
async def update_medication(
    medication_id: int,
    updates: MedicationUpdate,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).update_medication(elderly_profile.id, medication_id, updates)


@router.delete("/medications/{medication_id}", response_model=StandardSuccessResponse)
async def delete_medication(
    medication_id: int,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    await DashboardService(db).delete_medication(elderly_profile.id, medication_id)
    return {"success": True, "message": "Medication deleted"}


@router.get("/medications/{medication_id}/tracking", response_model=List[MedicationTrackingInDB])
async def list_medication_tracking(
    medication_id: int,
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_medication_tracking(elderly_profile.id, medication_id, start, end)


@router.post(
    "/medications/{medication_id}/tracking",
    response_model=MedicationTrackingInDB,
    status_code=status.HTTP_201_CREATED,
)
async def track_medication(
    medication_id: int,
    request: MedicationTrackingRequest,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).track_medication_taken(elderly_profile.id, medication_id, request)


# -------- Calls --------

@router.get("/calls", response_model=List[CallInDB])
async def list_calls(
    limit: Optional[int] = Query(None, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_calls(elderly_profile.id, limit)


@router.get("/calls/{call_id}", response_model=CallInDB)
async def get_call(
    call_id: int,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_call(elderly_profile.id, call_id)


@router.get("/analytics", response_model=CallAnalytics)
async def call_analytics(
    days: int = Query(30, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await CallService(db).get_call_analytics(elderly_profile.id, days)


@router.get("/adherence", response_model=MedicineAdherence)
async def medicine_adherence(
    days: int = Query(30, ge=1),
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await CallService(db).get_medicine_adherence(elderly_profile.id, days)


# -------- Interests --------

@router.get("/interests", response_model=List[InterestInDB])
async def list_interests(
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_interests(elderly_profile.id)


@router.post("/interests", response_model=InterestInDB, status_code=status.HTTP_201_CREATED)
async def add_interest(
    request: InterestCreate,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).add_interest(elderly_profile.id, request.interest)


@router.delete("/interests/{interest_id}", response_model=StandardSuccessResponse)
async def delete_interest(
    interest_id: int,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    await DashboardService(db).delete_interest(elderly_profile.id, interest_id)
    return {"success": True, "message": "Interest deleted"}


# -------- Special events --------

@router.get("/events", response_model=List[SpecialEventInDB])
async def list_events(
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_special_events(elderly_profile.id)


@router.post("/events", response_model=SpecialEventInDB, status_code=status.HTTP_201_CREATED)
async def add_event(
    event: SpecialEventBase,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).add_special_event(
        SpecialEventCreate(elderly_profile_id=elderly_profile.id, **event.model_dump())
    )


@router.put("/events/{event_id}", response_model=SpecialEventInDB)
async def update_event(
    event_id: int,
    updates: SpecialEventUpdate,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).update_special_event(elderly_profile.id, event_id, updates)


@router.delete("/events/{event_id}", response_model=StandardSuccessResponse)
async def delete_event(
    event_id: int,
    elderly_profile: ElderlyProfile = Depends(get_own_elderly_profile),
    db: AsyncSession = Depends(get_db),
):
    await DashboardService(db).delete_special_event(elderly_profile.id, event_id)
    return {"success": True, "message": "Special event deleted"}
