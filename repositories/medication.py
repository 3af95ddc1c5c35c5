import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.medication import Medication, MedicationTracking
from repositories.base import BaseRepository
from schemas.medication import MedicationCreate, MedicationUpdate

logger = logging.getLogger(__name__)


class MedicationRepository(BaseRepository[Medication, MedicationCreate, MedicationUpdate]):

    def __init__(self, db: AsyncSession):
        super().__init__(Medication, db)

    async def list_for_profile(self, elderly_profile_id: int) -> List[Medication]:
        """Medications of one elderly profile, alphabetical."""
        return await self.get_multi(
            limit=None,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[Medication.name, Medication.id],
        )

    async def create_bulk(self, elderly_profile_id: int, medications: List[dict]) -> List[Medication]:
        """Insert several medications in one transaction."""
        try:
            created = [Medication(elderly_profile_id=elderly_profile_id, **data) for data in medications]
            self.db.add_all(created)
            await self.db.commit()
            for medication in created:
                await self.db.refresh(medication)
            logger.info(f"Created {len(created)} medications for elderly profile {elderly_profile_id}")
            return created
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating medications for elderly profile {elderly_profile_id}: {e}")
            raise


class MedicationTrackingRepository(BaseRepository[MedicationTracking, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(MedicationTracking, db)

    async def list_for_medication(
        self,
        medication_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[MedicationTracking]:
        query = select(MedicationTracking).where(MedicationTracking.medication_id == medication_id)
        if start is not None:
            query = query.where(MedicationTracking.scheduled_datetime >= start)
        if end is not None:
            query = query.where(MedicationTracking.scheduled_datetime <= end)
        query = query.order_by(MedicationTracking.scheduled_datetime.desc(), MedicationTracking.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_for_medications_since(self, medication_ids: List[int], since: datetime) -> List[MedicationTracking]:
        if not medication_ids:
            return []
        query = select(MedicationTracking).where(
            MedicationTracking.medication_id.in_(medication_ids),
            MedicationTracking.scheduled_datetime >= since,
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
