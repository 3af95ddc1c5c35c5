"""
Call records, their sub-records and the daily medicine log.
"""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import Base
from models.call import Call, DailyMedicineLog
from repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CallRepository(BaseRepository[Call, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(Call, db)

    async def get_by_retell_id(self, retell_call_id: str) -> Optional[Call]:
        result = await self.db.execute(select(Call).where(Call.retell_call_id == retell_call_id))
        return result.scalar_one_or_none()

    async def get_latest_unfilled(self, elderly_profile_id: int) -> Optional[Call]:
        """Newest call row created ahead of the webhook, not yet tied to a Retell call."""
        query = (
            select(Call)
            .where(Call.elderly_profile_id == elderly_profile_id, Call.retell_call_id.is_(None))
            .order_by(Call.created_at.desc(), Call.id.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_with_details(self, call_id: int, elderly_profile_id: Optional[int] = None) -> Optional[Call]:
        query = select(Call).where(Call.id == call_id).execution_options(populate_existing=True)
        if elderly_profile_id is not None:
            query = query.where(Call.elderly_profile_id == elderly_profile_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_profile(
        self,
        elderly_profile_id: int,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[Call]:
        """Calls with analysis, transcripts and costs, newest first."""
        query = select(Call).where(Call.elderly_profile_id == elderly_profile_id)
        if since is not None:
            query = query.where(Call.started_at >= since)
        query = query.order_by(Call.started_at.desc(), Call.id.desc()).execution_options(populate_existing=True)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add_record(self, record: Base) -> Base:
        """Persist a call sub-record (analysis, transcript or cost)."""
        call_id = record.call_id
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error saving {type(record).__name__} for call {call_id}: {e}")
            raise


class DailyMedicineLogRepository(BaseRepository[DailyMedicineLog, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(DailyMedicineLog, db)

    async def upsert(
        self,
        elderly_profile_id: int,
        log_date: date,
        medicine_taken: bool,
        call_id: Optional[int] = None,
    ) -> DailyMedicineLog:
        """One row per profile and day; a later call overwrites the day's answer."""
        query = select(DailyMedicineLog).where(
            DailyMedicineLog.elderly_profile_id == elderly_profile_id,
            DailyMedicineLog.log_date == log_date,
        )
        existing = (await self.db.execute(query)).scalar_one_or_none()
        if existing:
            return await self.update(existing, {"medicine_taken": medicine_taken, "call_id": call_id})
        return await self.create({
            "elderly_profile_id": elderly_profile_id,
            "log_date": log_date,
            "medicine_taken": medicine_taken,
            "call_id": call_id,
        })

    async def list_since(self, elderly_profile_id: int, since: date) -> List[DailyMedicineLog]:
        query = (
            select(DailyMedicineLog)
            .where(DailyMedicineLog.elderly_profile_id == elderly_profile_id, DailyMedicineLog.log_date >= since)
            .order_by(DailyMedicineLog.log_date.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
