from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from models.special_event import SpecialEvent
from repositories.base import BaseRepository
from schemas.special_event import SpecialEventCreate, SpecialEventUpdate


class SpecialEventRepository(BaseRepository[SpecialEvent, SpecialEventCreate, SpecialEventUpdate]):

    def __init__(self, db: AsyncSession):
        super().__init__(SpecialEvent, db)

    async def list_for_profile(self, elderly_profile_id: int) -> List[SpecialEvent]:
        """Events of one elderly profile, soonest date first."""
        return await self.get_multi(
            limit=None,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[SpecialEvent.event_date, SpecialEvent.id],
        )
