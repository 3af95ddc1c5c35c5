import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from models.interest import Interest
from repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class InterestRepository(BaseRepository[Interest, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(Interest, db)

    async def list_for_profile(self, elderly_profile_id: int) -> List[Interest]:
        return await self.get_multi(
            limit=None,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[Interest.id],
        )

    async def create_bulk(self, elderly_profile_id: int, interests: List[str]) -> List[Interest]:
        try:
            created = [Interest(elderly_profile_id=elderly_profile_id, interest=value) for value in interests]
            self.db.add_all(created)
            await self.db.commit()
            for interest in created:
                await self.db.refresh(interest)
            return created
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating interests for elderly profile {elderly_profile_id}: {e}")
            raise
