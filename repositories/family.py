"""
Repositories for the family dashboard tables.
"""

from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.family import FamilyMemberAlert, SharedContent, FamilyActivityLog, ConversationPrompt
from repositories.base import BaseRepository
from schemas.family import (
    AlertCreate,
    SharedContentCreate,
    SharedContentUpdate,
    ActivityLogCreate,
    ConversationPromptCreate,
    ConversationPromptUpdate,
)


class AlertRepository(BaseRepository[FamilyMemberAlert, AlertCreate, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(FamilyMemberAlert, db)

    async def list_for_family_member(
        self, family_member_id: int, elderly_profile_id: int, unacknowledged_only: bool = False
    ) -> List[FamilyMemberAlert]:
        query = select(FamilyMemberAlert).where(
            FamilyMemberAlert.family_member_id == family_member_id,
            FamilyMemberAlert.elderly_profile_id == elderly_profile_id,
        )
        if unacknowledged_only:
            query = query.where(FamilyMemberAlert.is_acknowledged.is_(False))
        query = query.order_by(FamilyMemberAlert.created_at.desc(), FamilyMemberAlert.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())


class SharedContentRepository(BaseRepository[SharedContent, SharedContentCreate, SharedContentUpdate]):

    def __init__(self, db: AsyncSession):
        super().__init__(SharedContent, db)

    async def list_for_profile(self, elderly_profile_id: int) -> List[SharedContent]:
        return await self.get_multi(
            limit=None,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[SharedContent.created_at.desc(), SharedContent.id.desc()],
        )


class ActivityLogRepository(BaseRepository[FamilyActivityLog, ActivityLogCreate, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(FamilyActivityLog, db)

    async def list_for_profile(self, elderly_profile_id: int, limit: int = 50) -> List[FamilyActivityLog]:
        return await self.get_multi(
            limit=limit,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[FamilyActivityLog.created_at.desc(), FamilyActivityLog.id.desc()],
        )


class ConversationPromptRepository(BaseRepository[ConversationPrompt, ConversationPromptCreate, ConversationPromptUpdate]):

    def __init__(self, db: AsyncSession):
        super().__init__(ConversationPrompt, db)

    async def list_for_profile(self, elderly_profile_id: int) -> List[ConversationPrompt]:
        return await self.get_multi(
            limit=None,
            filters={"elderly_profile_id": elderly_profile_id},
            order_by=[ConversationPrompt.created_at.desc(), ConversationPrompt.id.desc()],
        )
