"""
Repositories for auth users, profiles and elderly profiles.
"""

import logging
from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import AuthUser, Profile, ElderlyProfile
from repositories.base import BaseRepository
from schemas.profile import ElderlyProfileCreate, ElderlyProfileUpdate

logger = logging.getLogger(__name__)


class AuthUserRepository(BaseRepository[AuthUser, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(AuthUser, db)

    async def get_by_email(self, email: str) -> Optional[AuthUser]:
        result = await self.db.execute(select(AuthUser).where(AuthUser.email == email))
        return result.scalar_one_or_none()

    async def delete_by_email(self, email: str) -> bool:
        try:
            result = await self.db.execute(delete(AuthUser).where(AuthUser.email == email))
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting auth user {email}: {e}")
            raise


class ProfileRepository(BaseRepository[Profile, None, None]):

    def __init__(self, db: AsyncSession):
        super().__init__(Profile, db)

    async def get_by_phone(self, phone_number: str, country_code: str) -> Optional[Profile]:
        query = select(Profile).where(
            Profile.phone_number == phone_number,
            Profile.country_code == country_code,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_auth_user(self, auth_user_id: int) -> Optional[Profile]:
        result = await self.db.execute(select(Profile).where(Profile.auth_user_id == auth_user_id))
        return result.scalar_one_or_none()


class ElderlyProfileRepository(BaseRepository[ElderlyProfile, ElderlyProfileCreate, ElderlyProfileUpdate]):

    def __init__(self, db: AsyncSession):
        super().__init__(ElderlyProfile, db)

    async def get_by_profile_id(self, profile_id: int) -> Optional[ElderlyProfile]:
        """The elderly profile a ``myself`` registrant manages for themselves."""
        query = (
            select(ElderlyProfile)
            .where(ElderlyProfile.profile_id == profile_id)
            .order_by(ElderlyProfile.id)
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_by_caregiver(self, caregiver_profile_id: int) -> List[ElderlyProfile]:
        return await self.get_multi(
            limit=None,
            filters={"caregiver_profile_id": caregiver_profile_id},
            order_by=[ElderlyProfile.created_at.desc(), ElderlyProfile.id.desc()],
        )

    async def get_for_caregiver(self, elderly_profile_id: int, caregiver_profile_id: int) -> Optional[ElderlyProfile]:
        query = select(ElderlyProfile).where(
            ElderlyProfile.id == elderly_profile_id,
            ElderlyProfile.caregiver_profile_id == caregiver_profile_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
