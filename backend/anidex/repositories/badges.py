from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import Badge, UserBadge


class BadgeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def active(self, include_secret: bool = False) -> List[Badge]:
        query = select(Badge).where(Badge.is_active == True)  # noqa: E712
        if not include_secret:
            query = query.where(Badge.is_secret == False)  # noqa: E712
        result = await self.db.execute(query.order_by(Badge.badge_type, Badge.name))
        return list(result.scalars().all())

    async def for_user(self, user_id: UUID) -> List[UserBadge]:
        result = await self.db.execute(
            select(UserBadge)
            .options(selectinload(UserBadge.badge))
            .where(UserBadge.user_id == user_id)
            .order_by(UserBadge.created_at)
        )
        return list(result.scalars().all())
