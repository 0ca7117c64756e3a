from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import Catch, VerificationStatus
from ..services.verification import VERIFIED_STATUSES


def _with_relations(query):
    return query.options(selectinload(Catch.species), selectinload(Catch.location))


class CatchRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, catch: Catch) -> Catch:
        self.db.add(catch)
        await self.db.flush()
        return catch

    async def get(self, catch_id: UUID) -> Optional[Catch]:
        result = await self.db.execute(_with_relations(select(Catch).where(Catch.id == catch_id)))
        return result.scalar_one_or_none()

    async def exists_catch(self, user_id: UUID, species_id: UUID) -> bool:
        """Whether the user has already caught this species."""
        result = await self.db.execute(
            select(Catch.id).where(Catch.user_id == user_id, Catch.species_id == species_id).limit(1)
        )
        return result.first() is not None

    async def _page(self, where, limit: int, offset: int) -> Tuple[List[Catch], int]:
        total = await self.db.execute(select(func.count()).select_from(Catch).where(*where))
        result = await self.db.execute(
            _with_relations(select(Catch).where(*where))
            .order_by(desc(Catch.caught_at))
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), int(total.scalar_one())

    async def by_user(self, user_id: UUID, limit: int, offset: int) -> Tuple[List[Catch], int]:
        return await self._page([Catch.user_id == user_id], limit, offset)

    async def public_at_location(self, location_id: UUID, limit: int, offset: int) -> Tuple[List[Catch], int]:
        return await self._page(
            [Catch.location_id == location_id, Catch.is_public == True], limit, offset  # noqa: E712
        )

    async def recent_public_at_location(self, location_id: UUID, limit: int = 10) -> List[Catch]:
        """Newest public catches at a location."""
        result = await self.db.execute(
            _with_relations(select(Catch).where(Catch.location_id == location_id, Catch.is_public == True))  # noqa: E712
            .order_by(desc(Catch.caught_at))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def recent_public(self, limit: int, offset: int) -> Tuple[List[Catch], int]:
        return await self._page(
            [Catch.is_public == True, Catch.verification_status == VerificationStatus.APPROVED.value],  # noqa: E712
            limit,
            offset,
        )

    async def user_totals(self, user_id: UUID) -> dict:
        verified = [status.value for status in VERIFIED_STATUSES]
        result = await self.db.execute(
            select(
                func.count(Catch.id),
                func.count(distinct(Catch.species_id)),
                func.coalesce(func.sum(Catch.points_awarded), 0),
                func.count(Catch.id).filter(Catch.verification_status.in_(verified)),
            ).where(Catch.user_id == user_id)
        )
        total_catches, unique_species, total_points, verified_catches = result.one()
        return {
            "total_catches": int(total_catches),
            "unique_species": int(unique_species),
            "total_points": int(total_points),
            "verified_catches": int(verified_catches),
        }
