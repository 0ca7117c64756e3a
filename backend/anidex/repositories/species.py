from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import Species


class SpeciesRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, species_id: UUID) -> Optional[Species]:
        return await self.db.get(Species, species_id)

    async def list_filtered(
        self,
        category: Optional[str],
        rarity: Optional[str],
        limit: int,
        offset: int,
    ) -> Tuple[List[Species], int]:
        where = [Species.is_active == True]  # noqa: E712
        if category:
            where.append(Species.category == category)
        if rarity:
            where.append(Species.rarity == rarity)

        total = await self.db.execute(select(func.count()).select_from(Species).where(*where))
        result = await self.db.execute(
            select(Species).where(*where).order_by(Species.common_name).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), int(total.scalar_one())

    async def search(self, query: str, limit: int) -> List[Species]:
        """Case-insensitive match on common or scientific name."""
        pattern = f"%{query.lower()}%"
        result = await self.db.execute(
            select(Species)
            .where(
                Species.is_active == True,  # noqa: E712
                or_(func.lower(Species.common_name).like(pattern), func.lower(Species.scientific_name).like(pattern)),
            )
            .order_by(Species.common_name)
            .limit(limit)
        )
        return list(result.scalars().all())
