from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import Catch, Location
from ..services.aggregates import LocationAggregates
from ..services.proximity import bounding_box


class LocationRepository:
    """Location persistence; also the store behind the proximity resolver."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, location_id: UUID) -> Optional[Location]:
        return await self.db.get(Location, location_id)

    async def list_candidates(self, lat: float, lng: float, radius_km: float) -> Sequence[Location]:
        """Locations inside the bounding box of the search circle, in insertion order."""
        box = bounding_box(lat, lng, radius_km)
        conditions = [Location.latitude >= box.min_lat, Location.latitude <= box.max_lat]
        if not box.spans_all_longitudes:
            conditions += [Location.longitude >= box.min_lng, Location.longitude <= box.max_lng]

        result = await self.db.execute(
            select(Location).where(and_(*conditions)).order_by(Location.created_at, Location.id)
        )
        return result.scalars().all()

    async def insert(self, lat: float, lng: float) -> Location:
        location = Location(
            latitude=lat,
            longitude=lng,
            catch_count=0,
            species_count=0,
            user_count=0,
        )
        self.db.add(location)
        await self.db.flush()
        return location

    async def hotspots(self, min_catches: int, limit: int) -> List[Location]:
        result = await self.db.execute(
            select(Location)
            .where(Location.catch_count > min_catches)
            .order_by(desc(Location.catch_count), desc(Location.species_count))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def public_catches_at(self, location_id: UUID) -> Sequence[Catch]:
        result = await self.db.execute(
            select(Catch).where(Catch.location_id == location_id, Catch.is_public == True)  # noqa: E712
        )
        return result.scalars().all()

    async def write_aggregates(self, location_id: UUID, aggregates: LocationAggregates) -> None:
        location = await self.db.get(Location, location_id)
        if location is None:
            return
        # Flushed as a single UPDATE so the four counters never disagree
        location.catch_count = aggregates.catch_count
        location.species_count = aggregates.species_count
        location.user_count = aggregates.user_count
        location.last_catch_at = aggregates.last_catch_at
        await self.db.flush()
