import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationAggregates:
    """Denormalized counters kept on a location."""
    catch_count: int = 0
    species_count: int = 0
    user_count: int = 0
    last_catch_at: Optional[datetime] = None


class CatchLike(Protocol):
    user_id: Any
    species_id: Any
    is_public: bool
    caught_at: datetime


class AggregateStore(Protocol):
    async def public_catches_at(self, location_id: Any) -> Sequence[CatchLike]:
        ...

    async def write_aggregates(self, location_id: Any, aggregates: LocationAggregates) -> None:
        ...


def compute_location_aggregates(catches: Iterable[CatchLike]) -> LocationAggregates:
    """Count public catches, distinct species and distinct users, and find the latest catch."""
    catch_count = 0
    species = set()
    users = set()
    last_catch_at = None
    for catch in catches:
        if not catch.is_public:
            continue
        catch_count += 1
        species.add(catch.species_id)
        users.add(catch.user_id)
        if last_catch_at is None or catch.caught_at > last_catch_at:
            last_catch_at = catch.caught_at
    return LocationAggregates(
        catch_count=catch_count,
        species_count=len(species),
        user_count=len(users),
        last_catch_at=last_catch_at,
    )


async def recompute_location_aggregates(store: AggregateStore, location_id: Any) -> LocationAggregates:
    """
    Recompute a location's counters from its full public catch set.

    Always a full recomputation, so running it repeatedly gives the same result.
    """
    catches = await store.public_catches_at(location_id)
    aggregates = compute_location_aggregates(catches)
    await store.write_aggregates(location_id, aggregates)
    logger.debug("Location %s aggregates: %s", location_id, aggregates)
    return aggregates
