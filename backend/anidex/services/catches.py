"""
Catch workflows: record a sighting, edit it while pending, verify it, user stats.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Tuple

from fastapi import HTTPException, status

from ..config import Settings
from ..database.models import Catch, TimeOfDay, User, VerificationStatus
from ..models.catch import CatchCreate, CatchUpdate
from ..models.user import UserStatsResponse
from ..repositories.catches import CatchRepository
from ..repositories.locations import LocationRepository
from ..repositories.species import SpeciesRepository
from .aggregates import recompute_location_aggregates
from .proximity import find_or_create_location
from .scoring import level_for_points, points_to_next_level, score_catch
from .verification import InvalidTransitionError, can_edit, transition

logger = logging.getLogger(__name__)


def time_of_day_from_hour(hour: int) -> TimeOfDay:
    """Bucket an hour (0-23) into a time of day."""
    if 5 <= hour < 7:
        return TimeOfDay.DAWN
    if 7 <= hour < 11:
        return TimeOfDay.MORNING
    if 11 <= hour < 13:
        return TimeOfDay.NOON
    if 13 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 20:
        return TimeOfDay.EVENING
    if 20 <= hour < 21:
        return TimeOfDay.DUSK
    return TimeOfDay.NIGHT


class CatchService:
    def __init__(
        self,
        catches: CatchRepository,
        species: SpeciesRepository,
        locations: LocationRepository,
        settings: Settings,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.catches = catches
        self.species = species
        self.locations = locations
        self.settings = settings
        self.clock = clock

    async def create_catch(self, user_id: uuid.UUID, payload: CatchCreate) -> Tuple[Catch, bool]:
        """
        Record a catch and return (catch, location_created).

        The location is resolved by proximity, points are fixed from the
        species and whether this is the user's first catch of it, and the
        location's counters are recomputed afterwards.
        """
        species = await self.species.get(payload.species_id)
        if species is None or not species.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Species not found")

        location, created = await find_or_create_location(
            self.locations,
            payload.latitude,
            payload.longitude,
            self.settings.LOCATION_MATCH_RADIUS_KM,
        )

        is_first_catch = not await self.catches.exists_catch(user_id, species.id)
        score = score_catch(
            species,
            is_first_catch,
            apply_combo=self.settings.APPLY_COMBO_TO_POINTS,
            first_catch_bonus=self.settings.FIRST_CATCH_COMBO_MULTIPLIER,
        )

        now = self.clock()
        catch = Catch(
            id=uuid.uuid4(),
            user_id=user_id,
            species_id=species.id,
            location_id=location.id,
            user_photo_url=payload.user_photo_url,
            user_notes=payload.user_notes,
            user_rating=payload.user_rating,
            weather=payload.weather.value if payload.weather else None,
            temperature=payload.temperature,
            time_of_day=time_of_day_from_hour(now.hour).value,
            caught_at=now,
            verification_status=VerificationStatus.PENDING.value,
            points_awarded=score.points_awarded,
            is_first_catch=score.is_first_catch,
            combo_multiplier=score.combo_multiplier,
            is_public=payload.is_public,
        )
        catch.species = species
        catch.location = location
        await self.catches.add(catch)

        await recompute_location_aggregates(self.locations, location.id)
        logger.info(
            "User %s caught %s at %s for %d points (first=%s)",
            user_id, species.id, location.id, score.points_awarded, is_first_catch,
        )
        return catch, created

    async def _get_catch(self, catch_id: uuid.UUID) -> Catch:
        catch = await self.catches.get(catch_id)
        if catch is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Catch not found")
        return catch

    async def update_catch(self, catch_id: uuid.UUID, user_id: uuid.UUID, changes: CatchUpdate) -> Catch:
        """Apply user edits; only the owner may edit, and only while pending."""
        catch = await self._get_catch(catch_id)
        if catch.user_id != user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your catch")
        if not can_edit(catch):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Catch can no longer be edited after verification",
            )

        visibility_changed = False
        for field, value in changes.model_dump(exclude_unset=True).items():
            if field == "weather" and value is not None:
                value = value.value
            if field == "is_public" and value != catch.is_public:
                visibility_changed = True
            setattr(catch, field, value)

        if visibility_changed:
            await recompute_location_aggregates(self.locations, catch.location_id)
        return catch

    async def verify_catch(
        self,
        catch_id: uuid.UUID,
        moderator: User,
        target: VerificationStatus,
        notes: Optional[str] = None,
    ) -> Catch:
        if not moderator.is_moderator:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Moderator access required")

        catch = await self._get_catch(catch_id)
        try:
            transition(catch, target, verifier_id=moderator.id, notes=notes, now=self.clock())
        except InvalidTransitionError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

        logger.info("Catch %s marked %s by %s", catch.id, target.value, moderator.id)
        return catch

    async def user_stats(self, user_id: uuid.UUID) -> UserStatsResponse:
        totals = await self.catches.user_totals(user_id)
        return UserStatsResponse(
            **totals,
            level=level_for_points(totals["total_points"]),
            points_to_next_level=points_to_next_level(totals["total_points"]),
        )
