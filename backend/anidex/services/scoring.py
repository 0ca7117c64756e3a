from dataclasses import dataclass
from math import radians, sin, cos, sqrt, atan2, floor
from typing import Optional, Protocol

from ..database.models import Rarity

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0

DEFAULT_COMBO_MULTIPLIER = 1.5

RARITY_MULTIPLIERS = {
    Rarity.COMMON.value: 1.0,
    Rarity.UNCOMMON.value: 1.5,
    Rarity.RARE.value: 2.0,
    Rarity.EPIC.value: 3.0,
    Rarity.LEGENDARY.value: 5.0,
}

RARITY_ORDER = [r.value for r in Rarity]

POINTS_PER_LEVEL_UNIT = 100


class ScorableSpecies(Protocol):
    rarity: Optional[str]
    difficulty_level: int
    base_points: int


@dataclass(frozen=True)
class CatchScore:
    """Scoring fields stored on a catch when it is created."""
    points_awarded: int
    is_first_catch: bool
    combo_multiplier: float


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: Coordinates of the first point (degrees)
        lat2, lon2: Coordinates of the second point (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon / 2)**2
    # Rounding can push a slightly past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def rarity_multiplier(rarity: Optional[str]) -> float:
    """Point multiplier for a rarity tier. Unknown tiers count as common."""
    if isinstance(rarity, Rarity):
        rarity = rarity.value
    return RARITY_MULTIPLIERS.get(rarity, 1.0)


def rarity_rank(rarity: Optional[str]) -> int:
    """Position of a tier in common < uncommon < rare < epic < legendary, -1 if unknown."""
    if isinstance(rarity, Rarity):
        rarity = rarity.value
    try:
        return RARITY_ORDER.index(rarity)
    except ValueError:
        return -1


def difficulty_multiplier(difficulty_level: int) -> float:
    """
    Multiplier growing by 0.1 per difficulty level above 1.

    The level is expected to be validated to 1-10 upstream; out-of-range
    values are computed as given.
    """
    return 1.0 + (difficulty_level - 1) * 0.1


def combo_multiplier(is_first_catch: bool, first_catch_bonus: float = DEFAULT_COMBO_MULTIPLIER) -> float:
    """Bonus factor for a user's first capture of a species."""
    return first_catch_bonus if is_first_catch else 1.0


def _floor_points(raw: float) -> int:
    # Round off float noise first so 23.999999999999996 floors to 24
    return int(floor(round(raw, 6)))


def species_points(species: ScorableSpecies) -> int:
    """Species-level score: base points scaled by rarity and difficulty."""
    raw = species.base_points * rarity_multiplier(species.rarity) * difficulty_multiplier(species.difficulty_level)
    return _floor_points(raw)


def compute_points(
    species: ScorableSpecies,
    is_first_catch: bool,
    *,
    apply_combo: bool = True,
    first_catch_bonus: float = DEFAULT_COMBO_MULTIPLIER,
) -> int:
    """
    Calculate points awarded for catching a species.

    Args:
        species: Anything exposing rarity, difficulty_level and base_points
        is_first_catch: Whether this is the user's first catch of the species
        apply_combo: Fold the first-catch combo into the total. When False the
            combo is only recorded alongside the catch.
        first_catch_bonus: Combo multiplier for a first catch

    Returns:
        Whole points, floored
    """
    raw = species.base_points * rarity_multiplier(species.rarity) * difficulty_multiplier(species.difficulty_level)
    if apply_combo:
        raw *= combo_multiplier(is_first_catch, first_catch_bonus)
    return _floor_points(raw)


def score_catch(
    species: ScorableSpecies,
    is_first_catch: bool,
    *,
    apply_combo: bool = True,
    first_catch_bonus: float = DEFAULT_COMBO_MULTIPLIER,
) -> CatchScore:
    return CatchScore(
        points_awarded=compute_points(
            species, is_first_catch, apply_combo=apply_combo, first_catch_bonus=first_catch_bonus
        ),
        is_first_catch=is_first_catch,
        combo_multiplier=combo_multiplier(is_first_catch, first_catch_bonus),
    )


def level_for_points(total_points: int) -> int:
    """
    User level from total points: floor(sqrt(points / 100)) + 1.

    Level 1: 0-99 points, level 2: 100-399, level 3: 400-899, ...
    """
    if total_points < POINTS_PER_LEVEL_UNIT:
        return 1
    return int(sqrt(total_points / POINTS_PER_LEVEL_UNIT)) + 1


def points_to_next_level(total_points: int) -> int:
    level = level_for_points(total_points)
    return level * level * POINTS_PER_LEVEL_UNIT - total_points
