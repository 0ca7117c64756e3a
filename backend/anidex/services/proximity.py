"""
Nearest-location matching.

Locations have a fuzzy identity: a new sighting within the match radius of an
existing location is recorded against that location instead of creating a
new one. The first recorded point anchors the location; it is never moved.
"""

import logging
from dataclasses import dataclass
from math import asin, cos, degrees, radians, sin
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from .scoring import EARTH_RADIUS_KM, haversine_distance

logger = logging.getLogger(__name__)

CATCH_MATCH_RADIUS_KM = 0.1
NEARBY_DEFAULT_RADIUS_KM = 10.0
NEARBY_MAX_RADIUS_KM = 100.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


L = TypeVar("L", bound=HasCoordinates)


class LocationStore(Protocol[L]):
    """Persistence the resolver needs: list candidates and insert a new point."""

    async def list_candidates(self, lat: float, lng: float, radius_km: float) -> Sequence[L]:
        ...

    async def insert(self, lat: float, lng: float) -> L:
        ...


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def spans_all_longitudes(self) -> bool:
        return self.min_lng <= -180.0 and self.max_lng >= 180.0


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """
    Latitude/longitude box containing every point within radius_km.

    Boxes reaching a pole or crossing the antimeridian cover all longitudes.
    """
    angular = radius_km / EARTH_RADIUS_KM
    delta_lat = degrees(angular)
    min_lat = lat - delta_lat
    max_lat = lat + delta_lat

    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0)

    ratio = sin(angular) / cos(radians(lat))
    if ratio >= 1.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)

    delta_lng = degrees(asin(ratio))
    min_lng = lng - delta_lng
    max_lng = lng + delta_lng
    if min_lng < -180.0 or max_lng > 180.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)
    return BoundingBox(min_lat, max_lat, min_lng, max_lng)


def nearest_location(
    candidates: Iterable[L], lat: float, lng: float, radius_km: float
) -> Optional[Tuple[L, float]]:
    """
    Return the closest candidate and its distance, or None if none is within radius_km.

    Equidistant candidates resolve to the one seen first in iteration order.
    """
    best: Optional[L] = None
    best_distance = 0.0
    for candidate in candidates:
        distance = haversine_distance(lat, lng, candidate.latitude, candidate.longitude)
        if best is None or distance < best_distance:
            best = candidate
            best_distance = distance

    if best is None or best_distance > radius_km:
        return None
    return best, best_distance


def locations_within(candidates: Iterable[L], lat: float, lng: float, radius_km: float) -> List[L]:
    """All candidates within radius_km, nearest first."""
    matches = []
    for candidate in candidates:
        distance = haversine_distance(lat, lng, candidate.latitude, candidate.longitude)
        if distance <= radius_km:
            matches.append((distance, candidate))
    matches.sort(key=lambda pair: pair[0])
    return [candidate for _, candidate in matches]


def clamp_search_radius(
    radius_km: Optional[float],
    default_km: float = NEARBY_DEFAULT_RADIUS_KM,
    max_km: float = NEARBY_MAX_RADIUS_KM,
) -> float:
    """Radius for nearby searches: default when unset or non-positive, capped at max_km."""
    if radius_km is None or radius_km <= 0:
        return default_km
    return min(radius_km, max_km)


async def find_or_create_location(
    store: LocationStore[L],
    lat: float,
    lng: float,
    radius_km: float = CATCH_MATCH_RADIUS_KM,
    candidates: Optional[Iterable[L]] = None,
) -> Tuple[L, bool]:
    """
    Resolve a coordinate to an existing location or create a new one.

    Args:
        store: Where candidates come from and new locations go
        lat, lng: Sighting coordinates (degrees)
        radius_km: Maximum distance for a match
        candidates: Optional subset to match against instead of the store's

    Returns:
        (location, created)
    """
    if candidates is None:
        candidates = await store.list_candidates(lat, lng, radius_km)

    match = nearest_location(candidates, lat, lng, radius_km)
    if match is not None:
        location, distance = match
        logger.debug("Matched (%.6f, %.6f) to existing location %.3f km away", lat, lng, distance)
        return location, False

    location = await store.insert(lat, lng)
    logger.info("Created location at (%.6f, %.6f)", lat, lng)
    return location, True
