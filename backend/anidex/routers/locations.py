from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..database.session import get_db
from ..models.catch import CatchResponse, HotspotResponse, LocationCatchesResponse
from ..models.common import Pagination, page_params
from ..models.location import Center, LocationResponse, NearbyLocationsResponse
from ..repositories.catches import CatchRepository
from ..repositories.locations import LocationRepository
from ..services.proximity import clamp_search_radius, locations_within, nearest_location

router = APIRouter(prefix="/locations", tags=["Locations"])

HOTSPOT_MIN_CATCHES = 5
HOTSPOT_RECENT_CATCHES = 10


@router.get("/nearby", response_model=NearbyLocationsResponse)
async def get_nearby_locations(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = None,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db)
):
    """Get locations within a radius of the user's position, nearest first."""
    radius_km = clamp_search_radius(radius, settings.NEARBY_DEFAULT_RADIUS_KM, settings.NEARBY_MAX_RADIUS_KM)
    candidates = await LocationRepository(db).list_candidates(lat, lng, radius_km)
    return NearbyLocationsResponse(
        data=[LocationResponse.model_validate(loc) for loc in locations_within(candidates, lat, lng, radius_km)],
        center=Center(latitude=lat, longitude=lng),
        radius_km=radius_km,
    )


@router.get("/catches", response_model=LocationCatchesResponse)
async def get_location_catches(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    page: int = 1,
    limit: int = 20,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db)
):
    """Get public catches at the location matching these coordinates."""
    page, limit, offset = page_params(page, limit)
    radius_km = settings.LOCATION_MATCH_RADIUS_KM

    candidates = await LocationRepository(db).list_candidates(lat, lng, radius_km)
    match = nearest_location(candidates, lat, lng, radius_km)
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No location found at these coordinates")
    location, _ = match

    catches, total = await CatchRepository(db).public_at_location(location.id, limit, offset)
    return LocationCatchesResponse(
        data=[CatchResponse.model_validate(c) for c in catches],
        location=LocationResponse.model_validate(location),
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/hotspots", response_model=List[HotspotResponse])
async def get_hotspots(limit: int = 10, db: AsyncSession = Depends(get_db)):
    """Get the busiest locations by catch and species count, each with its latest public catches."""
    if limit < 1 or limit > 50:
        limit = 10

    catches = CatchRepository(db)
    hotspots = []
    for location in await LocationRepository(db).hotspots(HOTSPOT_MIN_CATCHES, limit):
        response = HotspotResponse.model_validate(location)
        recent = await catches.recent_public_at_location(location.id, HOTSPOT_RECENT_CATCHES)
        response.recent_catches = [CatchResponse.model_validate(c) for c in recent]
        hotspots.append(response)
    return hotspots
