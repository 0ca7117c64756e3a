from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class LocationResponse(BaseModel):
    id: UUID
    latitude: float
    longitude: float
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    location_type: Optional[str] = None
    catch_count: int
    species_count: int
    user_count: int
    last_catch_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Center(BaseModel):
    latitude: float
    longitude: float


class NearbyLocationsResponse(BaseModel):
    data: List[LocationResponse]
    center: Center
    radius_km: float
