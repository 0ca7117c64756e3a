from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from ..database.models import VerificationStatus, WeatherCondition
from .common import Pagination
from .location import LocationResponse


class CatchCreate(BaseModel):
    """Request for recording a new catch."""
    species_id: UUID
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    user_photo_url: str = Field(..., min_length=1)
    user_notes: str = ""
    user_rating: Optional[int] = Field(default=None, ge=1, le=5)
    weather: Optional[WeatherCondition] = None
    temperature: Optional[float] = None
    is_public: bool = True


class CatchUpdate(BaseModel):
    """Fields a user may change while the catch is still pending."""
    user_notes: Optional[str] = None
    user_rating: Optional[int] = Field(default=None, ge=1, le=5)
    weather: Optional[WeatherCondition] = None
    temperature: Optional[float] = None
    is_public: Optional[bool] = None


class VerificationRequest(BaseModel):
    status: VerificationStatus
    notes: Optional[str] = None


class CatchSpecies(BaseModel):
    id: UUID
    common_name: str
    scientific_name: str
    rarity: str

    class Config:
        from_attributes = True


class CatchResponse(BaseModel):
    """Response with catch details."""
    id: UUID
    user_id: UUID
    species_id: UUID
    location_id: UUID
    user_photo_url: str
    user_notes: Optional[str] = None
    user_rating: Optional[int] = None
    weather: Optional[str] = None
    time_of_day: Optional[str] = None
    temperature: Optional[float] = None
    verification_status: str
    verified_at: Optional[datetime] = None
    points_awarded: int
    is_first_catch: bool
    combo_multiplier: float
    is_public: bool
    caught_at: datetime
    species: Optional[CatchSpecies] = None
    location: Optional[LocationResponse] = None

    class Config:
        from_attributes = True


class CatchCreatedResponse(BaseModel):
    data: CatchResponse
    location_created: bool
    message: str = "Animal catch created successfully"


class CatchPage(BaseModel):
    data: List[CatchResponse]
    pagination: Pagination


class LocationCatchesResponse(BaseModel):
    data: List[CatchResponse]
    location: LocationResponse
    pagination: Pagination


class HotspotResponse(LocationResponse):
    """A busy location with its latest public catches."""
    recent_catches: List[CatchResponse] = []
