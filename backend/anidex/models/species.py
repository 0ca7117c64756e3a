from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID

from .common import Pagination


class SpeciesResponse(BaseModel):
    """Species reference data with its species-level score."""
    id: UUID
    common_name: str
    scientific_name: str
    category: str
    family: Optional[str] = None
    genus: Optional[str] = None
    description: Optional[str] = None
    habitat: Optional[str] = None
    diet: Optional[str] = None
    conservation_status: Optional[str] = None
    rarity: str
    difficulty_level: int
    base_points: int
    default_image_url: Optional[str] = None
    is_endangered: bool = False
    points: int = 0

    class Config:
        from_attributes = True


class SpeciesPage(BaseModel):
    data: List[SpeciesResponse]
    pagination: Pagination


class SpeciesSearchResponse(BaseModel):
    data: List[SpeciesResponse]
    query: str
