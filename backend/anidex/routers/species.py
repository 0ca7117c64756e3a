from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import AnimalCategory, Rarity, Species
from ..database.session import get_db
from ..models.common import Pagination, page_params
from ..models.species import SpeciesPage, SpeciesResponse, SpeciesSearchResponse
from ..repositories.species import SpeciesRepository
from ..services.scoring import species_points

router = APIRouter(prefix="/species", tags=["Species"])


def to_response(species: Species) -> SpeciesResponse:
    response = SpeciesResponse.model_validate(species)
    response.points = species_points(species)
    return response


@router.get("", response_model=SpeciesPage)
async def list_species(
    category: Optional[AnimalCategory] = None,
    rarity: Optional[Rarity] = None,
    page: int = 1,
    limit: int = 20,
    db: AsyncSession = Depends(get_db)
):
    """List active species, optionally filtered by category and rarity."""
    page, limit, offset = page_params(page, limit)
    species, total = await SpeciesRepository(db).list_filtered(
        category.value if category else None,
        rarity.value if rarity else None,
        limit,
        offset,
    )
    return SpeciesPage(
        data=[to_response(s) for s in species],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/search", response_model=SpeciesSearchResponse)
async def search_species(
    q: str = Query(default=""),
    limit: int = 10,
    db: AsyncSession = Depends(get_db)
):
    """Search species by common or scientific name."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query is required")
    if limit < 1 or limit > 50:
        limit = 10

    species = await SpeciesRepository(db).search(query, limit)
    return SpeciesSearchResponse(data=[to_response(s) for s in species], query=query)


@router.get("/{species_id}", response_model=SpeciesResponse)
async def get_species(species_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get one species by id."""
    species = await SpeciesRepository(db).get(species_id)
    if species is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Species not found")
    return to_response(species)
