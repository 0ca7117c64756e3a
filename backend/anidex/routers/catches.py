from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import User
from ..database.session import get_db
from ..dependencies import get_catch_service, get_current_user
from ..models.catch import (
    CatchCreate, CatchCreatedResponse, CatchPage, CatchResponse, CatchUpdate, VerificationRequest,
)
from ..models.common import Pagination, page_params
from ..repositories.catches import CatchRepository
from ..services.catches import CatchService

router = APIRouter(prefix="/catches", tags=["Catches"])


@router.post("", response_model=CatchCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_catch(
    payload: CatchCreate,
    current_user: User = Depends(get_current_user),
    service: CatchService = Depends(get_catch_service),
    db: AsyncSession = Depends(get_db)
):
    """Record a new catch with photo and location."""
    catch, location_created = await service.create_catch(current_user.id, payload)
    await db.commit()
    return CatchCreatedResponse(
        data=CatchResponse.model_validate(catch),
        location_created=location_created,
    )


@router.get("/my", response_model=CatchPage)
async def get_my_catches(
    page: int = 1,
    limit: int = 20,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the authenticated user's catches, newest first."""
    page, limit, offset = page_params(page, limit)
    catches, total = await CatchRepository(db).by_user(current_user.id, limit, offset)
    return CatchPage(
        data=[CatchResponse.model_validate(c) for c in catches],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/feed", response_model=CatchPage)
async def get_feed(
    page: int = 1,
    limit: int = 20,
    db: AsyncSession = Depends(get_db)
):
    """Get recent public, approved catches."""
    page, limit, offset = page_params(page, limit)
    catches, total = await CatchRepository(db).recent_public(limit, offset)
    return CatchPage(
        data=[CatchResponse.model_validate(c) for c in catches],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{catch_id}", response_model=CatchResponse)
async def get_catch(catch_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a catch by id."""
    catch = await CatchRepository(db).get(catch_id)
    if catch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Catch not found")
    return catch


@router.patch("/{catch_id}", response_model=CatchResponse)
async def update_catch(
    catch_id: UUID,
    changes: CatchUpdate,
    current_user: User = Depends(get_current_user),
    service: CatchService = Depends(get_catch_service),
    db: AsyncSession = Depends(get_db)
):
    """Edit a catch that has not been verified yet."""
    catch = await service.update_catch(catch_id, current_user.id, changes)
    await db.commit()
    return catch


@router.post("/{catch_id}/verify", response_model=CatchResponse)
async def verify_catch(
    catch_id: UUID,
    decision: VerificationRequest,
    current_user: User = Depends(get_current_user),
    service: CatchService = Depends(get_catch_service),
    db: AsyncSession = Depends(get_db)
):
    """Record a moderator's verification decision."""
    catch = await service.verify_catch(catch_id, current_user, decision.status, decision.notes)
    await db.commit()
    return catch
