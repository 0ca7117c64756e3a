from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import User
from ..database.session import get_db
from ..dependencies import get_catch_service, get_current_user
from ..models.badge import BadgeList, BadgeResponse, UserBadgeList, UserBadgeResponse
from ..models.user import UserStatsResponse
from ..repositories.badges import BadgeRepository
from ..services.catches import CatchService

router = APIRouter(tags=["Users"])


@router.get("/users/me/stats", response_model=UserStatsResponse)
async def get_my_stats(
    current_user: User = Depends(get_current_user),
    service: CatchService = Depends(get_catch_service)
):
    """Catch totals, points and level for the authenticated user."""
    return await service.user_stats(current_user.id)


@router.get("/badges", response_model=BadgeList)
async def list_badges(db: AsyncSession = Depends(get_db)):
    """List badges that can be earned. Secret badges are hidden."""
    badges = await BadgeRepository(db).active()
    return BadgeList(data=[BadgeResponse.model_validate(b) for b in badges])


@router.get("/users/me/badges", response_model=UserBadgeList)
async def list_my_badges(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Badge progress for the authenticated user."""
    user_badges = await BadgeRepository(db).for_user(current_user.id)
    return UserBadgeList(data=[UserBadgeResponse.model_validate(ub) for ub in user_badges])
