from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class BadgeResponse(BaseModel):
    id: UUID
    name: str
    description: str
    short_desc: str
    badge_type: str
    badge_rarity: str
    icon_url: Optional[str] = None
    required_count: Optional[int] = None
    required_rarity: Optional[str] = None
    points_awarded: int

    class Config:
        from_attributes = True


class UserBadgeResponse(BaseModel):
    badge: BadgeResponse
    progress: int
    max_progress: int
    progress_percentage: float
    is_earned: bool
    earned_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BadgeList(BaseModel):
    data: List[BadgeResponse]


class UserBadgeList(BaseModel):
    data: List[UserBadgeResponse]
