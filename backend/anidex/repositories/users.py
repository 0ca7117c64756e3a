from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, user: User) -> User:
        user.email = normalize_email(user.email)
        self.db.add(user)
        await self.db.flush()
        return user

    async def by_id(self, user_id: UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(func.lower(User.email) == normalize_email(email)))
        return result.scalar_one_or_none()

    async def by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def by_provider_id(self, provider: str, provider_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.provider == provider, User.provider_id == provider_id)
        )
        return result.scalar_one_or_none()

    async def set_refresh_token(self, user: User, refresh_token: str) -> None:
        user.refresh_token = refresh_token
        await self.db.flush()
