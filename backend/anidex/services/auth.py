"""
Auth business logic: local accounts, OAuth and Firebase logins, token refresh.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..database.models import AuthProvider, User
from ..models.user import AuthResponse, FirebaseLoginRequest, UserCreate, UserLogin, UserResponse
from ..repositories.users import UserRepository
from . import security
from .oauth import FirebaseVerifier, OAuthError, OAuthUserInfo

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.settings = settings

    async def _issue_tokens(self, user: User) -> AuthResponse:
        access_token = security.build_access_token(user.id, user.email, user.username, self.settings)
        refresh_token = security.build_refresh_token(user.id, self.settings)
        # Only the latest refresh token is honoured
        await self.users.set_refresh_token(user, refresh_token)
        return AuthResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def register(self, payload: UserCreate) -> AuthResponse:
        if await self.users.by_email(payload.email) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already registered.")
        if await self.users.by_username(payload.username) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username is already taken.")

        user = await self.users.add(User(
            email=payload.email,
            username=payload.username,
            hashed_password=security.hash_password(payload.password),
            name=payload.name,
            provider=AuthProvider.LOCAL.value,
        ))
        logger.info("Registered user %s", user.id)
        return await self._issue_tokens(user)

    async def login(self, payload: UserLogin) -> AuthResponse:
        user = await self.users.by_email(payload.email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

        if user.provider != AuthProvider.LOCAL.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Please login with {user.provider}.",
            )

        if not security.verify_password(payload.password, user.hashed_password or ""):
            logger.warning("Failed login for %s", user.id)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

        return await self._issue_tokens(user)

    async def refresh(self, refresh_token: str) -> AuthResponse:
        try:
            user_id = security.decode_token(refresh_token, security.REFRESH_TOKEN_TYPE, self.settings)
        except security.TokenError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token.") from exc

        user = await self.users.by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found.")
        if user.refresh_token != refresh_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token.")

        return await self._issue_tokens(user)

    async def user_from_access_token(self, access_token: str) -> User:
        try:
            user_id = security.decode_token(access_token, security.ACCESS_TOKEN_TYPE, self.settings)
        except security.TokenError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

        user = await self.users.by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found.")
        return user

    async def _login_external(
        self, provider: AuthProvider, provider_id: str, email: str, name: str, avatar: str
    ) -> AuthResponse:
        user = await self.users.by_provider_id(provider.value, provider_id)
        if user is None:
            existing = await self.users.by_email(email)
            if existing is not None and existing.provider != provider.value:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Email already registered with {existing.provider}.",
                )
            if existing is not None:
                user = existing
            else:
                user = await self.users.add(User(
                    email=email,
                    name=name,
                    avatar=avatar,
                    provider=provider.value,
                    provider_id=provider_id,
                ))
                logger.info("Registered %s user %s", provider.value, user.id)

        return await self._issue_tokens(user)

    async def login_with_oauth(self, provider: AuthProvider, info: OAuthUserInfo) -> AuthResponse:
        return await self._login_external(provider, info.id, info.email, info.name, info.avatar)

    async def login_with_firebase(self, payload: FirebaseLoginRequest, verifier: FirebaseVerifier) -> AuthResponse:
        try:
            claims: Dict[str, Any] = await run_in_threadpool(verifier.verify_id_token, payload.id_token)
        except OAuthError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

        email: Optional[str] = claims.get("email")
        if not email:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Firebase token has no email.")

        name = payload.name or claims.get("name") or ""
        return await self._login_external(
            AuthProvider.FIREBASE, str(claims["sub"]), email, name, claims.get("picture") or ""
        )
