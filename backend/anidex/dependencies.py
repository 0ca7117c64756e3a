from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings, get_settings
from .database.models import User
from .database.session import get_db
from .repositories.catches import CatchRepository
from .repositories.locations import LocationRepository
from .repositories.species import SpeciesRepository
from .repositories.users import UserRepository
from .services.auth import AuthService
from .services.catches import CatchService
from .services.oauth import FirebaseVerifier, OAuthClient

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(UserRepository(db), settings)


def get_catch_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatchService:
    return CatchService(CatchRepository(db), SpeciesRepository(db), LocationRepository(db), settings)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the user from an `Authorization: Bearer <token>` header."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await auth.user_from_access_token(credentials.credentials)


def get_oauth_client(settings: Settings = Depends(get_settings)) -> OAuthClient:
    return OAuthClient(settings)


@lru_cache()
def _firebase_verifier(project_id: str) -> FirebaseVerifier:
    # One verifier per project so the signing-key cache survives across requests
    return FirebaseVerifier(project_id)


def get_firebase_verifier(settings: Settings = Depends(get_settings)) -> FirebaseVerifier:
    return _firebase_verifier(settings.FIREBASE_PROJECT_ID)
