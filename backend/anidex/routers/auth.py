import secrets

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import AuthProvider, User
from ..database.session import get_db
from ..dependencies import get_auth_service, get_current_user, get_firebase_verifier, get_oauth_client
from ..models.user import (
    AuthResponse, FirebaseLoginRequest, OAuthURLResponse, RefreshRequest,
    UserCreate, UserLogin, UserResponse,
)
from ..services.auth import AuthService
from ..services.oauth import FirebaseVerifier, OAuthClient, OAuthError

router = APIRouter(prefix="/auth", tags=["Auth"])

OAUTH_PROVIDERS = {
    "google": AuthProvider.GOOGLE,
    "facebook": AuthProvider.FACEBOOK,
}


def _oauth_provider(name: str) -> AuthProvider:
    provider = OAUTH_PROVIDERS.get(name)
    if provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown provider: {name}")
    return provider


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """Register a local account."""
    response = await auth.register(payload)
    await db.commit()
    return response


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin,
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """Log in with email and password."""
    response = await auth.login(payload)
    await db.commit()
    return response


@router.post("/refresh", response_model=AuthResponse)
async def refresh(
    payload: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair."""
    response = await auth.refresh(payload.refresh_token)
    await db.commit()
    return response


@router.get("/profile", response_model=UserResponse)
async def profile(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return current_user


@router.post("/firebase", response_model=AuthResponse)
async def firebase_login(
    payload: FirebaseLoginRequest,
    auth: AuthService = Depends(get_auth_service),
    verifier: FirebaseVerifier = Depends(get_firebase_verifier),
    db: AsyncSession = Depends(get_db)
):
    """Log in with a Firebase ID token."""
    response = await auth.login_with_firebase(payload, verifier)
    await db.commit()
    return response


@router.get("/{provider}", response_model=OAuthURLResponse)
async def oauth_login(provider: str, oauth: OAuthClient = Depends(get_oauth_client)):
    """Get the provider's authorization URL."""
    return OAuthURLResponse(url=oauth.authorization_url(_oauth_provider(provider), secrets.token_urlsafe(16)))


@router.get("/{provider}/callback", response_model=AuthResponse)
async def oauth_callback(
    provider: str,
    code: str = Query(default=""),
    oauth: OAuthClient = Depends(get_oauth_client),
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """Complete an OAuth login with the authorization code."""
    auth_provider = _oauth_provider(provider)
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="code parameter required")

    try:
        info = await oauth.exchange_code(auth_provider, code)
    except OAuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    response = await auth.login_with_oauth(auth_provider, info)
    await db.commit()
    return response
