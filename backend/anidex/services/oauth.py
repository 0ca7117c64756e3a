import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
import jwt

from ..config import Settings
from ..database.models import AuthProvider

logger = logging.getLogger(__name__)

FIREBASE_JWKS_URL = "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"


class OAuthError(RuntimeError):
    pass


@dataclass(frozen=True)
class OAuthUserInfo:
    """Profile returned by an identity provider."""
    id: str
    email: str
    name: str = ""
    avatar: str = ""


@dataclass(frozen=True)
class ProviderEndpoints:
    auth_url: str
    token_url: str
    userinfo_url: str
    scopes: str


PROVIDERS = {
    AuthProvider.GOOGLE: ProviderEndpoints(
        auth_url="https://accounts.google.com/o/oauth2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://www.googleapis.com/oauth2/v2/userinfo",
        scopes="openid profile email",
    ),
    AuthProvider.FACEBOOK: ProviderEndpoints(
        auth_url="https://www.facebook.com/v3.2/dialog/oauth",
        token_url="https://graph.facebook.com/v3.2/oauth/access_token",
        userinfo_url="https://graph.facebook.com/me?fields=id,name,email,picture.type(large)",
        scopes="email public_profile",
    ),
}


class OAuthClient:
    """Authorization-code flow against Google and Facebook."""

    def __init__(self, settings: Settings, timeout: float = 15.0):
        self.timeout = timeout
        self.credentials = {
            AuthProvider.GOOGLE: (
                settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET, settings.GOOGLE_REDIRECT_URL
            ),
            AuthProvider.FACEBOOK: (
                settings.FACEBOOK_CLIENT_ID, settings.FACEBOOK_CLIENT_SECRET, settings.FACEBOOK_REDIRECT_URL
            ),
        }

    def _provider(self, provider: AuthProvider) -> ProviderEndpoints:
        if provider not in PROVIDERS:
            raise OAuthError(f"Unsupported OAuth provider: {provider}")
        return PROVIDERS[provider]

    def authorization_url(self, provider: AuthProvider, state: str) -> str:
        endpoints = self._provider(provider)
        client_id, _, redirect_url = self.credentials[provider]
        query = urlencode({
            "client_id": client_id,
            "redirect_uri": redirect_url,
            "response_type": "code",
            "scope": endpoints.scopes,
            "state": state,
        })
        return f"{endpoints.auth_url}?{query}"

    async def exchange_code(self, provider: AuthProvider, code: str) -> OAuthUserInfo:
        """Trade an authorization code for the user's profile."""
        endpoints = self._provider(provider)
        client_id, client_secret, redirect_url = self.credentials[provider]

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                token_response = await client.post(
                    endpoints.token_url,
                    data={
                        "grant_type": "authorization_code",
                        "code": code,
                        "client_id": client_id,
                        "client_secret": client_secret,
                        "redirect_uri": redirect_url,
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthError(f"{provider.value} returned no access token")

                profile_response = await client.get(
                    endpoints.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                profile = profile_response.json()
            except httpx.HTTPError as e:
                logger.warning("OAuth exchange with %s failed: %s", provider.value, e)
                raise OAuthError(f"{provider.value} login failed: {e}") from e

        return parse_profile(provider, profile)


def parse_profile(provider: AuthProvider, profile: Dict[str, Any]) -> OAuthUserInfo:
    """Normalize a provider profile payload."""
    email = profile.get("email") or ""
    if not email:
        raise OAuthError(f"Unable to get email from {provider.value.capitalize()}")
    provider_id = str(profile.get("id") or "")
    if not provider_id:
        raise OAuthError(f"Unable to get user id from {provider.value.capitalize()}")

    if provider == AuthProvider.FACEBOOK:
        avatar = ((profile.get("picture") or {}).get("data") or {}).get("url", "")
    else:
        avatar = profile.get("picture") or ""

    return OAuthUserInfo(
        id=provider_id,
        email=email,
        name=profile.get("name") or "",
        avatar=avatar,
    )


class FirebaseVerifier:
    """Verifies Firebase ID tokens against Google's published signing keys."""

    def __init__(self, project_id: str, jwks_client: Optional[jwt.PyJWKClient] = None):
        self.project_id = project_id
        self.jwks_client = jwks_client or jwt.PyJWKClient(FIREBASE_JWKS_URL)

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        if not self.project_id:
            raise OAuthError("FIREBASE_PROJECT_ID is not configured")
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(id_token)
            claims = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=f"https://securetoken.google.com/{self.project_id}",
            )
        except jwt.PyJWTError as e:
            raise OAuthError(f"Invalid Firebase token: {e}") from e

        if not claims.get("sub"):
            raise OAuthError("Invalid Firebase token: missing subject")
        return claims
