"""
Password hashing and JWT helpers.
"""

import secrets
import time
from typing import Any, Dict, Optional
from uuid import UUID

import bcrypt
import jwt

from ..config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenError(RuntimeError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise ValueError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def _encode(payload: Dict[str, Any], ttl_seconds: int, settings: Settings) -> str:
    issued_at = int(time.time())
    claims = dict(payload, iat=issued_at, exp=issued_at + ttl_seconds)
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def build_access_token(user_id: UUID, email: str, username: Optional[str], settings: Settings) -> str:
    return _encode(
        {"sub": str(user_id), "email": email, "username": username or "", "type": ACCESS_TOKEN_TYPE},
        settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        settings,
    )


def build_refresh_token(user_id: UUID, settings: Settings) -> str:
    return _encode(
        # jti keeps two tokens minted in the same second distinct
        {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE, "jti": secrets.token_urlsafe(16)},
        settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        settings,
    )


def decode_token(token: str, expected_type: str, settings: Settings) -> UUID:
    """Validate a token and return the user id it was issued for."""
    raw = (token or "").strip()
    if not raw:
        raise TokenError("Token is empty.")

    try:
        payload = jwt.decode(raw, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid token.") from exc

    if payload.get("type") != expected_type:
        raise TokenError(f"Expected a {expected_type} token.")

    try:
        return UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise TokenError("Invalid token subject.") from exc
