from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Database
    DATABASE_URL: str

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # OAuth providers
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URL: str = "http://localhost:8080/api/auth/google/callback"
    FACEBOOK_CLIENT_ID: str = ""
    FACEBOOK_CLIENT_SECRET: str = ""
    FACEBOOK_REDIRECT_URL: str = "http://localhost:8080/api/auth/facebook/callback"
    FIREBASE_PROJECT_ID: str = ""

    # Frontend / HTTP
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Game Configuration
    LOCATION_MATCH_RADIUS_KM: float = 0.1
    NEARBY_DEFAULT_RADIUS_KM: float = 10.0
    NEARBY_MAX_RADIUS_KM: float = 100.0
    FIRST_CATCH_COMBO_MULTIPLIER: float = 1.5
    APPLY_COMBO_TO_POINTS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
