"""Tests for application settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from anidex.config import Settings


class TestSettings:
    """Test required values and game defaults."""

    def test_secret_key_is_required(self, monkeypatch) -> None:
        """Without SECRET_KEY the app refuses to start instead of signing with a known key."""
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(ValidationError, match="SECRET_KEY"):
            Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", _env_file=None)

    def test_database_url_is_required(self, monkeypatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValidationError, match="DATABASE_URL"):
            Settings(SECRET_KEY="test-secret-key-with-enough-length-for-hs256", _env_file=None)

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("SECRET_KEY", "from-the-environment-with-enough-length")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://anidex@db:5432/anidex")
        settings = Settings(_env_file=None)
        assert settings.SECRET_KEY == "from-the-environment-with-enough-length"
        assert settings.DATABASE_URL.startswith("postgresql+asyncpg://")

    def test_game_defaults(self, settings) -> None:
        assert settings.LOCATION_MATCH_RADIUS_KM == 0.1
        assert settings.NEARBY_DEFAULT_RADIUS_KM == 10.0
        assert settings.NEARBY_MAX_RADIUS_KM == 100.0
        assert settings.FIRST_CATCH_COMBO_MULTIPLIER == 1.5
        assert settings.APPLY_COMBO_TO_POINTS is True
