"""Tests for the environment-driven settings."""

import pytest
from pydantic import ValidationError

from marketplace.adapters.configuration.config import Settings


def test_defaults_match_original_deployment(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    settings = Settings(_env_file=None)

    assert settings.SECRET_KEY == "your-secret-key"
    assert settings.ALGORITHM == "HS256"
    assert settings.ACCESS_TOKEN_EXPIRE_HOURS == 24
    assert settings.USER_CACHE_TTL_SECONDS == 3600
    assert settings.RATE_LIMIT_WINDOW_SECONDS == 60
    assert settings.GATEKEEPER_HEADER == "Authorization"
    assert settings.LOG_LEVEL == "INFO"


def test_database_url_is_assembled_from_parts():
    settings = Settings(
        _env_file=None,
        POSTGRES_USER="market",
        POSTGRES_PASSWORD="s3cret",
        POSTGRES_HOST="db",
        POSTGRES_PORT=6543,
        POSTGRES_DB="shop",
    )
    assert settings.DATABASE_URL == "postgresql+asyncpg://market:s3cret@db:6543/shop"


def test_explicit_database_url_wins():
    settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///:memory:")
    assert settings.DATABASE_URL == "sqlite+aiosqlite:///:memory:"


def test_exempt_paths_accept_csv_from_environment(monkeypatch):
    monkeypatch.setenv("GATEKEEPER_EXEMPT_PATHS", "/health, /auth/")
    settings = Settings(_env_file=None)
    assert settings.GATEKEEPER_EXEMPT_PATHS == ["/health", "/auth/"]


def test_log_level_is_normalised_and_validated():
    assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")
