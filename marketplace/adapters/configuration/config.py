# marketplace/adapters/configuration/config.py

from functools import lru_cache
from typing import Annotated, Optional, List, Union
from logging import getLevelName
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"
    DEBUG: bool = False

    # Credential store
    DB_DRIVER: str = "asyncpg"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "marketplace"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    # Auth
    SECRET_KEY: str = "your-secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Session cache
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PASSWORD: str = ""
    USER_CACHE_TTL_SECONDS: int = 3600

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # API key gatekeeper (Unkey)
    UNKEY_ROOT_KEY: str = ""
    UNKEY_API_ID: str = ""
    UNKEY_BASE_URL: str = "https://api.unkey.dev"
    KEY_VERIFICATION_TIMEOUT: float = 5.0
    GATEKEEPER_ENABLED: bool = True
    GATEKEEPER_HEADER: str = "Authorization"
    # /auth/ and /users/ carry session tokens in Authorization, so they skip the key check
    GATEKEEPER_EXEMPT_PATHS: Annotated[List[str], NoDecode] = [
        "/docs", "/redoc", "/openapi.json", "/health", "/auth/", "/users/"
    ]

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return value

        data = info.data
        return URL.create(
            drivername=f"postgresql+{data.get('DB_DRIVER', 'asyncpg')}",
            username=data.get("POSTGRES_USER"),
            password=data.get("POSTGRES_PASSWORD"),
            host=data.get("POSTGRES_HOST"),
            port=data.get("POSTGRES_PORT"),
            database=data.get("POSTGRES_DB"),
        ).render_as_string(hide_password=False)

    @field_validator("GATEKEEPER_EXEMPT_PATHS", mode="before")
    def assemble_exempt_paths(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Accepts a CSV string (e.g. '/docs,/auth/') or a list.
        """
        if isinstance(v, str) and not v.startswith("["):
            return [path.strip() for path in v.split(",") if path.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid GATEKEEPER_EXEMPT_PATHS: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Ensures the value is a valid logging level."""
        lvl = v.upper()
        if not isinstance(getLevelName(lvl), int):
            raise ValueError(f"Invalid LOG_LEVEL: {v!r}")
        return lvl

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
