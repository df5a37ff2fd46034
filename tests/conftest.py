"""
Shared pytest fixtures.

Fixture hierarchy (all function scoped):
    test_settings   -> Settings isolated from the environment and .env
    database        -> in-memory SQLite credential store (aiosqlite, StaticPool)
    redis_client    -> fakeredis client with its own server
    session_cache   -> RedisSessionCache over redis_client
    token_service   -> UserAuthManager with the test secret
    key_verifier    -> FakeKeyVerifier (no network)
    container       -> ServiceContainer wired from the fixtures above
    client          -> httpx AsyncClient on the FastAPI app via ASGITransport

The ASGI transport does not run the lifespan, so the prebuilt container is
injected into create_app directly.
"""

import os

# Quiet logs and a known environment before any application import
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "testing"

from typing import List, Set

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.pool import StaticPool

from marketplace.adapters.configuration.config import Settings
from marketplace.adapters.container import ServiceContainer
from marketplace.adapters.outbound.cache.session_cache import RedisSessionCache
from marketplace.adapters.outbound.persistence.database import Database
from marketplace.adapters.outbound.persistence.models import User
from marketplace.adapters.outbound.security.auth_user_manager import UserAuthManager
from marketplace.application.ports.outbound import IKeyVerifier
from marketplace.domain.exceptions import KeyVerificationException
from marketplace.main import create_app

TEST_SECRET = "test-secret-key"
TEST_API_ID = "api_test"
VALID_API_KEY = "key_valid"


class FakeKeyVerifier(IKeyVerifier):
    """Key verifier accepting a fixed set of keys, or failing on demand."""

    def __init__(self, valid_keys: Set[str] = None, fail: bool = False):
        self.valid_keys = valid_keys if valid_keys is not None else {VALID_API_KEY}
        self.fail = fail
        self.calls: List[tuple] = []

    async def verify(self, api_id: str, key: str) -> bool:
        self.calls.append((api_id, key))
        if self.fail:
            raise KeyVerificationException(detail="authority unreachable")
        return key in self.valid_keys


def make_settings(**overrides) -> Settings:
    values = dict(
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        UNKEY_API_ID=TEST_API_ID,
        RATE_LIMIT_PER_MINUTE=1000,
        ENVIRONMENT="testing",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


async def set_user_status(database: Database, email: str, status: str) -> None:
    async with database.session() as db:
        await db.execute(update(User).where(User.email == email).values(status=status))


@pytest.fixture
def test_settings():
    return make_settings()


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings.DATABASE_URL, poolclass=StaticPool)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def session_cache(redis_client):
    return RedisSessionCache(redis_client)


@pytest.fixture
def token_service():
    return UserAuthManager(secret_key=TEST_SECRET)


@pytest.fixture
def key_verifier():
    return FakeKeyVerifier()


@pytest.fixture
def container(test_settings, database, session_cache, token_service, key_verifier):
    return ServiceContainer(
        settings=test_settings,
        database=database,
        session_cache=session_cache,
        token_service=token_service,
        key_verifier=key_verifier,
    )


@pytest_asyncio.fixture
async def client(container):
    app = create_app(container.settings, container=container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
