"""HTTP tests for the auth and user routes."""

import uuid

import pytest
from httpx import AsyncClient, ASGITransport
from redis.exceptions import ConnectionError as RedisConnectionError

from marketplace.adapters.container import ServiceContainer
from marketplace.adapters.outbound.cache.session_cache import RedisSessionCache
from marketplace.domain.exceptions import CacheOperationException
from marketplace.main import create_app
from tests.conftest import VALID_API_KEY, set_user_status

ALICE = {"username": "alice", "email": "alice@x.com", "password": "pw123456"}


async def register(client, **overrides):
    return await client.post("/auth/register", json={**ALICE, **overrides})


async def login(client, email="alice@x.com", password="pw123456"):
    return await client.post("/auth/login", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_register_login_logout_scenario(client):
    response = await register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "alice"
    assert body["role"] == "user"
    assert body["status"] == "active"
    assert body["credits"]["balance"] == 0
    assert "password" not in body and "password_hash" not in body

    response = await login(client)
    assert response.status_code == 200
    token = response.json()["token"]
    assert token
    assert response.json()["user"]["email"] == "alice@x.com"

    response = await login(client, password="wrongpw")
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"

    response = await client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.content == b""

    response = await client.get("/")
    assert response.status_code == 401
    assert response.text == "Unauthorized"


@pytest.mark.asyncio
async def test_duplicate_email_and_username(client):
    assert (await register(client)).status_code == 201

    response = await register(client, username="alice2")
    assert response.status_code == 409
    assert response.json() == {"detail": "Email already registered", "code": "DUPLICATE_EMAIL"}

    response = await register(client, email="other@x.com")
    assert response.status_code == 409
    assert response.json() == {"detail": "Username already taken", "code": "DUPLICATE_USERNAME"}

    response = await register(client)
    assert response.json()["code"] == "DUPLICATE_EMAIL"


@pytest.mark.asyncio
async def test_failed_logins_are_indistinguishable(client):
    await register(client)

    wrong_password = await login(client, password="wrongpw")
    unknown_email = await login(client, email="ghost@x.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.content == unknown_email.content


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "alice@x.com", "password": "pw123456"},
        {**ALICE, "email": "not-an-email"},
        {**ALICE, "password": "short"},
        {**ALICE, "username": "a"},
    ],
    ids=["missing-username", "bad-email", "short-password", "short-username"],
)
async def test_malformed_registration_is_400(client, payload):
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_malformed_login_is_400(client):
    response = await client.post("/auth/login", json={"email": "alice@x.com"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_inactive_account_gets_403(client, database):
    await register(client)
    await set_user_status(database, "alice@x.com", "banned")

    response = await login(client)

    assert response.status_code == 403
    assert response.json() == {"detail": "Account is not active", "code": "ACCOUNT_NOT_ACTIVE"}


@pytest.mark.asyncio
async def test_current_user_until_logout(client):
    await register(client)
    token = (await login(client)).json()["token"]
    auth = {"Authorization": f"Bearer {token}"}

    response = await client.get("/users/me", headers=auth)
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    await client.post("/auth/logout", headers=auth)

    response = await client.get("/users/me", headers=auth)
    assert response.status_code == 401
    assert response.json()["detail"] == "Token revoked"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_current_user_requires_token(client):
    response = await client.get("/users/me")

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_logout_without_header_succeeds(client):
    response = await client.post("/auth/logout")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_gatekeeper_admits_valid_key(client):
    response = await client.get("/", headers={"Authorization": VALID_API_KEY})

    assert response.status_code == 200
    assert response.text == "Hello, World!"


@pytest.mark.asyncio
async def test_logout_with_empty_bearer_revokes_nothing(client, redis_client):
    response = await client.post("/auth/logout", headers={"Authorization": "Bearer "})

    assert response.status_code == 200
    assert await redis_client.keys("blacklist:*") == []


@pytest.mark.asyncio
async def test_ban_rejects_existing_session(client, database):
    await register(client)
    token = (await login(client)).json()["token"]
    auth = {"Authorization": f"Bearer {token}"}
    assert (await client.get("/users/me", headers=auth)).status_code == 200

    await set_user_status(database, "alice@x.com", "banned")

    response = await client.get("/users/me", headers=auth)
    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_NOT_ACTIVE"


@pytest.mark.asyncio
async def test_read_user_by_id(client):
    user_id = (await register(client)).json()["id"]
    await register(client, username="bob", email="bob@x.com")
    token = (await login(client, email="bob@x.com")).json()["token"]
    auth = {"Authorization": f"Bearer {token}"}

    response = await client.get(f"/users/{user_id}", headers=auth)
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    response = await client.get(f"/users/{uuid.uuid4()}", headers=auth)
    assert response.status_code == 404
    assert response.json() == {"detail": "User not found", "code": "USER_NOT_FOUND"}

    assert (await client.get(f"/users/{user_id}")).status_code == 401


class SessionStoreDown(RedisSessionCache):
    async def store_session(self, user_id, token, ttl):
        raise CacheOperationException(
            detail="Failed to create session",
            original_error=RedisConnectionError("Error 111 connecting to cache-internal:6379"),
        )


@pytest.mark.asyncio
async def test_dependency_failure_hides_internal_error(test_settings, database, redis_client, token_service,
                                                       key_verifier):
    container = ServiceContainer(test_settings, database, SessionStoreDown(redis_client), token_service,
                                 key_verifier)
    app = create_app(test_settings, container=container)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        await register(http_client)
        response = await login(http_client)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to create session", "code": "CACHE_OPERATION_ERROR"}
    assert "cache-internal" not in response.text
