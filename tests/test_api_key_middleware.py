"""Tests for the API key gatekeeper."""

import pytest
from httpx import AsyncClient, ASGITransport

from marketplace.adapters.container import ServiceContainer
from marketplace.main import create_app
from tests.conftest import FakeKeyVerifier, TEST_API_ID, VALID_API_KEY, make_settings


@pytest.mark.asyncio
async def test_missing_key_is_rejected_without_verification(client, key_verifier):
    response = await client.get("/")

    assert response.status_code == 401
    assert response.text == "Unauthorized"
    assert key_verifier.calls == []


@pytest.mark.asyncio
async def test_valid_key_reaches_route(client, key_verifier):
    response = await client.get("/", headers={"Authorization": VALID_API_KEY})

    assert response.status_code == 200
    assert response.text == "Hello, World!"
    assert key_verifier.calls == [(TEST_API_ID, VALID_API_KEY)]


@pytest.mark.asyncio
async def test_invalid_key_is_rejected(client):
    response = await client.get("/", headers={"Authorization": "key_wrong"})

    assert response.status_code == 401
    assert response.text == "Unauthorized: Invalid API key"


@pytest.mark.asyncio
async def test_verification_failure_never_admits(client, key_verifier):
    key_verifier.fail = True

    response = await client.get("/", headers={"Authorization": VALID_API_KEY})

    assert response.status_code == 500
    assert "Hello" not in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/openapi.json"])
async def test_exempt_paths_skip_verification(client, key_verifier, path):
    response = await client.get(path)

    assert response.status_code == 200
    assert key_verifier.calls == []


@pytest.mark.asyncio
async def test_prefix_exemption_covers_auth_routes(client, key_verifier):
    response = await client.post("/auth/logout")

    assert response.status_code == 200
    assert key_verifier.calls == []


@pytest.mark.asyncio
async def test_custom_header_and_disabled_gatekeeper(database, session_cache, token_service):
    verifier = FakeKeyVerifier()

    async def get_root(settings):
        container = ServiceContainer(settings, database, session_cache, token_service, verifier)
        app = create_app(settings, container=container)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
            return await http_client.get("/", headers={"X-API-Key": VALID_API_KEY})

    assert (await get_root(make_settings(GATEKEEPER_HEADER="X-API-Key"))).status_code == 200
    assert verifier.calls == [(TEST_API_ID, VALID_API_KEY)]

    verifier.calls.clear()
    assert (await get_root(make_settings(GATEKEEPER_ENABLED=False))).status_code == 200
    assert verifier.calls == []


@pytest.mark.asyncio
async def test_route_docs_mention_default_exemption(client):
    paths = (await client.get("/openapi.json")).json()["paths"]

    for path, method in [("/auth/register", "post"), ("/auth/login", "post"),
                         ("/auth/logout", "post"), ("/users/me", "get")]:
        assert "GATEKEEPER_EXEMPT_PATHS" in paths[path][method]["description"]
