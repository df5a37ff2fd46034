"""Tests for password hashing and session token signing."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from marketplace.adapters.outbound.security.auth_user_manager import UserAuthManager
from marketplace.domain.exceptions import InvalidCredentialsException
from marketplace.domain.models.user_domain_model import UserRole

SECRET = "unit-secret"


@pytest.fixture
def manager():
    return UserAuthManager(secret_key=SECRET)


@pytest.mark.asyncio
async def test_hash_is_salted_and_verifiable(manager):
    first = await manager.hash_password("pw123456")
    second = await manager.hash_password("pw123456")

    assert first != "pw123456"
    assert first != second
    assert first.startswith("$2b$")
    assert await manager.verify_password("pw123456", first)
    assert not await manager.verify_password("wrongpw1", first)


@pytest.mark.asyncio
async def test_verify_against_malformed_hash_is_false(manager):
    assert not await manager.verify_password("pw123456", "not-a-hash")


def test_token_carries_user_role_and_24h_expiry(manager):
    before = datetime.now(timezone.utc)
    token, expires_at = manager.create_access_token("4b1c1f8e-5a6d-4c1e-9d1b-2f8e0a3c7d11", UserRole.CREATOR)

    claims = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert claims["user_id"] == claims["sub"] == "4b1c1f8e-5a6d-4c1e-9d1b-2f8e0a3c7d11"
    assert claims["role"] == "creator"
    assert claims["type"] == "user"
    assert abs((expires_at - before) - timedelta(hours=24)) < timedelta(seconds=5)
    assert manager.decode_access_token(token)["jti"] == claims["jti"]


def test_two_tokens_for_same_user_differ(manager):
    first, _ = manager.create_access_token("u1", UserRole.STANDARD)
    second, _ = manager.create_access_token("u1", UserRole.STANDARD)
    assert first != second


def test_token_signed_with_other_secret_is_rejected(manager):
    token, _ = UserAuthManager(secret_key="other").create_access_token("u1", UserRole.STANDARD)
    with pytest.raises(InvalidCredentialsException):
        manager.decode_access_token(token)


def test_expired_token_is_rejected():
    manager = UserAuthManager(secret_key=SECRET, token_ttl=timedelta(seconds=-10))
    token, _ = manager.create_access_token("u1", UserRole.STANDARD)
    with pytest.raises(InvalidCredentialsException) as exc_info:
        manager.decode_access_token(token)
    assert exc_info.value.detail == "Invalid or expired token"


def test_token_without_session_claims_is_rejected(manager):
    token = jwt.encode({"sub": "u1", "exp": 4102444800, "type": "refresh"}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialsException):
        manager.decode_access_token(token)
