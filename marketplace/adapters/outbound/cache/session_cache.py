# marketplace/adapters/outbound/cache/session_cache.py (async version)

"""
Session cache backed by Redis.

Holds active sessions, revoked tokens, rate-limit counters and user
snapshots. Every entry is written with an expiry, so the store cleans
itself up.
"""

import logging
from datetime import timedelta
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from marketplace.application.dtos.user_dto import UserOutput
from marketplace.application.ports.outbound import ISessionCache
from marketplace.domain.exceptions import CacheOperationException

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"
BLACKLIST_PREFIX = "blacklist:"
RATELIMIT_PREFIX = "ratelimit:"
USER_PREFIX = "user:"


class RedisSessionCache(ISessionCache):
    """
    Redis implementation of the session cache.

    Attributes:
        client: redis-py asyncio client (connection pooled)
        user_ttl: Lifetime of cached user snapshots
        rate_limit_window: Length of the fixed rate-limit window
    """

    def __init__(
            self,
            client: Redis,
            user_ttl: timedelta = timedelta(hours=1),
            rate_limit_window: timedelta = timedelta(minutes=1),
    ):
        self.client = client
        self.user_ttl = user_ttl
        self.rate_limit_window = rate_limit_window

    @classmethod
    def from_settings(cls, settings) -> "RedisSessionCache":
        client = Redis.from_url(
            settings.REDIS_URL,
            password=settings.REDIS_PASSWORD or None,
            decode_responses=True,
        )
        return cls(
            client,
            user_ttl=timedelta(seconds=settings.USER_CACHE_TTL_SECONDS),
            rate_limit_window=timedelta(seconds=settings.RATE_LIMIT_WINDOW_SECONDS),
        )

    ########################################################################
    # Sessions
    ########################################################################

    async def store_session(self, user_id: str, token: str, ttl: timedelta) -> None:
        try:
            await self.client.set(SESSION_PREFIX + token, str(user_id), ex=ttl)
        except RedisError as e:
            logger.error(f"Error storing session for user {user_id}: {e}")
            raise CacheOperationException(detail="Failed to create session", original_error=e)

    async def get_session_user_id(self, token: str) -> Optional[str]:
        try:
            return await self.client.get(SESSION_PREFIX + token)
        except RedisError as e:
            logger.error(f"Error reading session: {e}")
            raise CacheOperationException(detail="Failed to read session", original_error=e)

    ########################################################################
    # Revocation
    ########################################################################

    async def blacklist_token(self, token: str, ttl: timedelta) -> None:
        try:
            await self.client.set(BLACKLIST_PREFIX + token, "true", ex=ttl)
        except RedisError as e:
            logger.error(f"Error blacklisting token: {e}")
            raise CacheOperationException(detail="Failed to logout", original_error=e)

    async def is_blacklisted(self, token: str) -> bool:
        try:
            return await self.client.exists(BLACKLIST_PREFIX + token) > 0
        except RedisError as e:
            logger.error(f"Error checking token blacklist: {e}")
            raise CacheOperationException(detail="Failed to check token revocation", original_error=e)

    ########################################################################
    # Rate limiting
    ########################################################################

    async def increment_request_count(self, client_key: str) -> int:
        """
        Count one request for ``client_key`` in the current window.

        The key is created together with its expiry (SET NX EX) and then
        incremented, inside one MULTI/EXEC transaction. INCR keeps the TTL,
        so the window is fixed from the first request and never extended.

        Returns:
            Number of requests seen in the window, this one included
        """
        key = RATELIMIT_PREFIX + client_key
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=self.rate_limit_window, nx=True)
                pipe.incr(key)
                _, count = await pipe.execute()
            return int(count)
        except RedisError as e:
            logger.error(f"Error incrementing request count for {client_key}: {e}")
            raise CacheOperationException(detail="Failed to update rate limit", original_error=e)

    ########################################################################
    # User snapshots
    ########################################################################

    async def cache_user(self, user: UserOutput) -> None:
        try:
            await self.client.set(USER_PREFIX + str(user.id), user.model_dump_json(), ex=self.user_ttl)
        except RedisError as e:
            raise CacheOperationException(detail="Failed to cache user", original_error=e)

    async def get_cached_user(self, user_id: str) -> Optional[UserOutput]:
        try:
            data = await self.client.get(USER_PREFIX + str(user_id))
        except RedisError as e:
            raise CacheOperationException(detail="Failed to read cached user", original_error=e)

        if data is None:
            return None
        try:
            return UserOutput.model_validate_json(data)
        except ValidationError as e:
            # Stale snapshot from an older schema: treat as a miss
            logger.warning(f"Discarding unreadable cached user {user_id}: {e}")
            return None

    ########################################################################
    # Lifecycle
    ########################################################################

    async def ping(self) -> bool:
        try:
            return await self.client.ping()
        except RedisError as e:
            raise CacheOperationException(detail="Session cache unreachable", original_error=e)

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Session cache connections closed")
