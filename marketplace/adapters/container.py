# marketplace/adapters/container.py (async version)

"""
Long-lived handles shared by every request.

The container is built once at startup, stored on ``app.state`` and
closed at shutdown. Tests build it from fakes instead.
"""

import logging
from typing import Optional

from marketplace.adapters.configuration.config import Settings
from marketplace.adapters.outbound.cache.session_cache import RedisSessionCache
from marketplace.adapters.outbound.persistence.database import Database
from marketplace.adapters.outbound.security.auth_user_manager import UserAuthManager
from marketplace.adapters.outbound.verification.unkey_client import UnkeyKeyVerifier
from marketplace.application.ports.outbound import ISessionCache, IKeyVerifier, ITokenService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Owner of the credential store, session cache, token service and
    key verifier handles.
    """

    def __init__(
            self,
            settings: Settings,
            database: Database,
            session_cache: ISessionCache,
            token_service: ITokenService,
            key_verifier: IKeyVerifier,
    ):
        self.settings = settings
        self.database = database
        self.session_cache = session_cache
        self.token_service = token_service
        self.key_verifier = key_verifier

    @classmethod
    def from_settings(cls, settings: Settings, database: Optional[Database] = None) -> "ServiceContainer":
        return cls(
            settings=settings,
            database=database or Database(settings.DATABASE_URL),
            session_cache=RedisSessionCache.from_settings(settings),
            token_service=UserAuthManager.from_settings(settings),
            key_verifier=UnkeyKeyVerifier.from_settings(settings),
        )

    async def startup(self) -> None:
        """Create the schema and check that the session cache answers."""
        await self.database.create_all()
        await self.session_cache.ping()
        logger.info("Service container started")

    async def shutdown(self) -> None:
        """Release every handle, even when one of them fails to close."""
        for name, handle in (
                ("key verifier", self.key_verifier),
                ("session cache", self.session_cache),
        ):
            close = getattr(handle, "close", None)
            if close is None:
                continue
            try:
                await close()
            except Exception as e:
                logger.exception(f"Error closing {name}: {e}")
        await self.database.dispose()
        logger.info("Service container stopped")
