# marketplace/application/ports/outbound.py

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from marketplace.domain.models.user_domain_model import User, UserRole


class IUserRepository(ABC):
    """Credential store interface."""

    @abstractmethod
    async def get(self, db: Any, id: UUID) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, db: Any, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    async def create(self, db: Any, user: User) -> User:
        """Insert a user, raising a conflict on duplicate email or username."""
        pass


class ISessionCache(ABC):
    """Ephemeral store for sessions, revocations, rate counters and user snapshots."""

    @abstractmethod
    async def store_session(self, user_id: str, token: str, ttl: timedelta) -> None:
        pass

    @abstractmethod
    async def get_session_user_id(self, token: str) -> Optional[str]:
        pass

    @abstractmethod
    async def blacklist_token(self, token: str, ttl: timedelta) -> None:
        pass

    @abstractmethod
    async def is_blacklisted(self, token: str) -> bool:
        pass

    @abstractmethod
    async def increment_request_count(self, client_key: str) -> int:
        pass

    @abstractmethod
    async def cache_user(self, user: Any) -> None:
        pass

    @abstractmethod
    async def get_cached_user(self, user_id: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        pass


class ITokenService(ABC):
    """Password hashing and session token signing."""

    @abstractmethod
    async def hash_password(self, password: str) -> str:
        pass

    @abstractmethod
    async def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        pass

    @abstractmethod
    async def dummy_verify(self) -> None:
        """Spend the time of one password verification."""
        pass

    @abstractmethod
    def create_access_token(self, user_id: str, role: UserRole) -> Tuple[str, datetime]:
        pass

    @abstractmethod
    def decode_access_token(self, token: str) -> Dict[str, Any]:
        pass


class IKeyVerifier(ABC):
    """External API key verification authority."""

    @abstractmethod
    async def verify(self, api_id: str, key: str) -> bool:
        """
        Return True for a valid key, False for an invalid one.

        Raises KeyVerificationException when verification cannot be completed.
        """
        pass
