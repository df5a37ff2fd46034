# marketplace/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from marketplace.application.dtos.user_dto import UserCreate, UserLogin, UserOutput, LoginOutput


class IAuthUseCase(ABC):
    """Interface for authentication use cases."""

    @abstractmethod
    async def register_user(self, user_input: UserCreate) -> UserOutput:
        """Register a new user."""
        pass

    @abstractmethod
    async def login_user(self, credentials: UserLogin) -> LoginOutput:
        """Authenticate a user and open a session."""
        pass

    @abstractmethod
    async def logout_user(self, authorization: Optional[str]) -> None:
        """Revoke a session token."""
        pass

    @abstractmethod
    async def authenticate_token(self, authorization: Optional[str]) -> UserOutput:
        """Resolve a session token to its active user."""
        pass

    @abstractmethod
    async def get_user(self, user_id: UUID) -> Optional[UserOutput]:
        """Get a user through the session cache."""
        pass
