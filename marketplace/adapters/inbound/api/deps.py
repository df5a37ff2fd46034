# marketplace/adapters/inbound/api/deps.py (async version)

"""
Dependencies for injection into API endpoints.

Handles come from the ServiceContainer stored on ``app.state``; a new
database session and AsyncAuthService are built per request.
"""

import logging
from datetime import timedelta
from typing import AsyncGenerator, Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.adapters.container import ServiceContainer
from marketplace.application.dtos.user_dto import UserOutput
from marketplace.application.use_cases.auth_use_cases import AsyncAuthService

# Configure logger
logger = logging.getLogger(__name__)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


async def get_session(container: ServiceContainer = Depends(get_container)) -> AsyncGenerator[AsyncSession, None]:
    """
    Yields a credential store session for the duration of the request.
    """
    async with container.database.session() as session:
        yield session


def get_auth_service(
        db: AsyncSession = Depends(get_session),
        container: ServiceContainer = Depends(get_container),
) -> AsyncAuthService:
    return AsyncAuthService(
        db,
        session_cache=container.session_cache,
        token_service=container.token_service,
        session_ttl=timedelta(hours=container.settings.ACCESS_TOKEN_EXPIRE_HOURS),
    )


async def get_current_user(
        authorization: Optional[str] = Header(None, description="Bearer session token"),
        service: AsyncAuthService = Depends(get_auth_service),
) -> UserOutput:
    """
    Get the current user from the session token.

    Raises:
        InvalidCredentialsException: If the token is missing, revoked, invalid or expired
        AccountNotActiveException: If the user is no longer active
    """
    return await service.authenticate_token(authorization)
