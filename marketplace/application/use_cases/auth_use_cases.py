# marketplace/application/use_cases/auth_use_cases.py (async version)

"""
Service for user authentication.

This module implements registration, login, logout and session token
validation on top of the credential store and the session cache.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.dtos.user_dto import UserCreate, UserLogin, UserOutput, LoginOutput
from marketplace.application.ports.inbound import IAuthUseCase
from marketplace.application.ports.outbound import IUserRepository, ISessionCache, ITokenService
from marketplace.adapters.outbound.persistence.repositories.user_repository import user_repository
from marketplace.domain.models.user_domain_model import (
    User,
    UserRole,
    UserStatus,
    Profile,
    Credits,
)
from marketplace.domain.exceptions import (
    InvalidCredentialsException,
    AccountNotActiveException,
    CacheOperationException,
)

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of an Authorization value, with or without the Bearer scheme."""
    if not authorization:
        return None
    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        token = rest.strip()
    return token or None


class AsyncAuthService(IAuthUseCase):
    """
    Service for user authentication.

    Credential checks never reveal whether an email is registered: an
    unknown email and a wrong password raise the same exception.
    """

    def __init__(
            self,
            db_session: AsyncSession,
            session_cache: ISessionCache,
            token_service: ITokenService,
            users: IUserRepository = user_repository,
            session_ttl: timedelta = timedelta(hours=24),
    ):
        """
        Initialize the service with its collaborators.

        Args:
            db_session: Active SQLAlchemy session on the credential store
            session_cache: Session cache handle
            token_service: Password hashing and token signing
            users: User repository
            session_ttl: Lifetime of sessions and of blacklist entries
        """
        self.db = db_session
        self.cache = session_cache
        self.tokens = token_service
        self.users = users
        self.session_ttl = session_ttl

    async def register_user(self, user_input: UserCreate) -> UserOutput:
        """
        Register a new user in the system.

        Args:
            user_input: Validated registration data

        Returns:
            Registered user

        Raises:
            DuplicateEmailException: If the email is already registered
            DuplicateUsernameException: If the username is already taken
            PasswordHashingException: If the password could not be hashed
            DatabaseOperationException: If the user could not be stored
        """
        password_hash = await self.tokens.hash_password(user_input.password)

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4(),
            username=user_input.username,
            email=user_input.email,
            password_hash=password_hash,
            role=UserRole.STANDARD,
            status=UserStatus.ACTIVE,
            profile=Profile(display_name=user_input.username),
            credits=Credits(balance=0.0, transactions=[]),
            notifications=[],
            created_at=now,
            updated_at=now,
        )
        user = await self.users.create(self.db, user)
        output = UserOutput.model_validate(user)

        # Best effort: a cache outage never blocks account creation
        try:
            await self.cache.cache_user(output)
        except CacheOperationException as e:
            logger.error(f"Failed to cache user {output.id}: {e}")

        return output

    async def login_user(self, credentials: UserLogin) -> LoginOutput:
        """
        Authenticate a user and open a session.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password
            AccountNotActiveException: Correct credentials, inactive account
            TokenSigningException: If the token could not be signed
            CacheOperationException: If the session could not be stored
        """
        user = await self.users.get_by_email(self.db, credentials.email)
        if user is None:
            await self.tokens.dummy_verify()
            logger.warning("Login attempt with unknown email")
            raise InvalidCredentialsException()

        if not await self.tokens.verify_password(credentials.password, user.password_hash):
            logger.warning(f"Login attempt with incorrect password for user {user.id}")
            raise InvalidCredentialsException()

        if not user.is_active:
            logger.warning(f"Login attempt on {user.status.value} account {user.id}")
            raise AccountNotActiveException()

        token, expires_at = self.tokens.create_access_token(str(user.id), user.role)
        await self.cache.store_session(str(user.id), token, self.session_ttl)

        logger.info(f"User {user.id} logged in")
        return LoginOutput(
            token=token,
            expires_at=expires_at,
            user=UserOutput.model_validate(user),
        )

    async def logout_user(self, authorization: Optional[str]) -> None:
        """
        Revoke a session token.

        A missing token is a successful no-op. The token is blacklisted for
        the maximum token lifetime; its signature is not checked.

        Raises:
            CacheOperationException: If the revocation could not be stored
        """
        token = extract_bearer_token(authorization)
        if token is None:
            return

        await self.cache.blacklist_token(token, self.session_ttl)
        logger.info("Session token revoked")

    async def authenticate_token(self, authorization: Optional[str]) -> UserOutput:
        """
        Resolve a session token to its user.

        The blacklist is consulted before the signature is trusted, and the
        token must belong to a session opened by login. Account status is
        read from the credential store, never from the user snapshot.

        Raises:
            InvalidCredentialsException: Missing, revoked, invalid or expired token,
                or a token whose user no longer exists
            AccountNotActiveException: If the user is no longer active
        """
        token = extract_bearer_token(authorization)
        if token is None:
            raise InvalidCredentialsException(detail="Not authenticated")

        if await self.cache.is_blacklisted(token):
            raise InvalidCredentialsException(detail="Token revoked")

        payload = self.tokens.decode_access_token(token)
        try:
            user_id = UUID(payload["sub"])
        except (ValueError, TypeError):
            raise InvalidCredentialsException(detail="Invalid token: 'sub' is not a valid UUID")

        if await self.cache.get_session_user_id(token) != str(user_id):
            logger.warning(f"Token for user {user_id} has no open session")
            raise InvalidCredentialsException(detail="Invalid or expired token")

        user = await self.users.get(self.db, user_id)
        if user is None:
            logger.warning(f"Token presented for missing user {user_id}")
            raise InvalidCredentialsException(detail="Invalid or expired token")

        if not user.is_active:
            raise AccountNotActiveException()

        output = UserOutput.model_validate(user)
        try:
            await self.cache.cache_user(output)
        except CacheOperationException as e:
            logger.warning(f"Failed to refresh cached user {user_id}: {e}")
        return output

    async def get_user(self, user_id: UUID) -> Optional[UserOutput]:
        """
        Get a user, reading through the session cache.

        Cache failures fall back to the credential store.
        """
        try:
            cached = await self.cache.get_cached_user(str(user_id))
        except CacheOperationException as e:
            logger.warning(f"User cache read failed, using credential store: {e}")
            cached = None
        if cached is not None:
            return cached

        user = await self.users.get(self.db, user_id)
        if user is None:
            return None

        output = UserOutput.model_validate(user)
        try:
            await self.cache.cache_user(output)
        except CacheOperationException as e:
            logger.warning(f"Failed to refresh cached user {user_id}: {e}")
        return output
