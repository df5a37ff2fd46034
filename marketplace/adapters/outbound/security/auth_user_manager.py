# marketplace/adapters/outbound/security/auth_user_manager.py (async version)

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from jose import jwt, JWTError
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from marketplace.application.ports.outbound import ITokenService
from marketplace.domain.models.user_domain_model import UserRole
from marketplace.domain.services.auth_service import TokenClaimsService
from marketplace.domain.exceptions import (
    InvalidCredentialsException,
    PasswordHashingException,
    TokenSigningException,
)

logger = logging.getLogger(__name__)


class UserAuthManager(ITokenService):
    """
    Password hashing and JWT session tokens for users.

    bcrypt work runs in the threadpool so it never blocks the event loop.
    """

    crypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def __init__(self, secret_key: str, algorithm: str = "HS256", token_ttl: timedelta = timedelta(hours=24)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    @classmethod
    def from_settings(cls, settings) -> "UserAuthManager":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            token_ttl=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
        )

    async def hash_password(self, password: str) -> str:
        """Return the salted hash of a plain text password."""
        try:
            return await run_in_threadpool(self.crypt_context.hash, password)
        except (ValueError, TypeError) as e:
            logger.error(f"Password hashing failed: {e}")
            raise PasswordHashingException(original_error=e)

    async def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify if the plain text password matches the stored hash."""
        try:
            return await run_in_threadpool(self.crypt_context.verify, plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            # Unknown or malformed hash
            logger.warning(f"Password verification failed: {e}")
            return False

    async def dummy_verify(self) -> None:
        await run_in_threadpool(self.crypt_context.dummy_verify)

    def create_access_token(self, user_id: str, role: UserRole) -> Tuple[str, datetime]:
        """
        Create a signed session token.

        Returns:
            Tuple (token, expires_at)
        """
        now = datetime.now(timezone.utc)
        payload = TokenClaimsService.create_token_payload(user_id, role, self.token_ttl, now=now)
        try:
            token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except (JWTError, ValueError, TypeError) as e:
            logger.error(f"Token signing failed: {e}")
            raise TokenSigningException(original_error=e)
        return token, datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a session token.

        Raises:
            InvalidCredentialsException: If the signature, expiry or claims are invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidCredentialsException(detail="Invalid or expired token")

        if not TokenClaimsService.is_token_valid(payload):
            raise InvalidCredentialsException(detail="Invalid token: incorrect claims")

        return payload
