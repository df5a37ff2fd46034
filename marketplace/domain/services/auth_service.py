# marketplace/domain/services/auth_service.py

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import uuid

from marketplace.domain.models.user_domain_model import UserRole

USER_TOKEN_TYPE = "user"
REQUIRED_CLAIMS = ("sub", "user_id", "role", "exp", "type", "jti")


class TokenClaimsService:
    """
    Domain service for session token claims.
    """

    @staticmethod
    def create_token_payload(
            user_id: str,
            role: UserRole,
            expires_delta: timedelta,
            now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Create the claims of a user session token.

        Args:
            user_id: Identifier of the authenticated user
            role: Role of the user at issuance time
            expires_delta: Token lifetime
            now: Issuance instant, defaults to the current UTC time

        Returns:
            Dict with all token claims
        """
        issued_at = now or datetime.now(timezone.utc)
        expire = issued_at + expires_delta

        return {
            "sub": str(user_id),
            "user_id": str(user_id),
            "role": UserRole(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
            "type": USER_TOKEN_TYPE,
            "jti": str(uuid.uuid4()),
        }

    @staticmethod
    def is_token_valid(token_payload: Dict[str, Any]) -> bool:
        """
        Validate the claims of a decoded token.

        Signature and expiry are checked by the JWT library; this only
        verifies that the claims describe a user session token.
        """
        if not all(k in token_payload for k in REQUIRED_CLAIMS):
            return False

        if token_payload.get("type") != USER_TOKEN_TYPE:
            return False

        return token_payload["sub"] == token_payload["user_id"]
