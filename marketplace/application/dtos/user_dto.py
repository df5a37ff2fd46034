# marketplace/application/dtos/user_dto.py

"""
Schemas for user data.

This module defines the Pydantic DTOs used to validate and serialise
registration, login and user data. The password hash has no field here,
so it can never be serialised outward.
"""

from uuid import UUID
from datetime import datetime
from typing import List, Optional
from pydantic import field_validator, Field

from marketplace.application.dtos.base_dto import CustomBaseModel
from marketplace.domain.models.user_domain_model import (
    UserRole,
    UserStatus,
    CreditTransactionType,
)
from marketplace.shared.utils.input_validation import InputValidator


class EmailMixin(CustomBaseModel):
    email: str = Field(..., description="User email. Must be valid and unique.")

    @field_validator('email')
    def validate_email_format(cls, v):
        """
        Validate and normalise the email.

        Raises:
            ValueError: If the email is invalid
        """
        v = InputValidator.normalize_email(v)
        is_valid, error_msg = InputValidator.validate_email(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v


class UserCreate(EmailMixin):
    """
    Schema for registering a new user.
    """
    username: str = Field(..., description="Public handle, 3 to 50 characters, unique.")
    password: str = Field(..., description="Password, at least 8 characters.")

    @field_validator('username')
    def validate_username(cls, v):
        is_valid, error_msg = InputValidator.validate_username(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v

    @field_validator('password')
    def validate_password(cls, v):
        is_valid, error_msg = InputValidator.validate_password(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v


class UserLogin(EmailMixin):
    """
    Schema for login credentials.

    The password is only required to be present; a wrong one is an
    authentication failure, not a validation error.
    """
    password: str = Field(..., min_length=1, description="Account password.")


########################################################################
# Output schemas
########################################################################

class ProfileOutput(CustomBaseModel):
    display_name: str = ""
    avatar: str = ""
    bio: str = ""
    interests: List[str] = []
    social_links: List[str] = []
    skills: List[str] = []
    links: List[str] = []


class CreditTransactionOutput(CustomBaseModel):
    id: UUID
    type: CreditTransactionType
    amount: float
    status: str
    description: str = ""
    related_item_id: Optional[UUID] = None
    timestamp: Optional[datetime] = None


class CreditsOutput(CustomBaseModel):
    balance: float = 0.0
    transactions: List[CreditTransactionOutput] = []


class NotificationOutput(CustomBaseModel):
    id: UUID
    user_id: UUID
    type: str
    message: str
    related_id: Optional[UUID] = None
    is_read: bool = False
    created_at: Optional[datetime] = None


class UserOutput(CustomBaseModel):
    """
    Public view of a user, also used as the cached user snapshot.
    """
    id: UUID = Field(..., description="Unique user identifier.")
    username: str
    email: str
    role: UserRole
    status: UserStatus
    profile: ProfileOutput
    credits: CreditsOutput
    notifications: List[NotificationOutput] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


class LoginOutput(CustomBaseModel):
    """
    Result of a successful login.
    """
    token: str = Field(..., description="Signed session token (JWT).")
    token_type: str = Field("bearer", description="Authorization scheme for the token.")
    expires_at: datetime = Field(..., description="Expiration instant of the token.")
    user: UserOutput
