# marketplace/domain/models/user_domain_model.py

from enum import Enum
from uuid import UUID
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime


class UserRole(str, Enum):
    """Permission level of a marketplace user."""
    STANDARD = "user"
    CREATOR = "creator"
    ADMIN = "admin"
    MODERATOR = "moderator"


class UserStatus(str, Enum):
    """Moderation status of an account."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class CreditTransactionType(str, Enum):
    PURCHASE = "purchase"
    REFUND = "refund"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    GIFT = "gift"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class Profile:
    """Public profile attached to a user."""
    display_name: str = ""
    avatar: str = ""
    bio: str = ""
    interests: List[str] = field(default_factory=list)
    social_links: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Profile":
        return cls(**(data or {}))


@dataclass
class CreditTransaction:
    """A single movement of marketplace credits."""
    id: UUID
    type: CreditTransactionType
    amount: float
    status: str
    description: str = ""
    related_item_id: Optional[UUID] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreditTransaction":
        related = data.get("related_item_id")
        return cls(
            id=UUID(str(data["id"])),
            type=CreditTransactionType(data["type"]),
            amount=float(data["amount"]),
            status=data["status"],
            description=data.get("description", ""),
            related_item_id=UUID(str(related)) if related else None,
            timestamp=_parse_datetime(data.get("timestamp")),
        )


@dataclass
class Credits:
    """Credit balance and its transaction history."""
    balance: float = 0.0
    transactions: List[CreditTransaction] = field(default_factory=list)


@dataclass
class Notification:
    id: UUID
    user_id: UUID
    type: str
    message: str
    related_id: Optional[UUID] = None
    is_read: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notification":
        related = data.get("related_id")
        return cls(
            id=UUID(str(data["id"])),
            user_id=UUID(str(data["user_id"])),
            type=data["type"],
            message=data["message"],
            related_id=UUID(str(related)) if related else None,
            is_read=bool(data.get("is_read", False)),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class User:
    """Domain model for a marketplace user."""
    id: UUID
    username: str
    email: str
    password_hash: str
    role: UserRole = UserRole.STANDARD
    status: UserStatus = UserStatus.ACTIVE
    profile: Profile = field(default_factory=Profile)
    credits: Credits = field(default_factory=Credits)
    notifications: List[Notification] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
