# marketplace/adapters/outbound/persistence/models/user_model.py

"""
User model.

Profile, credit transactions and notifications are embedded documents
owned by the user row, so they are stored as JSON columns.
"""

import uuid
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    JSON,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from marketplace.adapters.outbound.persistence.models.base_model import Base


class User(Base):
    """
    Marketplace user.

    Attributes:
        id: Unique identifier (UUID)
        username: Public handle, unique
        email: Login email, unique and lower-cased
        password_hash: bcrypt hash of the password
        role: Permission level (user, creator, admin, moderator)
        status: Moderation status (active, suspended, banned)
        profile: Embedded profile document
        credit_balance: Current credit balance
        credit_transactions: Embedded credit transaction history
        notifications: Embedded notification list
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="user")
    status = Column(String(20), nullable=False, default="active")
    profile = Column(JSON, nullable=False, default=dict)
    credit_balance = Column(Float, nullable=False, default=0.0)
    credit_transactions = Column(JSON, nullable=False, default=list)
    notifications = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User(username={self.username}, status={self.status})>"
