# marketplace/adapters/outbound/persistence/repositories/user_repository.py (async version)

"""
Repository for user records.

This module implements the credential store on top of SQLAlchemy,
implementing the IUserRepository interface.
"""

import logging
from dataclasses import asdict
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from fastapi.encoders import jsonable_encoder

from marketplace.adapters.outbound.persistence.models import User
from marketplace.application.ports.outbound import IUserRepository
from marketplace.domain.models.user_domain_model import (
    User as DomainUser,
    UserRole,
    UserStatus,
    Profile,
    Credits,
    CreditTransaction,
    Notification,
)
from marketplace.domain.exceptions import (
    DuplicateEmailException,
    DuplicateUsernameException,
    DatabaseOperationException,
)


class AsyncUserRepository(IUserRepository):
    """
    Async repository for the User entity.

    Uniqueness of email and username is enforced by the storage layer;
    constraint violations are translated into domain conflicts.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{User.__name__}")

    @staticmethod
    def to_domain(db_obj: User) -> DomainUser:
        """Map an ORM row to the domain model."""
        return DomainUser(
            id=db_obj.id,
            username=db_obj.username,
            email=db_obj.email,
            password_hash=db_obj.password_hash,
            role=UserRole(db_obj.role),
            status=UserStatus(db_obj.status),
            profile=Profile.from_dict(db_obj.profile),
            credits=Credits(
                balance=db_obj.credit_balance or 0.0,
                transactions=[CreditTransaction.from_dict(t) for t in db_obj.credit_transactions or []],
            ),
            notifications=[Notification.from_dict(n) for n in db_obj.notifications or []],
            created_at=db_obj.created_at,
            updated_at=db_obj.updated_at,
        )

    @staticmethod
    def to_model(user: DomainUser) -> User:
        """Map a domain user to a new ORM row."""
        return User(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role.value,
            status=user.status.value,
            profile=jsonable_encoder(asdict(user.profile)),
            credit_balance=user.credits.balance,
            credit_transactions=jsonable_encoder([asdict(t) for t in user.credits.transactions]),
            notifications=jsonable_encoder([asdict(n) for n in user.notifications]),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def _get_one(self, db: AsyncSession, *criteria) -> Optional[User]:
        result = await db.execute(select(User).where(*criteria).execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, id: UUID) -> Optional[DomainUser]:
        """
        Find a user by identifier.

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            db_obj = await self._get_one(db, User.id == id)
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching user with ID {id}: {e}")
            raise DatabaseOperationException(detail="Error fetching user", original_error=e)
        return self.to_domain(db_obj) if db_obj else None

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[DomainUser]:
        """
        Find a user by email.

        Args:
            db: Async database session
            email: User's email

        Returns:
            User found or None if it doesn't exist

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            db_obj = await self._get_one(db, User.email == email.strip().lower())
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching user by email '{email}': {e}")
            raise DatabaseOperationException(detail="Error fetching user by email", original_error=e)
        return self.to_domain(db_obj) if db_obj else None

    async def exists(self, db: AsyncSession, *, email: Optional[str] = None,
                     username: Optional[str] = None) -> bool:
        criteria = []
        if email is not None:
            criteria.append(User.email == email.strip().lower())
        if username is not None:
            criteria.append(User.username == username)
        try:
            result = await db.execute(select(User.id).where(*criteria).limit(1))
            return result.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking user existence: {e}")
            raise DatabaseOperationException(detail="Error checking user existence", original_error=e)

    async def create(self, db: AsyncSession, user: DomainUser) -> DomainUser:
        """
        Insert a new user.

        The insert is attempted directly; when a unique constraint fires, the
        conflicting field is identified (email first, then username).

        Raises:
            DuplicateEmailException: If the email is already registered
            DuplicateUsernameException: If the username is already taken
            DatabaseOperationException: In case of database error
        """
        db_obj = self.to_model(user)
        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
        except IntegrityError as e:
            await db.rollback()
            await self._raise_conflict(db, user, e)
        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error creating user: {e}")
            raise DatabaseOperationException(detail="Failed to create user", original_error=e)

        self.logger.info(f"User created: {db_obj.username} ({db_obj.id})")
        return self.to_domain(db_obj)

    async def _raise_conflict(self, db: AsyncSession, user: DomainUser, error: IntegrityError) -> None:
        if await self.exists(db, email=user.email):
            self.logger.warning(f"Attempt to register existing email: {user.email}")
            raise DuplicateEmailException()
        if await self.exists(db, username=user.username):
            self.logger.warning(f"Attempt to register existing username: {user.username}")
            raise DuplicateUsernameException()
        self.logger.error(f"Integrity error creating user: {error}")
        raise DatabaseOperationException(detail="Failed to create user", original_error=error)


# Create instance
user_repository = AsyncUserRepository()
