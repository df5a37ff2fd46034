# marketplace/adapters/outbound/persistence/database.py (async version)

import logging
from typing import Any, AsyncGenerator
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from marketplace.adapters.outbound.persistence.models import Base

# Configure logger
logger = logging.getLogger(__name__)

# Pool settings for server databases; SQLite uses its own pool classes
POOL_OPTIONS = {
    "pool_size": 20,
    "max_overflow": 10,
    "pool_timeout": 30,
    "pool_recycle": 1800,
    "pool_pre_ping": True,
}


class Database:
    """
    Handle on the credential store: owns the async engine and session factory.

    Created once at startup and disposed at shutdown.
    """

    def __init__(self, url: str, **engine_options: Any):
        options = {} if url.startswith("sqlite") else dict(POOL_OPTIONS)
        options.update(engine_options)

        self.url = url
        self.engine = create_async_engine(url, echo=False, **options)
        self.session_factory = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )
        logger.info(f"Database configured: {self.engine.url.render_as_string(hide_password=True)}")

    async def create_all(self) -> None:
        """Create the tables (and their unique constraints) if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provides an async session, closed at the end of the block.

        Example:
            ```python
            async with database.session() as db:
                user = await user_repository.get_by_email(db, "a@b.com")
            ```
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")
