"""
Base service class for StepLeague services.

Provides async database session management and storage-error translation
for all service layer operations.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stepleague.utils.leaderboard_exceptions import DataSourceError

logger = logging.getLogger(__name__)

T = TypeVar('T')

class BaseService:
    """Base class for all services with async database session management."""

    def __init__(self, session_factory):
        """
        Initialize base service with session factory.

        Args:
            session_factory: Async session factory from Database class
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for async database operations."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def run_read(self, operation: str, func: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """
        Run a read in its own session, translating storage failures.

        No retries happen here; retry policy belongs to the storage layer.

        Raises:
            DataSourceError: If the underlying query fails
        """
        try:
            async with self.get_session() as session:
                return await func(session)
        except SQLAlchemyError as e:
            logger.error(f"Storage read failed during {operation}: {e}", exc_info=True)
            raise DataSourceError(operation, str(e)) from e
