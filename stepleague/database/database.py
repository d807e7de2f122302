from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from stepleague.config import Config
from stepleague.database.models import Base
from stepleague.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url
        self.engine = None
        self.async_session = None

    @property
    def session_factory(self):
        """Async session factory handed to services"""
        return self.async_session

    async def initialize(self, create_tables: bool = True):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        database_url = Config.get_async_database_url(self.database_url)

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        if create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic writes.

        All operations within the context are committed together on success,
        or rolled back together on failure. The leaderboard engine itself
        never writes; this is used by seeding and administration code.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
