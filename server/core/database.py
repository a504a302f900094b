"""Async database engine with SQLModel and SQLAlchemy 2.0."""

from contextlib import asynccontextmanager
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from core.config import Settings
from models.database import StoredDocument  # noqa: F401  registers the documents table
from core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the async engine and session factory for the document store."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine = None
        self.async_session = None

    def _engine_options(self) -> dict:
        options = {"echo": self.settings.database_echo, "future": True}
        if not self.settings.is_sqlite:
            options["pool_size"] = self.settings.database_pool_size
            options["max_overflow"] = self.settings.database_max_overflow
        return options

    async def startup(self):
        """Initialize database connection and create tables."""
        try:
            self.engine = create_async_engine(
                self.settings.database_url,
                **self._engine_options()
            )

            self.async_session = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False
            )

            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

            logger.info("Database initialized successfully", url=self.settings.database_url)

        except Exception as e:
            logger.error("Database startup failed", error=str(e))
            raise

    async def shutdown(self):
        """Close database connections."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.async_session = None
            logger.info("Database connections closed")

    @property
    def is_ready(self) -> bool:
        return self.async_session is not None

    @asynccontextmanager
    async def get_session(self):
        """Get async database session."""
        if not self.async_session:
            raise RuntimeError("Database not initialized")

        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
