"""Database client and session dependency.

The engine is owned by a ``DatabaseClient`` that the application builds in
its lifespan and stores on ``app.state.db``. Nothing connects at import time.
"""

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from govassist.core.config import DatabaseSettings
from govassist.core.exceptions import ConfigurationError
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseClient:
    """PostgreSQL database client with connection and migration management."""

    def __init__(self, engine: AsyncEngine):
        """Initialize database client.

        Args:
            engine: SQLAlchemy async engine
        """
        self.engine = engine
        self.session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        self._connected = False

    @classmethod
    def from_settings(cls, db_settings: DatabaseSettings) -> "DatabaseClient":
        """Build a client and its engine from database settings."""
        engine = create_async_engine(
            db_settings.connection_url,
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
            echo=db_settings.echo,
            connect_args={"statement_cache_size": 0},
        )
        return cls(engine)

    async def connect(self) -> bool:
        """Test database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            self._connected = True
            LOGGER.info("Database connection successful")
            return True
        except Exception:
            self._connected = False
            LOGGER.error("Database connection failed", exc_info=True)
            raise

    async def disconnect(self) -> None:
        """Dispose of the engine and its pool."""
        try:
            await self.engine.dispose()
            self._connected = False
            LOGGER.info("Database connection closed")
        except Exception as e:
            LOGGER.error("Error closing database connection", exc_info=True, extra={"error": str(e)})

    async def create_tables(self) -> None:
        """Create tables that do not exist yet."""
        # Register the mapped classes on Base.metadata
        from govassist.database import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            LOGGER.info("Database tables created/verified successfully")
        except Exception as e:
            LOGGER.error("Failed to create database tables", exc_info=True, extra={"error": str(e)})
            raise

    async def auto_migrate(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        LOGGER.info("Starting auto-migration")
        await self.create_tables()
        LOGGER.info("Auto-migration completed successfully")

    async def health_check(self) -> dict:
        """Check database health."""
        try:
            async with self.engine.connect() as conn:
                val = await conn.scalar(text("SELECT 1"))
            self._connected = True
            return {
                "status": "healthy",
                "connected": True,
                "database": "postgresql",
                "latency_test": "passed" if val == 1 else "failed",
            }
        except Exception as e:
            self._connected = False
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {
                "status": "unhealthy",
                "connected": False,
                "error": str(e),
            }


def get_database_client(request: Request) -> DatabaseClient:
    """FastAPI dependency returning the client created by the lifespan."""
    client: Optional[DatabaseClient] = getattr(request.app.state, "db", None)
    if client is None:
        raise ConfigurationError("Database client is not initialized")
    return client


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting an async database session.

    Yields:
        AsyncSession: Database session bound to the application's engine
    """
    client = get_database_client(request)
    async with client.session_maker() as session:
        try:
            yield session
        finally:
            await session.close()
