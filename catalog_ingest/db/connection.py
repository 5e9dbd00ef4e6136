"""
Database Connection Pool Management
====================================

Async connection pool management using SQLAlchemy AsyncIO with asyncpg.

``DatabaseManager`` is constructed explicitly and passed to whatever needs
the store; there is no module-level engine. Use it as an async context
manager to scope the pool's lifetime:

    async with DatabaseManager(settings) as db:
        async with db.session() as session:
            ...
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from catalog_ingest.config import Settings, get_logger, get_settings
from catalog_ingest.db.base import Base
from catalog_ingest.errors.exceptions import DatabaseError

logger = get_logger(__name__)


class DatabaseManager:
    """
    Owns the async engine and session factory for one application lifetime.

    Features:
        - AsyncIO connection pool with asyncpg
        - Scoped sessions: commit on success, rollback on error, connection
          always returned to the pool
        - Health check
        - Schema creation for local boot
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def __aenter__(self) -> "DatabaseManager":
        return await self.initialize()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def initialize(self) -> "DatabaseManager":
        """
        Create the connection pool.

        Raises:
            DatabaseError: If engine creation fails
        """
        if self._engine is not None:
            logger.debug("database_already_initialized")
            return self

        settings = self._settings
        try:
            logger.info(
                "database_pool_initializing",
                pool_min=settings.db_pool_min,
                pool_max=settings.db_pool_max,
            )
            self._engine = create_async_engine(
                settings.database_url,
                echo=False,
                pool_size=settings.db_pool_min,
                max_overflow=max(settings.db_pool_max - settings.db_pool_min, 0),
                pool_recycle=settings.db_pool_recycle_seconds,
                pool_pre_ping=True,  # Verify connection health before use
                poolclass=AsyncAdaptedQueuePool,
            )
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            return self

        except Exception as e:
            logger.error("database_initialization_failed", error=str(e))
            raise DatabaseError(
                message="Database initialization failed",
                details={"error": str(e)},
            ) from e

    async def close(self) -> None:
        """Dispose the connection pool. Safe to call when not initialized."""
        if self._engine is None:
            return

        logger.info("database_pool_closing")
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @property
    def engine(self) -> AsyncEngine:
        """
        Get the async engine.

        Raises:
            DatabaseError: If the manager is not initialized
        """
        if self._engine is None:
            raise DatabaseError(
                message="Database not initialized",
                details={"hint": "Call DatabaseManager.initialize() first"},
            )
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session wrapping exactly one transaction.

        Commits when the block exits normally, rolls back and re-raises on
        any exception. The underlying connection is released in both cases.

        Raises:
            DatabaseError: If the manager is not initialized
        """
        if self._session_factory is None:
            raise DatabaseError(
                message="Database not initialized",
                details={"hint": "Call DatabaseManager.initialize() first"},
            )

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create missing tables and indexes (local boot only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_schema_ensured")

    async def health_check(self) -> dict:
        """
        Check database connection health.

        Returns:
            {"status": "healthy", "latency_ms": 5.2} or an error status dict
        """
        if self._engine is None:
            return {"status": "not_initialized", "error": "Database not initialized"}

        start = time.perf_counter()
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy",
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
        }
