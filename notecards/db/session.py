"""
Database Session Management

This module handles the database connection lifecycle and session management.

Key Concepts:
--------------
1. Engine: The core of SQLAlchemy's database communication (one per process)
2. Session: A workspace for database operations, one per request
3. Connection Pooling: Reusing database connections across requests

Architecture Flow:
------------------
Application Start → Database.from_settings() → Warm-up query (best effort)
↓
API Request → Get Session → Execute Queries → Commit/Rollback → Close Session
↓
Application Shutdown → Dispose Engine → Close All Connections

The ``Database`` object is the single shared handle. It is built once at
startup and injected into the application (``app.state.database``) rather
than living as an import-time global, so tests can hand in an in-memory one.
"""

from collections.abc import AsyncGenerator
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, StaticPool

from notecards.core.config import Settings, settings
from notecards.core.exceptions import NotecardsError
from notecards.core.logging import get_logger

logger = get_logger(__name__)


# ================================
# Database Engine Configuration
# ================================

def get_engine_config(
    database_url: str,
    app_env: str = "development",
    *,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 5,
    application_name: str = "notecards",
) -> dict[str, Any]:
    """
    Configure the database engine for the given URL and environment.

    Pool Types:
    -----------
    1. AsyncAdaptedQueuePool (PostgreSQL, development/production):
       - Keeps pool_size connections open, max_overflow extra on bursts
       - pool_pre_ping tests a connection before use, so a dead or not yet
         established connection is replaced instead of failing the request
    2. NullPool (staging):
       - New connection per checkout, closed right after
    3. StaticPool (in-memory SQLite):
       - One connection shared by every session, otherwise each
         connection would see its own empty database
    """
    config: dict[str, Any] = {"echo": echo}

    if database_url.startswith("sqlite"):
        config["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or "mode=memory" in database_url:
            config["poolclass"] = StaticPool
        else:
            config["poolclass"] = NullPool
        logger.info(
            "configuring_database_engine",
            backend="sqlite",
            pool_type=config["poolclass"].__name__,
        )
        return config

    config["connect_args"] = {
        "server_settings": {
            "application_name": application_name,
        }
    }

    if app_env == "staging":
        config["poolclass"] = NullPool
    else:
        config.update({
            "poolclass": AsyncAdaptedQueuePool,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": 7200 if app_env == "production" else 3600,
            "pool_timeout": 30,
        })

    logger.info(
        "configuring_database_engine",
        environment=app_env,
        pool_type=config["poolclass"].__name__,
        pool_size=config.get("pool_size"),
        max_overflow=config.get("max_overflow"),
    )
    return config


class Database:
    """
    Process-wide database handle: one engine, one session factory.

    Usage:
        database = Database.from_settings(settings)
        async for session in database.session():
            ...
        await database.dispose()
    """

    def __init__(self, url: str, **engine_config: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_config)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            # Loaded items stay readable after commit, no re-query needed
            expire_on_commit=False,
        )
        logger.info(
            "database_engine_created",
            driver=self.engine.url.drivername,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        engine_config = get_engine_config(
            config.DATABASE_URL,
            config.APP_ENV,
            echo=config.DB_ECHO,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            application_name=config.APP_NAME,
        )
        return cls(config.DATABASE_URL, **engine_config)

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a database session for a single request.

        If the request raises, pending changes are rolled back before the
        exception propagates. The connection goes back to the pool either way.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except NotecardsError:
                # Domain outcome (not found, forbidden...), already handled by the store
                raise
            except Exception as e:
                logger.error(
                    "database_session_error",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await session.rollback()
                raise

    async def warm_up(self) -> bool:
        """
        Open a first connection at startup.

        Failure is logged, not raised: the first request will then pay the
        connection setup and, if the database is really down, fail like any
        other store error.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(
                "database_warm_up_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        logger.info("database_connection_successful")
        return True

    async def create_all(self) -> None:
        """Create missing tables. Use Alembic migrations outside development."""
        from notecards.db.base import Base
        import notecards.models  # noqa: F401  (registers tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("database_tables_created")

    async def drop_all(self) -> None:
        from notecards.db.base import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def check_health(self) -> bool:
        """
        Check if the database is healthy and responsive.

        Returns:
            bool: True if database is healthy, False otherwise
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True

        except Exception as e:
            logger.error(
                "database_health_check_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        logger.info("closing_database_connections")

        try:
            await self.engine.dispose()
            logger.info("database_connections_closed")

        except Exception as e:
            logger.error(
                "database_closure_failed",
                error=str(e),
                error_type=type(e).__name__,
            )


def create_database(config: Optional[Settings] = None) -> Database:
    """Build the shared handle from settings (defaults to the global settings)."""
    return Database.from_settings(config or settings)
