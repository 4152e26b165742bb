"""Database session management for async PostgreSQL.

Provides the global async engine and session maker used by the SQL stores.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from crdforge.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# Global engine and session maker
_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Get or create the async database engine.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The async SQLAlchemy engine.
    """
    global _engine

    try:
        if _engine is None:
            settings = settings or get_settings()

            logger.info("Creating async database engine")

            _engine = create_async_engine(
                settings.database_url,
                echo=settings.log_level == "DEBUG",
                pool_pre_ping=True,
                pool_size=10,
                max_overflow=20,
            )

            logger.info("Database engine created successfully")

        return _engine

    except Exception as e:
        logger.error(f"Failed to create database engine: {e}", exc_info=True)
        raise


def get_session_maker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Get or create the async session maker."""
    global _async_session_maker

    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(settings),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Session maker created successfully")

    return _async_session_maker


async def create_all_tables(settings: Settings | None = None) -> None:
    """Create all database tables.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        # Import models to ensure they're registered with SQLModel metadata
        from crdforge.db import models  # noqa: F401

        engine = get_engine(settings)

        logger.info("Creating database tables...")

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        logger.info("Database tables created successfully")

    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)
        raise


async def drop_all_tables(settings: Settings | None = None) -> None:
    """Drop all database tables.

    WARNING: This will delete all stored templates and manifests.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        from crdforge.db import models  # noqa: F401

        engine = get_engine(settings)

        logger.warning("Dropping all database tables...")

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

        logger.warning("All database tables dropped")

    except Exception as e:
        logger.error(f"Failed to drop database tables: {e}", exc_info=True)
        raise


async def init_db(settings: Settings | None = None) -> None:
    """Initialize the database.

    Built-in templates live in code, so only the tables are created.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        await create_all_tables(settings)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise


async def close_db() -> None:
    """Close the database engine and all connections."""
    global _engine, _async_session_maker

    try:
        if _engine is not None:
            logger.info("Closing database engine...")
            await _engine.dispose()
            _engine = None
            _async_session_maker = None
            logger.info("Database engine closed")

    except Exception as e:
        logger.error(f"Error closing database engine: {e}", exc_info=True)
        raise
