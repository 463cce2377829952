"""
Database Configuration.

SQLAlchemy async engine and session management.
Uses lazy initialization to prevent import-time failures when .env is not configured.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: Any = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> Any:
    """Create async SQLAlchemy engine."""
    from modules.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=db_config.echo)
    else:
        engine = create_async_engine(
            url,
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            echo=db_config.echo,
        )
    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def get_engine() -> Any:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    One session per request; committed when the handler returns,
    rolled back when it raises.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all_tables() -> None:
    """Create every table registered on the model metadata."""
    from modules.backend.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Dispose the engine and reset lazy state."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
