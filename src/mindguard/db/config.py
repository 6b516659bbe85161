"""Database configuration and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import lru_cache

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from mindguard.config.settings import get_settings
from mindguard.config.validation import validate_or_raise


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the async engine from settings (cached)."""
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        poolclass=NullPool if settings.ENVIRONMENT == "test" else None,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the application engine."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db() -> None:
    """Validate configuration and verify database connectivity.

    Called during application startup so the pool is ready before the
    first entry is analyzed.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    validate_or_raise(get_settings())
    async with get_engine().begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Close database connections gracefully."""
    await get_engine().dispose()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for obtaining a database session.

    Usage:
        async with get_async_session() as session:
            engine = RiskMonitoringEngine(session, reader, lookup)
            await engine.evaluate_risk(...)

    Yields:
        AsyncSession: A database session that will be automatically closed
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()
