"""Pytest fixtures for Mindguard tests."""

import logging
from collections.abc import AsyncGenerator
from datetime import date, timedelta
from uuid import UUID

import pytest
import pytest_asyncio
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from uuid_utils.compat import uuid7

from mindguard.config.settings import MonitoringThresholds, Settings
from mindguard.db.models.base import Base
from mindguard.monitoring.types import Area, TimelineEntry


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create settings for testing."""
    return Settings(
        ENVIRONMENT="test",
        DEBUG=False,
        log_level="DEBUG",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        monitoring=MonitoringThresholds(),
    )


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakeTimelineReader:
    """In-memory timeline keyed by subject, honoring the reader contract."""

    def __init__(self) -> None:
        self.entries: dict[UUID, list[TimelineEntry]] = {}
        self.calls: list[tuple[UUID, date, int]] = []

    def add(self, subject_id: UUID, *entries: TimelineEntry) -> None:
        self.entries.setdefault(subject_id, []).extend(entries)

    def add_run(
        self,
        subject_id: UUID,
        start: date,
        days: int,
        area: Area | None,
    ) -> list[TimelineEntry]:
        """Add one entry per day from ``start`` for ``days`` days."""
        run = [
            TimelineEntry(entry_date=start + timedelta(days=offset), area=area, entry_id=uuid7())
            for offset in range(days)
        ]
        self.add(subject_id, *run)
        return run

    async def get_recent_classified_entries(
        self,
        subject_id: UUID,
        anchor_date: date,
        max_count: int,
    ) -> list[TimelineEntry]:
        self.calls.append((subject_id, anchor_date, max_count))
        eligible = [
            entry
            for entry in self.entries.get(subject_id, [])
            if entry.entry_date <= anchor_date
        ]
        eligible.sort(key=lambda entry: entry.entry_date, reverse=True)
        return eligible[:max_count]


class FakeEmotionSource:
    """Emotion reference data backed by a dict, counting loads."""

    def __init__(self, areas: dict[str, str] | None = None) -> None:
        self.areas = areas or {}
        self.loads = 0

    async def load_area(self, emotion_code: str) -> str | None:
        self.loads += 1
        return self.areas.get(emotion_code)


@pytest.fixture
def timeline() -> FakeTimelineReader:
    """Create an empty fake timeline."""
    return FakeTimelineReader()


@pytest.fixture
def emotion_source() -> FakeEmotionSource:
    """Create emotion reference data for four codes."""
    return FakeEmotionSource(
        {"E001": "RED", "E002": "yellow", "E003": "Blue", "E004": "green"}
    )


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine."""
    # Use in-memory SQLite shared across connections for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()
