"""Shared test fixtures for PathStore."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pathstore.config import Settings
from pathstore.database import ensure_tables
from pathstore.services.path_store import PathStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

TEST_SOURCE = "theme-a"
OTHER_SOURCE = "theme-b"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with a temporary SQLite database."""
    db_path = tmp_path / "test.db"
    return Settings(
        _env_file=None,
        debug=True,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        source=TEST_SOURCE,
    )


@pytest.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine with all tables created."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
    )
    await ensure_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> PathStore:
    """Store serving the primary test source."""
    return PathStore(session_factory, TEST_SOURCE)


@pytest.fixture
def other_store(session_factory: async_sessionmaker[AsyncSession]) -> PathStore:
    """Store serving a second source of the same table."""
    return PathStore(session_factory, OTHER_SOURCE)
