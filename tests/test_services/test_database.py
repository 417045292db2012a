"""Tests for engine creation and table setup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect, text

from pathstore.database import create_engine, ensure_tables
from pathstore.models.virtual_file import files_table

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from pathstore.config import Settings


async def _table_names(engine: AsyncEngine) -> list[str]:
    async with engine.connect() as conn:
        return await conn.run_sync(lambda c: inspect(c).get_table_names())


class TestDatabase:
    async def test_engine_connects(self, db_engine: AsyncEngine) -> None:
        async with db_engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            assert result.scalar() == 1

    async def test_session_works(self, db_session: AsyncSession) -> None:
        result = await db_session.execute(text("SELECT 42"))
        assert result.scalar() == 42

    async def test_session_factory_keeps_objects_after_commit(
        self, test_settings: Settings
    ) -> None:
        engine, session_factory = create_engine(test_settings)
        try:
            assert engine.echo is True
            assert session_factory.kw["expire_on_commit"] is False
            async with session_factory() as session:
                result = await session.execute(text("SELECT 7"))
                assert result.scalar() == 7
        finally:
            await engine.dispose()

    async def test_ensure_tables_is_idempotent(self, test_settings: Settings) -> None:
        engine, _ = create_engine(test_settings)
        try:
            await ensure_tables(engine)
            await ensure_tables(engine)
            assert "virtual_files" in await _table_names(engine)
        finally:
            await engine.dispose()

    async def test_ensure_tables_creates_renamed_tables(self, test_settings: Settings) -> None:
        files_table("layout_files")
        engine, _ = create_engine(test_settings)
        try:
            await ensure_tables(engine)
            assert "layout_files" in await _table_names(engine)
        finally:
            await engine.dispose()
