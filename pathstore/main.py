"""Process wiring: logging setup and store lifespan."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from pathstore.database import create_engine, ensure_tables
from pathstore.models.virtual_file import files_table
from pathstore.services.path_store import PathStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from pathstore.config import Settings
    from pathstore.hooks import HookRegistry

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure process logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not database_url.startswith("sqlite"):
        return
    db_path = database_url.split("///", 1)[-1] if "///" in database_url else None
    if db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def open_store(
    settings: Settings,
    hooks: HookRegistry | None = None,
    *,
    setup_logging: bool = False,
) -> AsyncGenerator[PathStore]:
    """Yield a ready-to-use store for ``settings.source``.

    Creates the database and table when missing and disposes the engine on
    exit.  Root logging is left to the host application unless
    ``setup_logging`` is set.
    """
    if setup_logging:
        configure_logging(settings.debug)
    ensure_sqlite_dir(settings.database_url)

    table = files_table(settings.table_name)
    engine, session_factory = create_engine(settings)
    try:
        await ensure_tables(engine)
    except Exception as exc:
        logger.critical(
            "Failed to initialize database: %s. Check database path and permissions.", exc
        )
        await engine.dispose()
        raise

    logger.info("Opened path store %r on table %s", settings.source, table.name)
    try:
        yield PathStore(session_factory, settings.source, table=table, hooks=hooks)
    finally:
        await engine.dispose()
