"""Path store: path-addressed virtual files kept in a shared database table.

Files are addressed by ``dir_name/file_name.extension`` within a *source*,
a partition of the table isolated by an equality filter.  Deletes are soft by
default: ``deleted_at`` is set and the row stays behind as a tombstone that
a later insert or update resurrects in place.
"""

from __future__ import annotations

import logging
import zlib
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_, select
from sqlalchemy import insert as sa_insert
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pathstore.exceptions import CreateFileError, DeleteFileError, FileAlreadyExistsError
from pathstore.hooks import HookRegistry
from pathstore.models.virtual_file import files_table
from pathstore.schemas.select import SelectOptions
from pathstore.services.datetime_service import now_utc, to_timestamp
from pathstore.services.record_codec import (
    base_name,
    full_result,
    make_file_path,
    new_record,
    project_result,
    updated_values,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Executable, RowMapping, Select, Table
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

PATHS_CACHE_KEY_PREFIX = "pathstore-db"


class PathStore:
    """Read, write, soft-delete and enumerate virtual files of one source.

    Every operation opens its own session; writes commit on success and roll
    back on failure.  The store keeps no state between calls besides its
    identifiers and hooks, so one instance may serve concurrent requests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        source: str,
        table: Table | None = None,
        hooks: HookRegistry | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.source = source
        self.table = table if table is not None else files_table()
        self.hooks = hooks if hooks is not None else HookRegistry()

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def base_query(self) -> Select:
        """Select over the table with no columns and no filters."""
        return select().select_from(self.table)

    def scoped_query(self, include_deleted: bool = False) -> Select:
        """Select the identity columns of this source's rows.

        Tombstones are excluded (and ``deleted_at`` selected) unless
        ``include_deleted`` is set.  Registered hooks may extend the query.
        """
        c = self.table.c
        query = (
            self.base_query()
            .add_columns(c.id, c.source, c.path, c.updated_at, c.file_size)
            .where(c.source == self.source)
        )
        if not include_deleted:
            query = query.add_columns(c.deleted_at).where(c.deleted_at.is_(None))
        return self.hooks.extend_query(query, include_deleted)

    def _with_columns(self, query: Select, *names: str) -> Select:
        selected = set(query.selected_columns.keys())
        missing = [self.table.c[name] for name in names if name not in selected]
        return query.add_columns(*missing) if missing else query

    def _path_query(self, path: str, include_deleted: bool = False) -> Select:
        return self.scoped_query(include_deleted).where(self.table.c.path == path)

    async def _first(self, query: Select) -> RowMapping | None:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.mappings().first()

    async def _all(self, query: Select) -> list[RowMapping]:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.mappings().all())

    async def _count(self, query: Select) -> int:
        stmt = select(func.count()).select_from(query.subquery())
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def _live_exists(self, path: str) -> bool:
        """Re-check for a live row after a failed write. A failed check counts as absent."""
        try:
            return await self._count(self._path_query(path)) > 0
        except SQLAlchemyError as exc:
            logger.debug("Could not re-check %s in %s: %s", path, self.source, exc)
            return False

    async def _write(self, stmt: Executable) -> int:
        """Run a write statement in its own transaction. Returns affected rows."""
        async with self.session_factory() as session, session.begin():
            result = await session.execute(stmt)
            return result.rowcount  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def select_one(
        self, dir_name: str, file_name: str, extension: str
    ) -> dict[str, Any] | None:
        """Return a single live file, or None if there is none at that path."""
        path = make_file_path(dir_name, file_name, extension)
        query = self._with_columns(self._path_query(path), "content")
        row = await self._first(query)
        if row is None:
            return None
        return full_result(f"{file_name}.{extension}", row)

    async def select(
        self,
        dir_name: str,
        options: SelectOptions | Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Return live files whose path starts with ``dir_name``.

        The prefix match is plain ``LIKE 'dir_name%'`` and is not aware of
        directory boundaries: ``docs`` also matches ``docsarchive/x.md``.
        """
        if options is None:
            options = SelectOptions()
        elif not isinstance(options, SelectOptions):
            options = SelectOptions.model_validate(options)

        if options.orders is not None or options.limit is not None or options.offset is not None:
            logger.debug("Ignoring unimplemented select options (orders, limit, offset)")

        c = self.table.c
        query = self.scoped_query().where(c.path.like(f"{dir_name}%"))

        if options.extensions:
            query = query.where(or_(*(c.path.like(f"%.{ext}") for ext in options.extensions)))

        if options.full:
            query = self._with_columns(query, "content")
        else:
            # source is needed for scoping, path for building results
            names = ["source", "path"]
            if options.wants("content"):
                names.append("content")
            if options.wants("mtime"):
                names.append("updated_at")
            query = self._with_columns(query, *names)

        results: list[dict[str, Any]] = []
        for row in await self._all(query):
            file_name = base_name(row["path"])
            if options.file_match and not fnmatchcase(file_name, options.file_match):
                continue
            results.append(project_result(file_name, row, options))
        return results

    async def last_modified(self, dir_name: str, file_name: str, extension: str) -> int | None:
        """Return the epoch seconds of the last write, or None.

        None covers both a missing file and a failed lookup.
        """
        path = make_file_path(dir_name, file_name, extension)
        try:
            row = await self._first(self._path_query(path))
            if row is None:
                return None
            return to_timestamp(row["updated_at"])
        except Exception as exc:
            logger.debug("Could not read modification time of %s: %s", path, exc)
            return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def insert(self, dir_name: str, file_name: str, extension: str, content: str) -> int:
        """Create a file and return its size in bytes.

        A tombstone at the same path is resurrected through ``update``.
        Raises FileAlreadyExistsError if a live file occupies the path.
        """
        path = make_file_path(dir_name, file_name, extension)

        try:
            exists = await self._count(self._path_query(path)) > 0
            deleted = (
                not exists
                and await self._first(self._path_query(path, include_deleted=True)) is not None
            )
        except Exception as exc:
            logger.warning("Existence check failed for %s in %s: %s", path, self.source, exc)
            raise CreateFileError(path) from exc

        if exists:
            raise FileAlreadyExistsError(path)

        if deleted:
            logger.debug("Resurrecting deleted file %s in %s", path, self.source)
            return await self.update(dir_name, file_name, extension, content)

        try:
            record = new_record(self.source, path, content)
            self.hooks.before_insert(record)
            # Unscoped: the record carries its own source
            await self._write(sa_insert(self.table).values(record))
        except IntegrityError as exc:
            if await self._live_exists(path):
                logger.warning("Concurrent insert of %s in %s", path, self.source)
                raise FileAlreadyExistsError(path) from exc
            logger.warning("Failed to insert %s in %s: %s", path, self.source, exc)
            raise CreateFileError(path) from exc
        except Exception as exc:
            logger.warning("Failed to insert %s in %s: %s", path, self.source, exc)
            raise CreateFileError(path) from exc

        logger.debug("Inserted %s in %s (%d bytes)", path, self.source, record["file_size"])
        return record["file_size"]

    async def update(
        self,
        dir_name: str,
        file_name: str,
        extension: str,
        content: str,
        old_file_name: str | None = None,
        old_extension: str | None = None,
    ) -> int:
        """Overwrite (and optionally rename) a file; return its new size in bytes.

        The row at the old name is matched even if deleted, and the update
        always clears ``deleted_at``.
        """
        path = make_file_path(dir_name, file_name, extension)
        old_path = make_file_path(
            dir_name,
            old_file_name if old_file_name is not None else file_name,
            old_extension if old_extension is not None else extension,
        )

        try:
            values = updated_values(path, content)
            self.hooks.before_update(values)
            where = self._path_query(old_path, include_deleted=True).whereclause
            matched = await self._write(sa_update(self.table).where(where).values(values))
        except Exception as exc:
            logger.warning("Failed to update %s in %s: %s", old_path, self.source, exc)
            raise CreateFileError(path) from exc

        if old_path != path:
            logger.debug("Renamed %s to %s in %s (%d rows)", old_path, path, self.source, matched)
        else:
            logger.debug("Updated %s in %s (%d rows)", path, self.source, matched)
        return values["file_size"]

    async def delete(
        self, dir_name: str, file_name: str, extension: str, *, force: bool = False
    ) -> bool:
        """Delete a live file: soft by default, permanently when ``force`` is set.

        Deleting a path with no live file is a successful no-op.
        """
        path = make_file_path(dir_name, file_name, extension)
        try:
            where = self._path_query(path).whereclause
            if force:
                stmt: Executable = sa_delete(self.table).where(where)
            else:
                stmt = sa_update(self.table).where(where).values(deleted_at=now_utc())
            matched = await self._write(stmt)
        except Exception as exc:
            logger.warning("Failed to delete %s in %s: %s", path, self.source, exc)
            raise DeleteFileError(path) from exc

        logger.debug(
            "%s %s in %s (%d rows)",
            "Purged" if force else "Soft-deleted",
            path,
            self.source,
            matched,
        )
        return True

    async def force_delete(self, dir_name: str, file_name: str, extension: str) -> bool:
        """Permanently remove a live file."""
        return await self.delete(dir_name, file_name, extension, force=True)

    # ------------------------------------------------------------------
    # Caching support
    # ------------------------------------------------------------------

    def make_cache_key(self, name: str = "") -> int:
        """Short CRC32 discriminator for ``name`` in this source. May collide."""
        return zlib.crc32(f"{self.source}{name}".encode())

    def paths_cache_key(self) -> str:
        """Cache key for the availability map of this table and source."""
        key = f"{PATHS_CACHE_KEY_PREFIX}-{self.table.name}-{self.source}"
        return self.hooks.paths_cache_key(key)

    async def get_available_paths(self) -> dict[str, bool]:
        """Map every known path to whether it currently exists.

        Live files map to True and tombstones to False; a tombstone wins if
        a path somehow shows up in both sets.  A hook may supply the whole
        map instead.
        """
        precomputed = self.hooks.before_get_available_paths()
        if precomputed:
            return dict(precomputed)

        c = self.table.c
        deleted_query = self._with_columns(
            self.scoped_query(include_deleted=True), "deleted_at"
        ).where(c.deleted_at.is_not(None))

        paths = {row["path"]: True for row in await self._all(self.scoped_query())}
        paths.update({row["path"]: False for row in await self._all(deleted_query)})
        return paths
