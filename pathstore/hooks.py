"""Extension points for augmenting store queries and records.

Hosts subclass :class:`PathStoreHook`, override the methods they care about
and register instances on the store's :class:`HookRegistry`.  Hooks run
synchronously, in registration order.  Example (multi-tenant filter)::

    class SiteHook(PathStoreHook):
        def __init__(self, table: Table, site_id: int) -> None:
            self.table = table
            self.site_id = site_id

        def extend_query(self, query: Select, include_deleted: bool) -> Select:
            return query.add_columns(self.table.c.site_id).where(
                self.table.c.site_id == self.site_id
            )

        def before_insert(self, record: dict[str, Any]) -> None:
            record["site_id"] = self.site_id

        def paths_cache_key(self, key: str) -> str:
            return f"{key}-{self.site_id}"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Select

logger = logging.getLogger(__name__)


class PathStoreHook:
    """Base hook; every extension point defaults to a no-op."""

    def extend_query(self, query: Select, include_deleted: bool) -> Select:
        """Return the scoped query, possibly with extra filters or columns.

        SQLAlchemy statements are immutable, so the (new) statement must be
        returned rather than modified in place.
        """
        _ = include_deleted
        return query

    def before_insert(self, record: dict[str, Any]) -> None:
        """Mutate a new row's values before it is inserted."""

    def before_update(self, values: dict[str, Any]) -> None:
        """Mutate the values written by an update before it runs."""

    def paths_cache_key(self, key: str) -> str:
        """Return the availability cache key, possibly with extra discriminators."""
        return key

    def before_get_available_paths(self) -> dict[str, bool] | None:
        """Return a precomputed availability map to skip the database scan."""
        return None


class HookRegistry:
    """Ordered collection of hooks with one dispatch method per extension point."""

    def __init__(self, hooks: list[PathStoreHook] | None = None) -> None:
        self._hooks: list[PathStoreHook] = list(hooks or [])

    def register(self, hook: PathStoreHook) -> None:
        """Append a hook; it runs after every hook registered before it."""
        self._hooks.append(hook)

    def unregister(self, hook: PathStoreHook) -> None:
        """Remove a previously registered hook. Unknown hooks are ignored."""
        if hook in self._hooks:
            self._hooks.remove(hook)

    def __iter__(self) -> Iterator[PathStoreHook]:
        return iter(list(self._hooks))

    def __len__(self) -> int:
        return len(self._hooks)

    def extend_query(self, query: Select, include_deleted: bool) -> Select:
        for hook in self._hooks:
            query = hook.extend_query(query, include_deleted)
        return query

    def before_insert(self, record: dict[str, Any]) -> None:
        for hook in self._hooks:
            hook.before_insert(record)

    def before_update(self, values: dict[str, Any]) -> None:
        for hook in self._hooks:
            hook.before_update(values)

    def paths_cache_key(self, key: str) -> str:
        for hook in self._hooks:
            key = hook.paths_cache_key(key)
        return key

    def before_get_available_paths(self) -> dict[str, bool] | None:
        """Return the first non-empty precomputed map, or None."""
        for hook in self._hooks:
            paths = hook.before_get_available_paths()
            if paths:
                logger.debug("Availability map supplied by %s", type(hook).__name__)
                return paths
        return None
