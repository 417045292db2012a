"""Select option schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SelectColumn = Literal["fileName", "content", "mtime", "record"]

ALL_COLUMNS = "*"


class SelectOptions(BaseModel):
    """Options accepted by ``PathStore.select``.

    ``columns`` of ``None`` (or ``["*"]``) selects every field and the raw
    row.  ``orders``, ``limit`` and ``offset`` are accepted but not
    implemented; results come back in database order.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    columns: list[SelectColumn] | None = None
    extensions: list[str] | None = None
    file_match: str | None = Field(default=None, alias="fileMatch")
    orders: Any = None
    limit: int | None = None
    offset: int | None = None

    @field_validator("columns", mode="before")
    @classmethod
    def star_means_all(cls, v: Any) -> Any:
        """Normalize ``["*"]`` to ``None`` (full record)."""
        _ = cls
        if isinstance(v, (list, tuple, set, frozenset)) and list(v) == [ALL_COLUMNS]:
            return None
        if isinstance(v, (set, frozenset)):
            return sorted(v)
        return v

    @field_validator("extensions")
    @classmethod
    def empty_extensions_mean_any(cls, v: list[str] | None) -> list[str] | None:
        """An empty extension list does not filter anything."""
        _ = cls
        if not v:
            return None
        return v

    @property
    def full(self) -> bool:
        """Whether every field is returned."""
        return self.columns is None

    def wants(self, column: SelectColumn) -> bool:
        """Whether ``column`` belongs in each result entry."""
        return self.columns is None or column in self.columns
