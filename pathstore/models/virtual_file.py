"""Virtual file model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pathstore.models.base import Base

if TYPE_CHECKING:
    from sqlalchemy import Table


class VirtualFile(Base):
    """A path-addressed text file stored as a row.

    Several independent stores share the table, isolated by ``source``.
    ``deleted_at`` marks a soft-deleted row (tombstone); rows are mutated in
    place, so there is at most one row per ``(source, path)``.
    """

    __tablename__ = "virtual_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source: Mapped[str] = mapped_column(String, nullable=False, index=True)
    path: Mapped[str] = mapped_column(String, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # In bytes, not characters
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("source", "path"),)


def files_table(name: str = VirtualFile.__tablename__) -> Table:
    """Return the table called ``name`` laid out like ``virtual_files``.

    Tables other than the default are defined on the shared metadata on
    first use, so ``Base.metadata.create_all`` creates them too.
    """
    existing = Base.metadata.tables.get(name)
    if existing is not None:
        return existing
    return VirtualFile.__table__.to_metadata(Base.metadata, name=name)  # type: ignore[attr-defined]
