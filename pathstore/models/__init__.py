"""SQLAlchemy ORM models for PathStore."""

from pathstore.models.base import Base
from pathstore.models.virtual_file import VirtualFile, files_table

__all__ = [
    "Base",
    "VirtualFile",
    "files_table",
]
