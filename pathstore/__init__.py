"""Path-addressed virtual file store on top of a relational table."""

from pathstore.config import Settings
from pathstore.exceptions import (
    CreateFileError,
    DeleteFileError,
    FileAlreadyExistsError,
    PathStoreError,
)
from pathstore.hooks import HookRegistry, PathStoreHook
from pathstore.main import open_store
from pathstore.schemas.select import SelectOptions
from pathstore.services.path_store import PathStore

__all__ = [
    "CreateFileError",
    "DeleteFileError",
    "FileAlreadyExistsError",
    "HookRegistry",
    "PathStore",
    "PathStoreError",
    "PathStoreHook",
    "SelectOptions",
    "Settings",
    "open_store",
]
