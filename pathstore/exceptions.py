"""Store-level exception types.

Convention:
- Lifecycle operations (insert, update, delete) never leak raw database
  errors.  The underlying exception is kept as ``__cause__`` for diagnostics,
  while callers only ever see one of the kinds below.
- "Not found" is not an error.  Reads return ``None`` or an empty result.
"""

from __future__ import annotations


class PathStoreError(Exception):
    """Base class for errors tied to a single virtual path."""

    message = "Path store operation failed"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{self.message}: {path}")


class FileAlreadyExistsError(PathStoreError):
    """A live (non-deleted) file already occupies the target path."""

    message = "A file already exists at path"


class CreateFileError(PathStoreError):
    """Writing a file (insert or update) failed in the backing store."""

    message = "Error creating file"


class DeleteFileError(PathStoreError):
    """Deleting a file failed in the backing store."""

    message = "Error deleting file"
