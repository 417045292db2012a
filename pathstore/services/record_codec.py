"""Mapping between stored rows and logical file results."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, Any

from pathstore.services.datetime_service import now_utc, to_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pathstore.schemas.select import SelectOptions


def make_file_path(dir_name: str, file_name: str, extension: str) -> str:
    """Join the parts of a virtual path: ``dir_name/file_name.extension``."""
    return f"{dir_name}/{file_name}.{extension}"


def base_name(path: str) -> str:
    """Return the last path segment (file name with extension)."""
    return posixpath.basename(path)


def byte_size(content: str) -> int:
    """Length of content in UTF-8 bytes, not characters."""
    return len(content.encode("utf-8"))


def new_record(source: str, path: str, content: str) -> dict[str, Any]:
    """Build the values of a freshly inserted row."""
    return {
        "source": source,
        "path": path,
        "content": content,
        "file_size": byte_size(content),
        "updated_at": now_utc(),
        "deleted_at": None,
    }


def updated_values(path: str, content: str) -> dict[str, Any]:
    """Build the values written by an update. Updating always un-deletes."""
    return {
        "path": path,
        "content": content,
        "file_size": byte_size(content),
        "updated_at": now_utc(),
        "deleted_at": None,
    }


def full_result(file_name: str, row: Mapping[str, Any]) -> dict[str, Any]:
    """Result with every field, as returned by ``select_one``."""
    return {
        "fileName": file_name,
        "content": row["content"],
        "mtime": to_timestamp(row["updated_at"]),
        "record": dict(row),
    }


def project_result(
    file_name: str, row: Mapping[str, Any], options: SelectOptions
) -> dict[str, Any]:
    """Result holding exactly the fields requested in ``options.columns``."""
    if options.full:
        return full_result(file_name, row)

    result: dict[str, Any] = {}
    if options.wants("fileName"):
        result["fileName"] = file_name
    if options.wants("content"):
        result["content"] = row["content"]
    if options.wants("mtime"):
        result["mtime"] = to_timestamp(row["updated_at"])
    if options.wants("record"):
        result["record"] = dict(row)
    return result
