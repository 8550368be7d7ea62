"""JSON metadata documents: per-directory ``statik.json`` and root ``fuzzy.json``.

Directory documents are shallow: immediate subdirectories are summarized with
empty ``directories``/``files`` arrays so each document's size depends only on
its own directory. Sizes are humanized strings and times are RFC 3339.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import humanize

from .errors import SerializationError
from .site_model import DirectoryEntry, FileEntry, is_absolute_url

logger = logging.getLogger(__name__)

METADATA_FILENAME = "statik.json"
FUZZY_FILENAME = "fuzzy.json"


def human_size(size: int) -> str:
    """Format a byte count with SI units (``4.2 kB``)."""
    return humanize.naturalsize(size)


def fuzzy_to_dict(entry: FileEntry) -> dict[str, object]:
    return {
        "name": entry.name,
        "path": entry.relative_path,
        "url": entry.url,
        "mime": entry.mime,
    }


def file_to_dict(entry: FileEntry) -> dict[str, object]:
    payload = fuzzy_to_dict(entry)
    payload["size"] = human_size(entry.size)
    payload["time"] = entry.modified.isoformat()
    return payload


def directory_to_dict(directory: DirectoryEntry, depth: int = 1) -> dict[str, object]:
    """Serialize ``directory`` down to ``depth`` levels of children.

    ``depth=1`` lists immediate subdirectories without their own contents;
    ``depth=0`` omits children entirely.
    """
    if depth > 0:
        directories = [directory_to_dict(child, depth - 1) for child in directory.directories]
        files = [file_to_dict(entry) for entry in directory.files]
    else:
        directories = []
        files = []
    return {
        "name": directory.name,
        "path": directory.relative_path,
        "url": directory.url,
        "size": human_size(directory.size),
        "time": directory.modified.isoformat(),
        "directories": directories,
        "files": files,
    }


def write_json(path: Path, payload: object) -> None:
    """Write ``payload`` as pretty-printed JSON, raising ``SerializationError``.

    Non-ASCII text is written as ``\\u`` escapes, so surrogate-escaped file
    names from undecodable directory entries still serialize.
    """
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=True) + "\n"
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"could not serialize metadata ({exc})", path) from exc
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise SerializationError(f"could not write metadata file ({exc.strerror})", path) from exc


def emit(root: DirectoryEntry, fuzzy: Iterable[FileEntry]) -> int:
    """Write ``fuzzy.json`` at the root and ``statik.json`` in every directory.

    Destination directories must already exist. Returns the number of
    documents written.
    """
    write_json(root.destination_path / FUZZY_FILENAME, [fuzzy_to_dict(entry) for entry in fuzzy])
    written = 1
    for directory in root.iter_directories():
        write_json(directory.destination_path / METADATA_FILENAME, directory_to_dict(directory))
        written += 1
    logger.debug("Wrote %d metadata document(s)", written)
    return written


@dataclass(frozen=True)
class FileRecord:
    """File entry parsed back from a metadata document."""

    name: str
    path: str
    url: str
    mime: str
    size: str
    time: datetime


@dataclass(frozen=True)
class DirectoryRecord:
    """Directory parsed back from a metadata document."""

    name: str
    path: str
    url: str
    size: str
    time: datetime
    directories: tuple["DirectoryRecord", ...]
    files: tuple[FileRecord, ...]


def _require_str(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise SerializationError(f"metadata field {key!r} must be a string")
    return value


def _require_url(payload: dict) -> str:
    url = _require_str(payload, "url")
    if not is_absolute_url(url):
        raise SerializationError(f"metadata url is not absolute ({url!r})")
    return url


def _require_time(payload: dict) -> datetime:
    raw = _require_str(payload, "time")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise SerializationError(f"metadata time is not RFC 3339 ({raw!r})") from exc


def _require_list(payload: dict, key: str) -> list:
    value = payload.get(key)
    if not isinstance(value, list):
        raise SerializationError(f"metadata field {key!r} must be an array")
    return value


def file_from_dict(payload: object) -> FileRecord:
    if not isinstance(payload, dict):
        raise SerializationError("file metadata must be an object")
    return FileRecord(
        name=_require_str(payload, "name"),
        path=_require_str(payload, "path"),
        url=_require_url(payload),
        mime=_require_str(payload, "mime"),
        size=_require_str(payload, "size"),
        time=_require_time(payload),
    )


def directory_from_dict(payload: object) -> DirectoryRecord:
    """Parse a directory document, validating it against the published schema."""
    if not isinstance(payload, dict):
        raise SerializationError("directory metadata must be an object")
    return DirectoryRecord(
        name=_require_str(payload, "name"),
        path=_require_str(payload, "path"),
        url=_require_url(payload),
        size=_require_str(payload, "size"),
        time=_require_time(payload),
        directories=tuple(directory_from_dict(item) for item in _require_list(payload, "directories")),
        files=tuple(file_from_dict(item) for item in _require_list(payload, "files")),
    )


def load_directory_metadata(path: Path) -> DirectoryRecord:
    """Read and parse a ``statik.json`` document from disk."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SerializationError(f"could not read metadata file ({exc.strerror})", path) from exc
    except ValueError as exc:
        raise SerializationError(f"metadata file is not valid JSON ({exc})", path) from exc
    return directory_from_dict(payload)


__all__ = [
    "METADATA_FILENAME",
    "FUZZY_FILENAME",
    "human_size",
    "fuzzy_to_dict",
    "file_to_dict",
    "directory_to_dict",
    "write_json",
    "emit",
    "FileRecord",
    "DirectoryRecord",
    "file_from_dict",
    "directory_from_dict",
    "load_directory_metadata",
]
