"""Domain datatypes for the walked source tree."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

# Reserved content type tagging link entries; never produced by detection.
LINK_MIME = "text/statik-link"


@dataclass(frozen=True)
class FileEntry:
    """One listed file: a regular file to copy or a link to an external URL."""

    name: str
    relative_path: str
    source_path: Path
    destination_path: Path | None
    url: str
    mime: str
    size: int
    modified: datetime
    mode: int

    @property
    def is_link(self) -> bool:
        return self.mime == LINK_MIME


@dataclass(frozen=True)
class DirectoryEntry:
    """Domain directory entry with recursively nested, already-filtered children."""

    name: str
    relative_path: str
    source_path: Path
    destination_path: Path
    url: str
    size: int
    modified: datetime
    mode: int
    directories: tuple["DirectoryEntry", ...] = ()
    files: tuple[FileEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.directories and not self.files

    @property
    def is_root(self) -> bool:
        return self.relative_path == "."

    def iter_directories(self):
        """Yield this directory and every descendant, parents before children."""
        yield self
        for child in self.directories:
            yield from child.iter_directories()


@dataclass(frozen=True)
class WalkResult:
    """Tree root plus the flat, discovery-ordered fuzzy index."""

    root: DirectoryEntry
    fuzzy: tuple[FileEntry, ...]


__all__ = [
    "LINK_MIME",
    "FileEntry",
    "DirectoryEntry",
    "WalkResult",
]
