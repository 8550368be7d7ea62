"""Entry classification: link files versus regular files with detected MIME types.

Link files carry a redirect URL instead of payload bytes. They are tagged
with ``LINK_MIME`` so later stages can skip them without re-checking names.
Regular files get a content-derived MIME type:
1. magic-byte sniffing via ``filetype``
2. NUL-byte probe -> ``application/octet-stream``
3. name-based lookup for textual types
4. ``text/plain`` fallback
"""

from __future__ import annotations

import mimetypes
import os
import posixpath
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import filetype

from ..errors import ClassificationError, InvalidLinkTargetError, LinkReadError
from .types import LINK_MIME, FileEntry
from .urls import is_absolute_url, resolve

if TYPE_CHECKING:
    from ..config import SiteConfig

SNIFF_BYTES = 8192
OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain"
_TEXTUAL_APPLICATION_TYPES = frozenset(
    {
        "application/json",
        "application/javascript",
        "application/xml",
        "application/x-sh",
        "application/x-python-code",
        "image/svg+xml",
    }
)


def detect_mime(path: Path) -> str:
    """Return the content type of ``path``, raising ``ClassificationError`` on I/O failure."""
    try:
        with path.open("rb") as handle:
            sample = handle.read(SNIFF_BYTES)
    except OSError as exc:
        raise ClassificationError(f"could not read file for type detection ({exc.strerror})", path) from exc

    kind = filetype.guess(sample)
    if kind is not None:
        return kind.mime
    if b"\x00" in sample:
        return OCTET_STREAM

    guessed, _encoding = mimetypes.guess_type(path.name, strict=False)
    if guessed is not None and (guessed.startswith("text/") or guessed in _TEXTUAL_APPLICATION_TYPES):
        return guessed
    return TEXT_PLAIN


def read_link_target(path: Path) -> str:
    """Return the trimmed absolute URL stored in link file ``path``."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LinkReadError("could not read link file", path) from exc
    target = raw.strip()
    if not is_absolute_url(target):
        raise InvalidLinkTargetError(f"link file does not contain an absolute URL ({target!r})", path)
    return target


def modified_time(stat_result: os.stat_result) -> datetime:
    """Return ``st_mtime`` as a timezone-aware local datetime."""
    return datetime.fromtimestamp(stat_result.st_mtime).astimezone()


def classify(
    path: Path,
    relative_path: str,
    stat_result: os.stat_result,
    config: SiteConfig,
) -> FileEntry:
    """Build the ``FileEntry`` for one included file.

    ``relative_path`` is the POSIX path of ``path`` below the source root.
    Link entries drop the suffix from both display name and relative path,
    report zero size, and have no destination.
    """
    name = path.name
    mode = stat_result.st_mode & 0o7777
    modified = modified_time(stat_result)

    if config.is_link_name(name):
        stripped_name = name[: -len(config.link_suffix)]
        parent = posixpath.dirname(relative_path)
        return FileEntry(
            name=stripped_name,
            relative_path=posixpath.join(parent, stripped_name) if parent else stripped_name,
            source_path=path,
            destination_path=None,
            url=read_link_target(path),
            mime=LINK_MIME,
            size=0,
            modified=modified,
            mode=mode,
        )

    return FileEntry(
        name=name,
        relative_path=relative_path,
        source_path=path,
        destination_path=config.destination / relative_path,
        url=resolve(config.base_url, relative_path),
        mime=detect_mime(path),
        size=int(stat_result.st_size),
        modified=modified,
        mode=mode,
    )


__all__ = [
    "OCTET_STREAM",
    "TEXT_PLAIN",
    "detect_mime",
    "read_link_target",
    "modified_time",
    "classify",
]
