"""Domain model for the walked source tree.

This package contains the non-rendering tree primitives:
- file/directory entry datatypes with nested children
- base-URL parsing and relative-path URL composition
- link-file and MIME classification of files
- the filtered recursive filesystem walk
"""

from __future__ import annotations

from .types import LINK_MIME, DirectoryEntry, FileEntry, WalkResult
from .urls import DEFAULT_BASE_URL, is_absolute_url, parse_base_url, resolve, url_path
from .classify import classify, detect_mime, read_link_target
from .walk import is_within, walk

__all__ = [
    "LINK_MIME",
    "DirectoryEntry",
    "FileEntry",
    "WalkResult",
    "DEFAULT_BASE_URL",
    "is_absolute_url",
    "parse_base_url",
    "resolve",
    "url_path",
    "classify",
    "detect_mime",
    "read_link_target",
    "is_within",
    "walk",
]
