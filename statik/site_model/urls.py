"""Base-URL parsing and relative-path URL composition."""

from __future__ import annotations

import posixpath
from urllib.parse import SplitResult, quote, urlsplit, urlunsplit

from ..errors import InvalidBaseURLError

DEFAULT_BASE_URL = "http://localhost"


def parse_base_url(raw: str) -> SplitResult:
    """Parse ``raw`` into an absolute URL, raising ``InvalidBaseURLError`` otherwise."""
    try:
        parsed = urlsplit(raw.strip())
        # Touch the port so malformed values (``http://host:abc``) fail here.
        parsed.port
    except ValueError as exc:
        raise InvalidBaseURLError(f"could not parse base URL {raw!r}") from exc
    if not parsed.scheme or not parsed.netloc:
        raise InvalidBaseURLError(f"base URL must be absolute, got {raw!r}")
    return parsed


def _join_path(base_path: str, relative_path: str) -> str:
    # Undecodable file-name bytes arrive as surrogate escapes; emit them as the raw %XX bytes.
    encoded = quote(relative_path, safe="/", errors="surrogateescape")
    joined = posixpath.normpath(posixpath.join("/", base_path.lstrip("/"), encoded))
    # normpath keeps a leading "//" intact; collapse it so the result stays a path.
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    return joined


def resolve(base_url: SplitResult, relative_path: str) -> str:
    """Return the absolute URL for ``relative_path`` under ``base_url``.

    The path is always joined against the unmodified base path, so resolving
    the same relative path twice yields the same URL. ``.`` and ``..`` segments
    are collapsed and the relative part is percent-encoded; the result never
    climbs above the base host root.
    """
    return urlunsplit(base_url._replace(path=_join_path(base_url.path, relative_path)))


def url_path(url: str) -> str:
    """Return just the path component of ``url`` (``/`` when empty)."""
    return urlsplit(url).path or "/"


def is_absolute_url(raw: str) -> bool:
    """Return whether ``raw`` parses as a URL carrying a scheme.

    A host is not required, so ``mailto:`` and ``urn:`` targets qualify.
    """
    try:
        parsed = urlsplit(raw)
    except ValueError:
        return False
    return bool(parsed.scheme)


__all__ = [
    "DEFAULT_BASE_URL",
    "parse_base_url",
    "resolve",
    "url_path",
    "is_absolute_url",
]
