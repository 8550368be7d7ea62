"""Exception hierarchy for site generation.

Every failure the generator reports derives from ``StatikError`` so the CLI
can map the whole family onto a single non-zero exit path. Exceptions carry
the offending filesystem path (when one exists) and include it in ``str()``.
"""

from __future__ import annotations

from pathlib import Path


class StatikError(Exception):
    """Base class for all generator failures."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class InvalidDirectoryError(StatikError):
    """Source or destination is missing, not a directory, or misplaced."""


class AccessDeniedError(StatikError):
    """Source is unreadable or destination is unwritable."""


class FilesystemError(StatikError):
    """A read, stat, mkdir, or write operation failed."""


class InvalidPatternError(StatikError):
    """Include or exclude regular expression failed to compile."""


class InvalidBaseURLError(StatikError):
    """Base URL is malformed or not absolute."""


class InvalidLinkTargetError(StatikError):
    """A link file does not contain an absolute URL."""


class LinkReadError(StatikError):
    """A link file could not be read."""


class ClassificationError(StatikError):
    """MIME type detection failed for a file."""


class TemplateError(StatikError):
    """A page template failed to parse or render."""


class MinifyError(StatikError):
    """Rendered markup could not be minified."""


class SerializationError(StatikError):
    """Metadata could not be encoded, decoded, or written."""


__all__ = [
    "StatikError",
    "InvalidDirectoryError",
    "AccessDeniedError",
    "FilesystemError",
    "InvalidPatternError",
    "InvalidBaseURLError",
    "InvalidLinkTargetError",
    "LinkReadError",
    "ClassificationError",
    "TemplateError",
    "MinifyError",
    "SerializationError",
]
