"""Immutable run configuration plus persisted JSON defaults.

``SiteConfig`` is built once at startup by ``build_config`` and handed to
every pipeline stage. User defaults live in a JSON file under the platform
config directory; access is defensive, so a missing or malformed file simply
yields no defaults.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import SplitResult, urlunsplit

from platformdirs import user_config_dir

from .errors import InvalidPatternError
from .site_model.urls import DEFAULT_BASE_URL, parse_base_url

APP_NAME = "statik"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_INCLUDE = ".*"
DEFAULT_EXCLUDE = r"\.git(hub)?"
DEFAULT_LINK_SUFFIX = ".link"

_STRING_KEYS = ("include", "exclude", "base_url")
_BOOL_KEYS = ("recursive", "include_empty", "sort", "convert_links", "minify")


@dataclass(frozen=True)
class SiteConfig:
    """Every knob the pipeline reads; no stage consults global state."""

    source: Path
    destination: Path
    include: re.Pattern[str]
    exclude: re.Pattern[str]
    base_url: SplitResult
    recursive: bool = True
    include_empty: bool = False
    sort: bool = True
    convert_links: bool = True
    link_suffix: str = DEFAULT_LINK_SUFFIX
    minify: bool = True

    def include_directory(self, name: str) -> bool:
        """Return whether a directory named ``name`` may be descended into."""
        return self.exclude.search(name) is None

    def include_file(self, name: str) -> bool:
        """Return whether a file named ``name`` passes both filters."""
        return self.include.search(name) is not None and self.exclude.search(name) is None

    def is_link_name(self, name: str) -> bool:
        return self.convert_links and name.endswith(self.link_suffix) and len(name) > len(self.link_suffix)

    def describe(self) -> list[tuple[str, str]]:
        """Return ``(label, value)`` rows describing the effective settings."""
        return [
            ("Include", self.include.pattern),
            ("Exclude", self.exclude.pattern),
            ("Recursive", str(self.recursive)),
            ("Empty", str(self.include_empty)),
            ("Sort", str(self.sort)),
            ("Convert links", str(self.convert_links)),
            ("Minify", str(self.minify)),
            ("Source", str(self.source)),
            ("Destination", str(self.destination)),
            ("Base URL", urlunsplit(self.base_url)),
        ]


def _absolute(path: Path | str, cwd: Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = cwd / candidate
    return Path(os.path.normpath(candidate))


def _compile(pattern: str, label: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(f"invalid {label} pattern {pattern!r}: {exc}") from exc


def build_config(
    source: Path | str,
    destination: Path | str,
    *,
    include: str = DEFAULT_INCLUDE,
    exclude: str = DEFAULT_EXCLUDE,
    base_url: str = DEFAULT_BASE_URL,
    recursive: bool = True,
    include_empty: bool = False,
    sort: bool = True,
    convert_links: bool = True,
    link_suffix: str = DEFAULT_LINK_SUFFIX,
    minify: bool = True,
    cwd: Path | None = None,
) -> SiteConfig:
    """Validate raw settings and freeze them into a ``SiteConfig``.

    Relative paths resolve against ``cwd`` (default: process working
    directory). Raises ``InvalidPatternError`` or ``InvalidBaseURLError``;
    nothing on disk is touched here.
    """
    working_dir = cwd if cwd is not None else Path.cwd()
    return SiteConfig(
        source=_absolute(source, working_dir),
        destination=_absolute(destination, working_dir),
        include=_compile(include, "include"),
        exclude=_compile(exclude, "exclude"),
        base_url=parse_base_url(base_url),
        recursive=recursive,
        include_empty=include_empty,
        sort=sort,
        convert_links=convert_links,
        link_suffix=link_suffix,
        minify=minify,
    )


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_defaults() -> dict[str, object]:
    """Return persisted defaults keyed like ``build_config`` keyword arguments.

    Only string values for pattern/URL keys and explicit booleans for toggle
    keys are accepted; anything else is dropped.
    """
    data = load_config()
    defaults: dict[str, object] = {}
    for key in _STRING_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value:
            defaults[key] = value
    for key in _BOOL_KEYS:
        value = data.get(key)
        if isinstance(value, bool):
            defaults[key] = value
    return defaults


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_INCLUDE",
    "DEFAULT_EXCLUDE",
    "DEFAULT_LINK_SUFFIX",
    "SiteConfig",
    "build_config",
    "load_config",
    "load_defaults",
]
