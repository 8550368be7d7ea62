"""Per-directory listing payloads and ``index.html`` generation.

Each page depends only on its own, fully populated ``DirectoryEntry``; pages
never read each other's output. Rendering runs after the destination skeleton
exists, and visits directories parents-first.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import jinja2
from markupsafe import Markup

from ..errors import FilesystemError, TemplateError
from ..metadata import human_size
from ..site_model import DirectoryEntry, FileEntry, resolve, url_path
from .minify import minify_markup
from .templates import TemplateSet

if TYPE_CHECKING:
    from ..config import SiteConfig

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"
PARENT_NAME = ".."


@dataclass(frozen=True)
class Crumb:
    """One breadcrumb segment linking to an ancestor (or current) directory."""

    name: str
    url: str


@dataclass(frozen=True)
class HeaderData:
    directory: DirectoryEntry
    parts: tuple[Crumb, ...]
    stylesheet: Markup


@dataclass(frozen=True)
class LineData:
    """One listing row as seen by the line template."""

    is_dir: bool
    name: str
    url: str
    size: str
    date: datetime | None


@dataclass(frozen=True)
class FooterData:
    date: datetime


def breadcrumbs(directory: DirectoryEntry, root_name: str, config: SiteConfig) -> tuple[Crumb, ...]:
    """Return crumbs from the site root down to ``directory``."""
    crumbs = [Crumb(name=root_name, url=url_path(resolve(config.base_url, ".")))]
    if directory.is_root:
        return tuple(crumbs)
    walked = ""
    for part in directory.relative_path.split("/"):
        walked = posixpath.join(walked, part)
        crumbs.append(Crumb(name=part, url=url_path(resolve(config.base_url, walked))))
    return tuple(crumbs)


def parent_line(directory: DirectoryEntry, config: SiteConfig) -> LineData | None:
    """Return the ``..`` row, or ``None`` at the site root."""
    if directory.is_root:
        return None
    parent_url = resolve(config.base_url, posixpath.join(directory.relative_path, PARENT_NAME))
    return LineData(is_dir=True, name=PARENT_NAME, url=url_path(parent_url), size=human_size(0), date=None)


def directory_line(directory: DirectoryEntry) -> LineData:
    return LineData(
        is_dir=True,
        name=directory.name,
        url=url_path(directory.url),
        size=human_size(directory.size),
        date=directory.modified,
    )


def file_line(entry: FileEntry) -> LineData:
    """Return a file row; link entries keep their full external URL."""
    return LineData(
        is_dir=False,
        name=entry.name,
        url=entry.url if entry.is_link else url_path(entry.url),
        size=human_size(entry.size),
        date=entry.modified,
    )


def listing_lines(directory: DirectoryEntry, config: SiteConfig) -> list[LineData]:
    """Return the parent row (when any), then subdirectory rows, then file rows."""
    lines: list[LineData] = []
    parent = parent_line(directory, config)
    if parent is not None:
        lines.append(parent)
    lines.extend(directory_line(child) for child in directory.directories)
    lines.extend(file_line(entry) for entry in directory.files)
    return lines


def _execute(template: jinja2.Template, context: dict[str, object], directory: DirectoryEntry) -> str:
    try:
        return template.render(**context)
    except jinja2.TemplateError as exc:
        raise TemplateError(f"could not render {template.name} template ({exc})", directory.source_path) from exc


def _displayable(text: str) -> str:
    """Replace surrogate-escaped bytes from undecodable file names with U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def render_page(
    directory: DirectoryEntry,
    templates: TemplateSet,
    config: SiteConfig,
    generated_at: datetime,
    root_name: str | None = None,
) -> str:
    """Render the full (minified when enabled) listing page for ``directory``."""
    header = HeaderData(
        directory=directory,
        parts=breadcrumbs(directory, root_name if root_name is not None else directory.name, config),
        stylesheet=Markup(templates.stylesheet),
    )
    header_html = _execute(templates.header, vars(header), directory)
    lines_html = "".join(
        _execute(templates.line, vars(line), directory) for line in listing_lines(directory, config)
    )
    footer_html = _execute(templates.footer, vars(FooterData(date=generated_at)), directory)
    page_html = _execute(
        templates.page,
        {
            "directory": directory,
            "header": Markup(header_html),
            "lines": Markup(lines_html),
            "footer": Markup(footer_html),
        },
        directory,
    )
    page_html = _displayable(page_html)
    if config.minify:
        return minify_markup(page_html, directory.destination_path / INDEX_FILENAME)
    return page_html


def write_page(
    directory: DirectoryEntry,
    templates: TemplateSet,
    config: SiteConfig,
    generated_at: datetime,
    root_name: str | None = None,
) -> Path:
    """Render ``directory`` and write ``index.html`` into its destination."""
    html = render_page(directory, templates, config, generated_at, root_name)
    target = directory.destination_path / INDEX_FILENAME
    try:
        target.write_text(html, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"could not write page ({exc.strerror})", target) from exc
    logger.info("Generated page for directory: %s", directory.relative_path)
    return target


def render_tree(
    root: DirectoryEntry,
    templates: TemplateSet,
    config: SiteConfig,
    generated_at: datetime | None = None,
) -> int:
    """Write ``index.html`` for every directory of the tree; returns the page count."""
    timestamp = generated_at if generated_at is not None else datetime.now().astimezone()
    pages = 0
    for directory in root.iter_directories():
        write_page(directory, templates, config, timestamp, root_name=root.name)
        pages += 1
    return pages


__all__ = [
    "INDEX_FILENAME",
    "Crumb",
    "HeaderData",
    "LineData",
    "FooterData",
    "breadcrumbs",
    "parent_line",
    "directory_line",
    "file_line",
    "listing_lines",
    "render_page",
    "write_page",
    "render_tree",
]
