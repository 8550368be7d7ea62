"""End-to-end site generation: setup validation, then walk/copy/emit/render.

Setup performs every check that can fail before the destination is touched,
then clears the destination so each run is a full overwrite. The pipeline
phases all read the single tree produced by the walk.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime

from .config import SiteConfig
from .errors import AccessDeniedError, FilesystemError, InvalidDirectoryError
from .materialize import materialize
from .metadata import emit
from .render import TemplateSet, render_tree
from .site_model import is_within, walk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Counts reported after a successful run."""

    directories: int
    files: int
    links: int
    copied: int
    pages: int


def validate_paths(config: SiteConfig) -> None:
    """Check source/destination placement and access without mutating anything."""
    source = config.source
    destination = config.destination
    if not source.exists():
        raise InvalidDirectoryError("source directory does not exist", source)
    if not source.is_dir():
        raise InvalidDirectoryError("source is not a directory", source)
    if not os.access(source, os.R_OK | os.X_OK):
        raise AccessDeniedError("cannot open source directory for reading", source)
    if is_within(source, destination):
        raise InvalidDirectoryError("the output directory cannot be the source or one of its parents", destination)
    if destination.exists():
        if not destination.is_dir():
            raise InvalidDirectoryError("output path is not a directory", destination)
        if not os.access(destination, os.W_OK | os.X_OK):
            raise AccessDeniedError("cannot open output directory for writing", destination)


def prepare_destination(config: SiteConfig) -> None:
    """Validate paths, then clear and recreate the destination directory."""
    validate_paths(config)
    destination = config.destination
    try:
        if destination.exists():
            shutil.rmtree(destination)
        destination.mkdir(parents=True)
    except OSError as exc:
        raise FilesystemError(f"cannot clear output directory ({exc.strerror})", destination) from exc


def log_config(config: SiteConfig) -> None:
    logger.info("Running with parameters:")
    for label, value in config.describe():
        logger.info("  %-14s %s", label + ":", value)


def generate(config: SiteConfig, templates: TemplateSet, generated_at: datetime | None = None) -> GenerationResult:
    """Run the full pipeline for ``config``.

    Any ``StatikError`` aborts the run; the destination may then be left
    partially populated.
    """
    log_config(config)
    prepare_destination(config)

    result = walk(config)
    directories = list(result.root.iter_directories())
    file_count = sum(len(directory.files) for directory in directories)
    link_count = sum(1 for entry in result.fuzzy if entry.is_link)
    logger.info("Walked %d director(ies) and %d file(s)", len(directories), file_count)

    copied = materialize(result.root)
    logger.info("Copied %d file(s) into %s", copied, config.destination)

    emit(result.root, result.fuzzy)
    logger.info("Wrote metadata for %d director(ies)", len(directories))

    pages = render_tree(result.root, templates, config, generated_at)

    return GenerationResult(
        directories=len(directories),
        files=file_count,
        links=link_count,
        copied=copied,
        pages=pages,
    )


__all__ = [
    "GenerationResult",
    "validate_paths",
    "prepare_destination",
    "log_config",
    "generate",
]
