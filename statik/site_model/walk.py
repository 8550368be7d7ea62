"""Filesystem scanning and domain-tree construction for the source directory."""

from __future__ import annotations

import logging
import os
from operator import attrgetter
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import FilesystemError, InvalidDirectoryError
from .classify import classify, modified_time
from .types import DirectoryEntry, FileEntry, WalkResult
from .urls import resolve

if TYPE_CHECKING:
    from ..config import SiteConfig

logger = logging.getLogger(__name__)

_BY_NAME = attrgetter("name")


def is_within(path: Path, root: Path) -> bool:
    """Return whether ``path`` is ``root`` or lies below it (lexically)."""
    return path == root or root in path.parents


def _relative(path: Path, root: Path) -> str:
    if path == root:
        return "."
    return path.relative_to(root).as_posix()


def _stat(path: Path) -> os.stat_result:
    try:
        return path.stat()
    except OSError as exc:
        raise FilesystemError(f"could not stat ({exc.strerror})", path) from exc


def _scan(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as exc:
        raise FilesystemError(f"could not read directory ({exc.strerror})", directory) from exc


def _is_real_directory(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError as exc:
        raise FilesystemError(f"could not stat ({exc.strerror})", entry.path) from exc


def _is_symlinked_directory(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_symlink() and entry.is_dir(follow_symlinks=True)
    except OSError:
        return False


def _check_link_names(subdirectories: list[DirectoryEntry], files: list[FileEntry]) -> None:
    taken = [entry.name for entry in subdirectories] + [entry.name for entry in files if not entry.is_link]
    for entry in files:
        if not entry.is_link:
            continue
        if entry.name in taken:
            raise FilesystemError(f"link name collides with an existing entry {entry.name!r}", entry.source_path)
        taken.append(entry.name)


def walk(config: SiteConfig) -> WalkResult:
    """Walk ``config.source`` and return the filtered tree plus fuzzy index.

    Subdirectories are kept only when non-empty (or ``include_empty``); their
    fuzzy entries merge into the parent's only when kept. The destination
    directory and anything below it is never listed or descended into.

    Raises ``InvalidDirectoryError`` when the source is not a directory and
    ``FilesystemError``/classification errors for unreadable entries, or when
    a link file's stripped name matches a sibling.
    """
    source = config.source
    if not source.is_dir():
        raise InvalidDirectoryError("source is not a directory", source)

    def build(directory: Path) -> tuple[DirectoryEntry, list[FileEntry]]:
        dir_stat = _stat(directory)
        relative_path = _relative(directory, source)
        subdirectories: list[DirectoryEntry] = []
        files: list[FileEntry] = []
        discovered: list[FileEntry] = []

        for entry in _scan(directory):
            child = Path(entry.path)
            if is_within(child, config.destination):
                logger.debug("Skipping destination directory inside source: %s", child)
                continue

            if _is_real_directory(entry):
                if not config.recursive or not config.include_directory(entry.name):
                    continue
                subdirectory, sub_discovered = build(child)
                if subdirectory.is_empty and not config.include_empty:
                    continue
                subdirectories.append(subdirectory)
                discovered.extend(sub_discovered)
                continue

            if _is_symlinked_directory(entry):
                logger.debug("Skipping symlinked directory: %s", child)
                continue
            if not config.include_file(entry.name):
                continue

            file_entry = classify(child, _relative(child, source), _stat(child), config)
            files.append(file_entry)
            discovered.append(file_entry)

        _check_link_names(subdirectories, files)
        if config.sort:
            subdirectories.sort(key=_BY_NAME)
            files.sort(key=_BY_NAME)

        node = DirectoryEntry(
            name=directory.name,
            relative_path=relative_path,
            source_path=directory,
            destination_path=config.destination / relative_path,
            url=resolve(config.base_url, relative_path),
            size=int(dir_stat.st_size),
            modified=modified_time(dir_stat),
            mode=dir_stat.st_mode & 0o7777,
            directories=tuple(subdirectories),
            files=tuple(files),
        )
        return node, discovered

    root, discovered = build(source)
    return WalkResult(root=root, fuzzy=tuple(discovered))


__all__ = [
    "is_within",
    "walk",
]
