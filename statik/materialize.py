"""Mirror the walked tree into the destination: directory skeleton, then file copies."""

from __future__ import annotations

import logging
import os
import shutil
import stat

from .errors import FilesystemError
from .metadata import FUZZY_FILENAME, METADATA_FILENAME
from .render.page import INDEX_FILENAME
from .site_model import DirectoryEntry, FileEntry

logger = logging.getLogger(__name__)

GENERATED_NAMES = (INDEX_FILENAME, METADATA_FILENAME)


def create_skeleton(root: DirectoryEntry) -> int:
    """Create every destination directory of the tree, breadth-first.

    Source permission bits are applied to each directory; the owner always
    keeps ``rwx`` so pages and metadata can be written inside. Returns the
    number of directories created.
    """
    pending = [root]
    created = 0
    while pending:
        directory = pending.pop(0)
        target = directory.destination_path
        try:
            target.mkdir(parents=True, exist_ok=True)
            os.chmod(target, directory.mode | stat.S_IRWXU)
        except OSError as exc:
            raise FilesystemError(f"could not create output directory ({exc.strerror})", target) from exc
        created += 1
        pending.extend(directory.directories)
    return created


def copy_file(entry: FileEntry) -> None:
    """Copy one regular file's bytes and permission bits to its destination."""
    if entry.destination_path is None:
        raise FilesystemError("file has no destination path", entry.source_path)
    try:
        shutil.copyfile(entry.source_path, entry.destination_path)
    except OSError as exc:
        raise FilesystemError(f"could not copy file ({exc.strerror})", entry.source_path) from exc
    try:
        os.chmod(entry.destination_path, entry.mode)
    except OSError as exc:
        raise FilesystemError(f"could not set permissions ({exc.strerror})", entry.destination_path) from exc


def is_generated_name(directory: DirectoryEntry, entry: FileEntry) -> bool:
    """Return whether the run writes its own page or metadata over ``entry``."""
    if entry.name in GENERATED_NAMES:
        return True
    return directory.is_root and entry.name == FUZZY_FILENAME


def materialize(root: DirectoryEntry) -> int:
    """Create the destination skeleton, then copy every non-link file.

    Link entries are recognized by their reserved MIME tag and never copied.
    Source files named like a generated page or metadata document are left
    out too; the generated version replaces them.
    The first failure aborts with ``FilesystemError``. Returns the number of
    files copied.
    """
    create_skeleton(root)
    copied = 0
    for directory in root.iter_directories():
        for entry in directory.files:
            if entry.is_link:
                continue
            if is_generated_name(directory, entry):
                logger.debug("Not copying %s; it is replaced by generated output", entry.relative_path)
                continue
            copy_file(entry)
            copied += 1
    logger.debug("Copied %d file(s) into %s", copied, root.destination_path)
    return copied


__all__ = [
    "create_skeleton",
    "copy_file",
    "is_generated_name",
    "materialize",
]
