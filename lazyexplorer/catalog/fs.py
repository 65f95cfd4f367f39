"""Filesystem scanning for directory listings.

Hidden names are dropped before any metadata is read, so nothing downstream
(caches, trees, selections) ever sees them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import NotADirectory, NotFound, PermissionDenied, wrap_os_error
from ..hidden import is_hidden
from .types import DirectoryListing, Entry, EntryKind

logger = logging.getLogger(__name__)


def normalize_path(path: Path | str) -> Path:
    """Absolute, separator-normalized path used as the catalog key."""
    return Path(os.path.abspath(os.fspath(path)))


def _scan_child(child: os.DirEntry[str]) -> Entry:
    try:
        is_dir = child.is_dir()
    except OSError:
        is_dir = False

    size: int | None = None
    mtime_ns: int | None = None
    try:
        stat = child.stat()
        mtime_ns = int(stat.st_mtime_ns)
        if not is_dir:
            size = int(stat.st_size)
    except OSError:
        # dangling symlink or raced delete: keep the row, drop the metadata
        pass

    return Entry(
        name=child.name,
        path=Path(child.path),
        kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
        size=size,
        mtime_ns=mtime_ns,
    )


def list_directory_entries(directory: Path | str) -> DirectoryListing:
    """Scan ``directory`` into a filtered, partitioned, name-sorted listing.

    Raises ``NotFound``, ``NotADirectory``, ``PermissionDenied`` or
    ``IOFailure``.
    """
    current = normalize_path(directory)
    try:
        os.lstat(current)
    except FileNotFoundError as exc:
        raise NotFound(f"Path does not exist: {current}", current) from exc
    except OSError as exc:
        # e.g. an unreadable ancestor: permission denied, not missing
        raise wrap_os_error(exc, current) from exc
    if not current.is_dir():
        raise NotADirectory(f"Not a directory: {current}", current)

    directories: list[Entry] = []
    files: list[Entry] = []
    try:
        with os.scandir(current) as entries:
            for child in entries:
                if is_hidden(child.name):
                    continue
                entry = _scan_child(child)
                (directories if entry.is_dir else files).append(entry)
    except PermissionError as exc:
        raise PermissionDenied(f"Permission denied: {current}", current) from exc
    except OSError as exc:
        raise wrap_os_error(exc, current) from exc

    directories.sort(key=lambda item: item.name.lower())
    files.sort(key=lambda item: item.name.lower())
    logger.debug("listed %s: %d dirs, %d files", current, len(directories), len(files))
    return DirectoryListing(
        current_path=current,
        parent_path=current.parent,
        directories=tuple(directories),
        files=tuple(files),
    )


__all__ = ["normalize_path", "list_directory_entries"]
