"""Domain datatypes for directory listings.

Entries are immutable snapshots taken at listing time. A changed directory is
represented by a new ``DirectoryListing``, never by editing entries in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

SHORTCUT_SUFFIX = ".lnk"


class EntryKind(str, Enum):
    DIRECTORY = "dir"
    FILE = "file"


@dataclass(frozen=True)
class Entry:
    """One filesystem object observed while listing its parent."""

    name: str
    path: Path
    kind: EntryKind
    size: int | None = None
    mtime_ns: int | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_shortcut(self) -> bool:
        """Return whether this is a ``.lnk`` file (case-insensitive)."""
        return not self.is_dir and self.name.lower().endswith(SHORTCUT_SUFFIX)

    @property
    def modified_at(self) -> datetime | None:
        if self.mtime_ns is None:
            return None
        return datetime.fromtimestamp(self.mtime_ns / 1_000_000_000)


@dataclass(frozen=True)
class DirectoryListing:
    """Visible children of one directory in baseline (case-insensitive name) order."""

    current_path: Path
    parent_path: Path
    directories: tuple[Entry, ...] = ()
    files: tuple[Entry, ...] = ()

    @property
    def is_root(self) -> bool:
        """``parent_path == current_path`` marks a filesystem root."""
        return self.parent_path == self.current_path

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self.directories + self.files

    def find(self, name: str) -> Entry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None


def format_mtime(entry: Entry) -> str:
    """Render the entry timestamp for presentation, empty when unknown."""
    modified = entry.modified_at
    if modified is None:
        return ""
    return modified.strftime("%Y-%m-%d %H:%M:%S")


def format_size(size: int | None) -> str:
    """Human readable byte count (``-`` for directories/unknown)."""
    if size is None:
        return "-"
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


__all__ = [
    "SHORTCUT_SUFFIX",
    "EntryKind",
    "Entry",
    "DirectoryListing",
    "format_mtime",
    "format_size",
]
