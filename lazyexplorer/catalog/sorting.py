"""User-requested re-sorts and name search over listing entries.

Both helpers return new sequences; cached listings keep their baseline order.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .types import Entry


class SortField(str, Enum):
    NAME = "name"
    SIZE = "size"
    MTIME = "mtime"
    TYPE = "type"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _name_key(entry: Entry) -> str:
    return entry.name.lower()


def _size_key(entry: Entry) -> int:
    return 0 if entry.is_dir else (entry.size or 0)


def _mtime_key(entry: Entry) -> int:
    return entry.mtime_ns or 0


def _type_rank(entry: Entry, descending: bool) -> tuple[int, int]:
    # ascending: directories, then shortcuts, then other files; descending flips both
    kind_rank = 0 if entry.is_dir else 1
    shortcut_rank = 0 if entry.is_shortcut else 1
    if descending:
        kind_rank = 1 - kind_rank
        shortcut_rank = 1 - shortcut_rank
    return kind_rank, shortcut_rank


def sort_entries(
    entries: Iterable[Entry],
    field: SortField | None,
    direction: SortDirection | None = SortDirection.ASC,
) -> list[Entry]:
    """Return ``entries`` re-sorted by ``field``; no field keeps input order."""
    items = list(entries)
    if field is None or direction is None:
        return items
    field = SortField(field)
    descending = SortDirection(direction) is SortDirection.DESC

    if field is SortField.TYPE:
        # name tiebreak stays ascending regardless of direction
        return sorted(items, key=lambda item: (*_type_rank(item, descending), _name_key(item)))

    key = {
        SortField.NAME: _name_key,
        SortField.SIZE: _size_key,
        SortField.MTIME: _mtime_key,
    }[field]
    return sorted(items, key=key, reverse=descending)


def filter_entries(entries: Iterable[Entry], keyword: str) -> list[Entry]:
    """Keep entries whose name contains ``keyword`` (case-insensitive)."""
    needle = keyword.strip().lower()
    if not needle:
        return list(entries)
    return [entry for entry in entries if needle in entry.name.lower()]


__all__ = ["SortField", "SortDirection", "sort_entries", "filter_entries"]
