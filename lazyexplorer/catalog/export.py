"""Tabular rows for the spreadsheet-export collaborator."""

from __future__ import annotations

import os

from .types import DirectoryListing, Entry, format_mtime


EXPORT_COLUMNS = ("name", "kind", "size", "modified", "path")


def export_row(entry: Entry) -> dict[str, object]:
    return {
        "name": entry.name,
        "kind": entry.kind.value,
        "size": entry.size,
        "modified": format_mtime(entry),
        "path": os.fspath(entry.path),
    }


def export_rows(listing: DirectoryListing) -> list[dict[str, object]]:
    """Rows in listing order: directories first, then files."""
    return [export_row(entry) for entry in listing.entries]


__all__ = ["EXPORT_COLUMNS", "export_row", "export_rows"]
