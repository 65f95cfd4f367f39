"""Directory listing model: scanning, cached listings, re-sorts, and trees.

This package contains non-UI primitives:
- immutable entry/listing datatypes
- hidden-filtered directory scanning
- the lazily populated per-path listing cache
- derived sorts/searches and the expandable tree view
"""

from __future__ import annotations

from .types import DirectoryListing, Entry, EntryKind, format_mtime, format_size
from .fs import list_directory_entries, normalize_path
from .sorting import SortDirection, SortField, filter_entries, sort_entries
from .cache import CATALOG_CACHE_MAX, DirectoryCatalog
from .tree import TreeNode, build_tree, expand_node, flatten_tree
from .export import EXPORT_COLUMNS, export_row, export_rows

__all__ = [
    "Entry",
    "EntryKind",
    "DirectoryListing",
    "format_mtime",
    "format_size",
    "list_directory_entries",
    "normalize_path",
    "SortField",
    "SortDirection",
    "sort_entries",
    "filter_entries",
    "CATALOG_CACHE_MAX",
    "DirectoryCatalog",
    "TreeNode",
    "build_tree",
    "expand_node",
    "flatten_tree",
    "EXPORT_COLUMNS",
    "export_row",
    "export_rows",
]
