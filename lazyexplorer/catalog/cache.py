"""Lazily populated, per-path cache of directory listings.

A listing is scanned only when a caller navigates into a directory or expands
a tree node. Mutations invalidate the parent listing and, for subtree
changes, every cached descendant. Scans of the same path are serialized by a
per-path lock; the cache dict itself is guarded by a single lock.

Each running scan holds a ticket. Invalidating a path withdraws the tickets of
scans under it, so a listing read before a mutation is never stored after it.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from pathlib import Path

from .fs import list_directory_entries, normalize_path
from .sorting import SortDirection, SortField, sort_entries
from .types import DirectoryListing, Entry

logger = logging.getLogger(__name__)

CATALOG_CACHE_MAX = 512


def _is_within(path: Path, root: Path) -> bool:
    """Return whether ``path`` is ``root`` or below it."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


class DirectoryCatalog:
    """Cache of ``DirectoryListing`` keyed by normalized absolute path."""

    def __init__(
        self,
        max_entries: int = CATALOG_CACHE_MAX,
        scan: Callable[[Path], DirectoryListing] = list_directory_entries,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self._scan = scan
        self._cache: OrderedDict[Path, DirectoryListing] = OrderedDict()
        self._lock = threading.Lock()
        self._path_locks: dict[Path, threading.Lock] = {}
        self._scans: dict[object, Path] = {}

    def _lock_for(self, key: Path) -> threading.Lock:
        with self._lock:
            lock = self._path_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._path_locks[key] = lock
            return lock

    def _withdraw_scans(self, matches: Callable[[Path], bool]) -> None:
        # caller holds self._lock
        for ticket, key in list(self._scans.items()):
            if matches(key):
                del self._scans[ticket]

    def _store(self, key: Path, listing: DirectoryListing, ticket: object) -> None:
        with self._lock:
            if self._scans.pop(ticket, None) is None:
                logger.debug("discarding listing of %s invalidated during scan", key)
                return
            self._cache[key] = listing
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_entries:
                evicted, _listing = self._cache.popitem(last=False)
                self._path_locks.pop(evicted, None)

    def cached(self, path: Path | str) -> DirectoryListing | None:
        """Return the cached listing for ``path`` without scanning."""
        key = normalize_path(path)
        with self._lock:
            listing = self._cache.get(key)
            if listing is not None:
                self._cache.move_to_end(key)
            return listing

    def is_cached(self, path: Path | str) -> bool:
        with self._lock:
            return normalize_path(path) in self._cache

    def cached_paths(self) -> list[Path]:
        with self._lock:
            return list(self._cache)

    def list_directory(self, path: Path | str, *, refresh: bool = False) -> DirectoryListing:
        """Return the listing for ``path``, scanning on first use or ``refresh``.

        Errors from the scan propagate and nothing is cached for that path.
        A listing whose path was invalidated mid-scan is returned but not cached.
        """
        key = normalize_path(path)
        lock = self._lock_for(key)
        with lock:
            if not refresh:
                listing = self.cached(key)
                if listing is not None:
                    return listing
            ticket = object()
            with self._lock:
                self._scans[ticket] = key
            try:
                listing = self._scan(key)
            except Exception:
                with self._lock:
                    self._scans.pop(ticket, None)
                    if self._path_locks.get(key) is lock and key not in self._cache:
                        del self._path_locks[key]
                raise
            self._store(key, listing, ticket)
            return listing

    def sorted_entries(
        self,
        path: Path | str,
        field: SortField | None,
        direction: SortDirection | None = SortDirection.ASC,
    ) -> list[Entry]:
        """Derive a re-sorted entry list from the cached baseline listing."""
        listing = self.list_directory(path)
        return sort_entries(listing.entries, field, direction)

    def invalidate(self, path: Path | str) -> bool:
        """Drop the cached listing for ``path``; return whether one existed."""
        key = normalize_path(path)
        with self._lock:
            self._withdraw_scans(lambda scanned: scanned == key)
            return self._cache.pop(key, None) is not None

    def invalidate_subtree(self, path: Path | str) -> int:
        """Drop ``path`` and every cached descendant; return the drop count."""
        root = normalize_path(path)
        with self._lock:
            self._withdraw_scans(lambda scanned: _is_within(scanned, root))
            doomed = [key for key in self._cache if _is_within(key, root)]
            for key in doomed:
                del self._cache[key]
        return len(doomed)

    def invalidate_for_mutation(self, path: Path | str, *, subtree: bool = False) -> None:
        """Invalidate listings made stale by a mutation of ``path``.

        The parent listing is always dropped. ``subtree`` additionally drops
        ``path`` itself and all cached descendants (delete/rename/move of a
        directory).
        """
        target = normalize_path(path)
        self.invalidate(target.parent)
        if subtree:
            dropped = self.invalidate_subtree(target)
        else:
            dropped = 0
        logger.debug("invalidated %s (parent=%s, subtree=%d)", target, target.parent, dropped)

    def clear(self) -> None:
        with self._lock:
            self._scans.clear()
            self._cache.clear()
            self._path_locks.clear()


__all__ = ["CATALOG_CACHE_MAX", "DirectoryCatalog"]
