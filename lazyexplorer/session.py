"""Interactive session state: displayed listing, selection, and clipboard.

One ``ExplorerSession`` per interactive user. Lifecycle rules:
- selection is cleared whenever the displayed directory changes
- the clipboard survives navigation and is emptied only by a successful cut-paste
- a copy-paste leaves the clipboard in place for repeated pasting
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .catalog import (
    DirectoryCatalog,
    DirectoryListing,
    Entry,
    SortDirection,
    SortField,
    filter_entries,
    normalize_path,
    sort_entries,
)
from .errors import ClipboardEmpty, InvalidArgument, NotFound, ShortcutError
from .mutations import MutationOrchestrator
from .opener import open_path
from .shortcut import ShortcutResolver

logger = logging.getLogger(__name__)


class ClipboardAction(str, Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class Clipboard:
    """Pending transfer of one or more entries."""

    items: tuple[Entry, ...]
    action: ClipboardAction


@dataclass(frozen=True)
class OpenOutcome:
    """What ``open_entry`` did: navigated to a folder or handed a file to the OS."""

    action: str
    path: Path
    error: str | None = None


class ExplorerSession:
    def __init__(
        self,
        catalog: DirectoryCatalog | None = None,
        mutations: MutationOrchestrator | None = None,
        resolver: ShortcutResolver | None = None,
        open_file: Callable[[Path], str | None] = open_path,
    ) -> None:
        self.catalog = catalog if catalog is not None else DirectoryCatalog()
        self.mutations = mutations if mutations is not None else MutationOrchestrator(self.catalog)
        self.resolver = resolver if resolver is not None else ShortcutResolver()
        self._open_file = open_file
        self.listing: DirectoryListing | None = None
        self.selection: set[Path] = set()
        self.clipboard: Clipboard | None = None
        self.sort_field: SortField | None = None
        self.sort_direction: SortDirection = SortDirection.ASC
        self.search_keyword = ""

    @property
    def current_path(self) -> Path | None:
        return self.listing.current_path if self.listing is not None else None

    # --- navigation ---

    def _show(self, listing: DirectoryListing) -> DirectoryListing:
        if self.listing is None or listing.current_path != self.listing.current_path:
            self.selection.clear()
        else:
            visible = {entry.path for entry in listing.entries}
            self.selection &= visible
        self.listing = listing
        return listing

    def navigate(self, path: Path | str) -> DirectoryListing:
        """Display ``path``; on failure the previous view stays untouched."""
        return self._show(self.catalog.list_directory(path))

    def go_up(self) -> DirectoryListing | None:
        if self.listing is None or self.listing.is_root:
            return self.listing
        return self.navigate(self.listing.parent_path)

    def refresh(self, *, force: bool = False) -> DirectoryListing | None:
        """Re-read the displayed directory (from cache unless invalidated or ``force``).

        If it vanished, fall back to the nearest existing ancestor.
        """
        if self.listing is None:
            return None
        current = self.listing.current_path
        try:
            return self._show(self.catalog.list_directory(current, refresh=force))
        except NotFound:
            for ancestor in current.parents:
                try:
                    return self.navigate(ancestor)
                except NotFound:
                    continue
            raise

    # --- selection ---

    def select(self, entry: Entry) -> None:
        self.selection = {entry.path}

    def toggle(self, entry: Entry) -> bool:
        """Flip ``entry`` in the multi-selection; return whether it is now selected."""
        if entry.path in self.selection:
            self.selection.discard(entry.path)
            return False
        self.selection.add(entry.path)
        return True

    def clear(self) -> None:
        self.selection.clear()

    def selected_entries(self) -> list[Entry]:
        if self.listing is None:
            return []
        return [entry for entry in self.listing.entries if entry.path in self.selection]

    # --- view ---

    def set_sort(self, field: SortField | None, direction: SortDirection = SortDirection.ASC) -> None:
        self.sort_field = SortField(field) if field is not None else None
        self.sort_direction = SortDirection(direction)

    def set_search(self, keyword: str) -> None:
        self.search_keyword = keyword

    def view_entries(self) -> list[Entry]:
        """Entries of the displayed listing after search and re-sort."""
        if self.listing is None:
            return []
        items = filter_entries(self.listing.entries, self.search_keyword)
        return sort_entries(items, self.sort_field, self.sort_direction)

    # --- clipboard ---

    def _set_clipboard(self, entries: Iterable[Entry], action: ClipboardAction) -> Clipboard | None:
        items = tuple(entries)
        if items:
            self.clipboard = Clipboard(items=items, action=action)
            logger.debug("clipboard %s: %d item(s)", action.value, len(items))
        return self.clipboard

    def copy_to_clipboard(self, entries: Iterable[Entry]) -> Clipboard | None:
        return self._set_clipboard(entries, ClipboardAction.COPY)

    def cut_to_clipboard(self, entries: Iterable[Entry]) -> Clipboard | None:
        return self._set_clipboard(entries, ClipboardAction.CUT)

    def paste_into(self, path: Path | str | None = None) -> list[Path]:
        """Paste the clipboard into ``path`` (default: displayed directory).

        Returns the destination paths actually written.
        """
        clipboard = self.clipboard
        if clipboard is None:
            raise ClipboardEmpty("Clipboard is empty")
        if path is None:
            if self.current_path is None:
                raise InvalidArgument("No directory to paste into")
            path = self.current_path
        destination_dir = normalize_path(path)

        sources = [entry.path for entry in clipboard.items]
        try:
            if len(sources) == 1:
                source = sources[0]
                destination = destination_dir / source.name
                if clipboard.action is ClipboardAction.COPY:
                    written = [self.mutations.copy(source, destination)]
                else:
                    written = [self.mutations.move(source, destination)]
            elif clipboard.action is ClipboardAction.COPY:
                written = self.mutations.batch_copy(sources, destination_dir)
            else:
                written = self.mutations.batch_move(sources, destination_dir)
        finally:
            # batches are not transactional: items done before a failure stay done
            self.refresh()

        if clipboard.action is ClipboardAction.CUT:
            self.clipboard = None
        return written

    def delete_selection(self) -> int:
        """Best-effort removal of every selected entry."""
        removed = self.mutations.batch_delete(sorted(self.selection))
        self.selection.clear()
        self.refresh()
        return removed

    # --- opening ---

    def open_entry(self, entry: Entry) -> OpenOutcome:
        """Navigate into folders (directly or via a folder shortcut), else open with the OS."""
        if entry.is_dir:
            self.navigate(entry.path)
            return OpenOutcome(action="navigate", path=entry.path)
        if entry.is_shortcut:
            try:
                target = Path(self.resolver.resolve(entry.path))
            except ShortcutError as exc:
                logger.info("shortcut %s not opened as folder: %s", entry.path, exc.message)
            else:
                self.navigate(target)
                return OpenOutcome(action="navigate", path=target)
        error = self._open_file(entry.path)
        return OpenOutcome(action="open", path=entry.path, error=error)


__all__ = ["ClipboardAction", "Clipboard", "OpenOutcome", "ExplorerSession"]
