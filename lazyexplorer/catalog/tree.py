"""Navigable directory tree built from catalog listings.

One recursive builder serves every depth. Only directories present in
``expanded`` are listed, so collapsed subtrees never touch the filesystem or
the cache.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..errors import ExplorerError
from .cache import DirectoryCatalog
from .fs import normalize_path
from .types import Entry


@dataclass(frozen=True)
class TreeNode:
    """One tree row; ``children`` is ``None`` while the node is collapsed."""

    path: Path
    entry: Entry | None = None
    children: tuple["TreeNode", ...] | None = None
    error: str | None = None

    @property
    def name(self) -> str:
        if self.entry is not None:
            return self.entry.name
        return self.path.name or str(self.path)

    @property
    def is_dir(self) -> bool:
        return self.entry is None or self.entry.is_dir

    @property
    def expanded(self) -> bool:
        return self.children is not None


def expand_node(catalog: DirectoryCatalog, path: Path | str) -> tuple[TreeNode, ...]:
    """List one directory through the catalog as collapsed child nodes."""
    listing = catalog.list_directory(path)
    return tuple(TreeNode(path=entry.path, entry=entry) for entry in listing.entries)


def build_tree(
    catalog: DirectoryCatalog,
    root: Path | str,
    expanded: Iterable[Path | str],
) -> TreeNode:
    """Build the tree under ``root`` honoring the ``expanded`` set.

    The root itself must be listable; failures below it are recorded on the
    failing node instead of aborting the whole tree.
    """
    root_path = normalize_path(root)
    expanded_paths = {normalize_path(path) for path in expanded}
    expanded_paths.add(root_path)

    def build(path: Path, entry: Entry | None, required: bool) -> TreeNode:
        if entry is not None and not entry.is_dir:
            return TreeNode(path=path, entry=entry)
        if path not in expanded_paths:
            return TreeNode(path=path, entry=entry)
        try:
            listing = catalog.list_directory(path)
        except ExplorerError as exc:
            if required:
                raise
            return TreeNode(path=path, entry=entry, children=(), error=exc.message)
        children = tuple(build(child.path, child, False) for child in listing.entries)
        return TreeNode(path=path, entry=entry, children=children)

    return build(root_path, None, True)


def flatten_tree(node: TreeNode, depth: int = 0) -> Iterator[tuple[int, TreeNode]]:
    """Yield ``(depth, node)`` rows in display order."""
    yield depth, node
    for child in node.children or ():
        yield from flatten_tree(child, depth + 1)


__all__ = ["TreeNode", "expand_node", "build_tree", "flatten_tree"]
