"""Operation surface consumed by transport adapters (HTTP, RPC, CLI).

Every method returns a ``Response``; typed failures become ``ok=False`` with
the error code and message, and nothing raises past this boundary.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .catalog import DirectoryCatalog, DirectoryListing, Entry, export_rows, format_mtime
from .errors import ExplorerError, IOFailure
from .mutations import MutationOrchestrator
from .opener import open_path
from .shortcut import ShortcutResolver

logger = logging.getLogger(__name__)

OK_CODE = "OK"


@dataclass(frozen=True)
class Response:
    ok: bool
    code: str = OK_CODE
    message: str = "success"
    data: Any = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "code": self.code, "message": self.message, "data": self.data}


def success(data: Any = None, message: str = "success") -> Response:
    return Response(ok=True, code=OK_CODE, message=message, data=data)


def failure(error: ExplorerError) -> Response:
    return Response(ok=False, code=error.code, message=error.message)


def _guarded(method: Callable[..., Response]) -> Callable[..., Response]:
    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> Response:
        try:
            return method(*args, **kwargs)
        except ExplorerError as exc:
            return failure(exc)
        except Exception as exc:
            logger.exception("unexpected failure in %s", method.__name__)
            return failure(IOFailure(f"Unexpected failure: {exc}"))

    return wrapper


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": entry.name,
        "path": os.fspath(entry.path),
        "type": entry.kind.value,
        "mtime": format_mtime(entry),
    }
    if not entry.is_dir:
        data["size"] = entry.size
    return data


def listing_to_dict(listing: DirectoryListing) -> dict[str, Any]:
    return {
        "currentPath": os.fspath(listing.current_path),
        "parentPath": os.fspath(listing.parent_path),
        "directories": [entry_to_dict(entry) for entry in listing.directories],
        "files": [entry_to_dict(entry) for entry in listing.files],
    }


class ExplorerService:
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

    @_guarded
    def list_directory(self, path: str) -> Response:
        return success(listing_to_dict(self.catalog.list_directory(path)))

    @_guarded
    def resolve_shortcut(self, path: str) -> Response:
        return success({"targetPath": self.resolver.resolve(path)})

    @_guarded
    def rename(self, old_path: str, new_path: str) -> Response:
        self.mutations.rename(old_path, new_path)
        return success(message="renamed")

    @_guarded
    def remove(self, path: str) -> Response:
        self.mutations.delete(path)
        return success(message="deleted")

    @_guarded
    def remove_batch(self, paths: Iterable[str]) -> Response:
        removed = self.mutations.batch_delete(paths)
        return success({"removed": removed}, message="batch deleted")

    @_guarded
    def create_folder(self, path: str) -> Response:
        self.mutations.create_folder(path)
        return success(message="folder created")

    @_guarded
    def create_file(self, path: str) -> Response:
        self.mutations.create_file(path)
        return success(message="file created")

    @_guarded
    def copy(self, source_path: str, destination_path: str) -> Response:
        actual = self.mutations.copy(source_path, destination_path)
        return success({"actualDestination": os.fspath(actual)}, message="copied")

    @_guarded
    def copy_batch(self, source_paths: Iterable[str], destination_dir: str) -> Response:
        self.mutations.batch_copy(source_paths, destination_dir)
        return success(message="batch copied")

    @_guarded
    def move(self, source_path: str, destination_path: str) -> Response:
        self.mutations.move(source_path, destination_path)
        return success(message="moved")

    @_guarded
    def move_batch(self, source_paths: Iterable[str], destination_dir: str) -> Response:
        self.mutations.batch_move(source_paths, destination_dir)
        return success(message="batch moved")

    @_guarded
    def open_file(self, path: str) -> Response:
        error = self._open_file(Path(path))
        if error is not None:
            return failure(IOFailure(error, path))
        return success(message="opened")

    @_guarded
    def upload(self, target_dir: str, files: Iterable[tuple[str, bytes]]) -> Response:
        count = self.mutations.store_upload(target_dir, files)
        return success({"count": count}, message="uploaded")

    @_guarded
    def export_listing(self, path: str) -> Response:
        return success(export_rows(self.catalog.list_directory(path)))


__all__ = [
    "OK_CODE",
    "Response",
    "success",
    "failure",
    "entry_to_dict",
    "listing_to_dict",
    "ExplorerService",
]
