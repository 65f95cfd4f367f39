"""Create/rename/delete/copy/move operations with catalog invalidation.

Every operation checks its existence preconditions itself and raises typed
errors; unexpected OS failures are wrapped as ``IOFailure`` with the OS
message kept. Catalog listings of every directory whose contents changed are
invalidated before an operation returns.

Batch policies differ on purpose: copy/move batches stop at the first
missing source, while ``batch_delete`` skips paths that are already gone.
Nothing is transactional; items processed before a failure stay processed.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from .allocator import allocate_copy_destination
from .catalog import DirectoryCatalog, normalize_path
from .errors import (
    AlreadyExists,
    DestinationExists,
    InvalidArgument,
    IOFailure,
    NotADirectory,
    NotFound,
    SourceMissing,
    wrap_os_error,
)

logger = logging.getLogger(__name__)


def _exists(path: Path) -> bool:
    return os.path.lexists(path)


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


class MutationOrchestrator:
    """Filesystem mutations that keep a ``DirectoryCatalog`` consistent."""

    def __init__(self, catalog: DirectoryCatalog) -> None:
        self.catalog = catalog

    def _refuse(self, error: Exception) -> Exception:
        logger.warning("%s", error)
        return error

    # --- single-path operations ---

    def rename(self, old: Path | str, new: Path | str) -> Path:
        old_path = normalize_path(old)
        new_path = normalize_path(new)
        if not _exists(old_path):
            raise self._refuse(SourceMissing(f"Source does not exist: {old_path}", old_path))
        if _exists(new_path):
            raise self._refuse(DestinationExists(f"Destination already exists: {new_path}", new_path))
        try:
            os.rename(old_path, new_path)
        except OSError as exc:
            raise wrap_os_error(exc, old_path) from exc
        self.catalog.invalidate_for_mutation(old_path, subtree=True)
        self.catalog.invalidate_for_mutation(new_path)
        logger.info("renamed %s -> %s", old_path, new_path)
        return new_path

    def _remove(self, path: Path) -> None:
        try:
            if _is_real_dir(path):
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise wrap_os_error(exc, path) from exc
        finally:
            self.catalog.invalidate_for_mutation(path, subtree=True)

    def delete(self, path: Path | str) -> None:
        """Recursively remove ``path``."""
        target = normalize_path(path)
        if not _exists(target):
            raise self._refuse(NotFound(f"Path does not exist: {target}", target))
        self._remove(target)
        logger.info("deleted %s", target)

    def batch_delete(self, paths: Iterable[Path | str]) -> int:
        """Remove every existing path; already-missing paths are skipped.

        Returns the number of paths actually removed.
        """
        removed = 0
        for raw_path in paths:
            target = normalize_path(raw_path)
            if not _exists(target):
                logger.debug("batch delete: skipping missing %s", target)
                continue
            self._remove(target)
            removed += 1
        logger.info("batch deleted %d path(s)", removed)
        return removed

    def create_file(self, path: Path | str) -> Path:
        target = normalize_path(path)
        if _exists(target):
            raise self._refuse(AlreadyExists(f"File already exists: {target}", target))
        try:
            with open(target, "xb"):
                pass
        except FileExistsError as exc:
            raise AlreadyExists(f"File already exists: {target}", target) from exc
        except OSError as exc:
            raise wrap_os_error(exc, target) from exc
        self.catalog.invalidate_for_mutation(target)
        logger.info("created file %s", target)
        return target

    def create_folder(self, path: Path | str) -> Path:
        target = normalize_path(path)
        if _exists(target):
            raise self._refuse(AlreadyExists(f"Folder already exists: {target}", target))
        try:
            target.mkdir(parents=True)
        except FileExistsError as exc:
            raise AlreadyExists(f"Folder already exists: {target}", target) from exc
        except OSError as exc:
            raise wrap_os_error(exc, target) from exc
        # intermediate parents may have been created too
        self.catalog.invalidate_for_mutation(target)
        for ancestor in target.parents:
            self.catalog.invalidate(ancestor)
        logger.info("created folder %s", target)
        return target

    # --- transfers ---

    def _check_transfer(self, source: Path, destination: Path, verb: str) -> None:
        if not _exists(source):
            raise self._refuse(SourceMissing(f"Source does not exist: {source}", source))
        if _is_real_dir(source) and destination != source and _is_within(destination, source):
            raise self._refuse(
                IOFailure(f"Cannot {verb} a folder into itself: {source} -> {destination}", destination)
            )
        if _exists(destination):
            raise self._refuse(DestinationExists(f"Destination already exists: {destination}", destination))

    def copy(self, source: Path | str, destination: Path | str) -> Path:
        """Copy ``source`` to ``destination`` and return the path actually written.

        Copying onto itself is redirected to a ``name(副本N)`` sibling.
        """
        source_path = normalize_path(source)
        destination_path = normalize_path(destination)
        if source_path == destination_path:
            if not _exists(source_path):
                raise self._refuse(SourceMissing(f"Source does not exist: {source_path}", source_path))
            destination_path = allocate_copy_destination(destination_path)
        self._check_transfer(source_path, destination_path, "copy")
        try:
            if _is_real_dir(source_path):
                shutil.copytree(source_path, destination_path, symlinks=True)
            else:
                shutil.copy2(source_path, destination_path, follow_symlinks=False)
        except FileExistsError as exc:
            raise AlreadyExists(f"Destination already exists: {destination_path}", destination_path) from exc
        except (OSError, shutil.Error) as exc:
            raise self._wrap_transfer_error(exc, destination_path) from exc
        finally:
            self.catalog.invalidate_for_mutation(destination_path, subtree=True)
        logger.info("copied %s -> %s", source_path, destination_path)
        return destination_path

    def move(self, source: Path | str, destination: Path | str) -> Path:
        """Move ``source`` to ``destination``; existing destinations are refused."""
        source_path = normalize_path(source)
        destination_path = normalize_path(destination)
        if source_path == destination_path:
            if not _exists(source_path):
                raise self._refuse(SourceMissing(f"Source does not exist: {source_path}", source_path))
            logger.debug("move onto itself ignored: %s", source_path)
            return destination_path
        self._check_transfer(source_path, destination_path, "move")
        try:
            shutil.move(os.fspath(source_path), os.fspath(destination_path))
        except (OSError, shutil.Error) as exc:
            raise self._wrap_transfer_error(exc, destination_path) from exc
        finally:
            self.catalog.invalidate_for_mutation(source_path, subtree=True)
            self.catalog.invalidate_for_mutation(destination_path, subtree=True)
        logger.info("moved %s -> %s", source_path, destination_path)
        return destination_path

    @staticmethod
    def _wrap_transfer_error(exc: Exception, path: Path) -> Exception:
        if isinstance(exc, OSError):
            return wrap_os_error(exc, path)
        return IOFailure(f"I/O failure on {path}: {exc}", path)

    def _batch_destination_dir(self, destination_dir: Path | str) -> Path:
        target_dir = normalize_path(destination_dir)
        if not _exists(target_dir):
            raise self._refuse(NotFound(f"Destination folder does not exist: {target_dir}", target_dir))
        if not target_dir.is_dir():
            raise self._refuse(NotADirectory(f"Destination is not a folder: {target_dir}", target_dir))
        return target_dir

    def batch_copy(self, sources: Iterable[Path | str], destination_dir: Path | str) -> list[Path]:
        """Copy each source to ``destination_dir/<name>``; stop at the first failure."""
        target_dir = self._batch_destination_dir(destination_dir)
        written: list[Path] = []
        for raw_source in sources:
            source_path = normalize_path(raw_source)
            if not _exists(source_path):
                raise self._refuse(SourceMissing(f"Source does not exist: {source_path}", source_path))
            written.append(self.copy(source_path, target_dir / source_path.name))
        return written

    def batch_move(self, sources: Iterable[Path | str], destination_dir: Path | str) -> list[Path]:
        """Move each source to ``destination_dir/<name>``; stop at the first failure."""
        target_dir = self._batch_destination_dir(destination_dir)
        moved: list[Path] = []
        for raw_source in sources:
            source_path = normalize_path(raw_source)
            if not _exists(source_path):
                raise self._refuse(SourceMissing(f"Source does not exist: {source_path}", source_path))
            moved.append(self.move(source_path, target_dir / source_path.name))
        return moved

    # --- upload seam ---

    def store_upload(self, target_dir: Path | str, files: Iterable[tuple[str, bytes]]) -> int:
        """Write uploaded ``(filename, data)`` pairs into ``target_dir``.

        Same-named files are replaced. Returns the number of files written.
        """
        directory = self._batch_destination_dir(target_dir)
        pending = list(files)
        if not pending:
            raise self._refuse(InvalidArgument("No files to upload", directory))
        written = 0
        try:
            for filename, data in pending:
                name = os.path.basename(filename.replace("\\", "/"))
                if name in ("", ".", ".."):
                    raise self._refuse(InvalidArgument(f"Invalid upload file name: {filename!r}", directory))
                try:
                    (directory / name).write_bytes(data)
                except OSError as exc:
                    raise wrap_os_error(exc, directory / name) from exc
                written += 1
        finally:
            if written:
                self.catalog.invalidate(directory)
        logger.info("stored %d upload(s) in %s", written, directory)
        return written


__all__ = ["MutationOrchestrator"]
