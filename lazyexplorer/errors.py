"""Typed failure taxonomy shared by catalog, mutation, and shortcut code.

Core modules raise these; ``lazyexplorer.service`` turns them into response
values so nothing escapes the operation surface.
"""

from __future__ import annotations

import errno
from pathlib import Path


class ExplorerError(Exception):
    """Base failure carrying a stable ``code`` and the offending path."""

    code = "ERROR"

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None


class NotFound(ExplorerError):
    code = "NOT_FOUND"


class SourceMissing(NotFound):
    code = "SOURCE_MISSING"


class NotADirectory(ExplorerError):
    code = "NOT_A_DIRECTORY"


class AlreadyExists(ExplorerError):
    code = "ALREADY_EXISTS"


class DestinationExists(AlreadyExists):
    code = "DESTINATION_EXISTS"


class PermissionDenied(ExplorerError):
    code = "PERMISSION_DENIED"


class IOFailure(ExplorerError):
    code = "IO_FAILURE"


class InvalidArgument(ExplorerError):
    code = "INVALID_ARGUMENT"


class ClipboardEmpty(ExplorerError):
    code = "CLIPBOARD_EMPTY"


class ShortcutError(ExplorerError):
    """Any failure while turning a ``.lnk`` file into a folder path."""


class InvalidFormat(ShortcutError):
    code = "INVALID_FORMAT"


class TargetNotFound(ShortcutError):
    code = "TARGET_NOT_FOUND"


class TargetMissing(ShortcutError):
    code = "TARGET_MISSING"


class ShortcutNotADirectory(ShortcutError, NotADirectory):
    code = "NOT_A_DIRECTORY"


def wrap_os_error(exc: OSError, path: Path | str | None = None) -> ExplorerError:
    """Map an ``OSError`` onto the taxonomy, keeping the OS message."""
    target = path if path is not None else exc.filename
    detail = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFound(f"Path does not exist: {target} ({detail})", target)
    if isinstance(exc, NotADirectoryError):
        return NotADirectory(f"Not a directory: {target} ({detail})", target)
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return PermissionDenied(f"Permission denied: {target} ({detail})", target)
    if isinstance(exc, FileExistsError):
        return AlreadyExists(f"Path already exists: {target} ({detail})", target)
    return IOFailure(f"I/O failure on {target}: {detail}", target)


__all__ = [
    "ExplorerError",
    "NotFound",
    "SourceMissing",
    "NotADirectory",
    "AlreadyExists",
    "DestinationExists",
    "PermissionDenied",
    "IOFailure",
    "InvalidArgument",
    "ClipboardEmpty",
    "ShortcutError",
    "InvalidFormat",
    "TargetNotFound",
    "TargetMissing",
    "ShortcutNotADirectory",
    "wrap_os_error",
]
