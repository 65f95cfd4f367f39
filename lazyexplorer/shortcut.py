"""Best-effort folder-target extraction from Windows ``.lnk`` files.

This is not a shell-link decoder. It looks for an embedded absolute
drive-letter path with an ordered chain of pure strategies (known offsets
first, then a whole-buffer scan) and fails with a typed error rather than
returning a doubtful path. On disk the target must exist and be a folder.

Byte layout relied on:
- 76-byte header starting with 0x4C
- u32 link flags at 0x14; bit 0 means a target ID list follows the header
- u16 ID list size at 0x4C, list body right after it
"""

from __future__ import annotations

import logging
import os
import re
import struct
from collections.abc import Callable
from pathlib import Path

from .catalog.types import SHORTCUT_SUFFIX
from .errors import (
    InvalidFormat,
    NotFound,
    ShortcutNotADirectory,
    TargetMissing,
    TargetNotFound,
    wrap_os_error,
)

logger = logging.getLogger(__name__)

HEADER_SIZE = 0x4C
MAGIC_BYTE = 0x4C
FLAGS_OFFSET = 0x14
HAS_TARGET_ID_LIST = 0x01
ID_LIST_SIZE_OFFSET = HEADER_SIZE
ID_LIST_SIZE_BYTES = 2

# Offsets where real-world shortcuts were seen to carry the UTF-16 target path.
COMMON_TARGET_OFFSETS = (0x4C, 0x9C, 0xB4, 0x11A, 0x14E, 0x18C)

MAX_CANDIDATE_BYTES = 500
MAX_SCANNED_PATH_CHARS = 200

_ILLEGAL = r'<>:"|?*\x00-\x1f'
_DRIVE_PATH_RE = re.compile(r"^[A-Za-z]:\\")
_CANDIDATE_RE = re.compile(rf"[A-Za-z]:[\\/][^{_ILLEGAL}]*")
_SCAN_RE = re.compile(rf"(?<![A-Za-z0-9])[A-Za-z]:[\\/][^{_ILLEGAL}]{{0,{MAX_SCANNED_PATH_CHARS}}}")
_REPEATED_SEPARATORS_RE = re.compile(r"\\{2,}")
_NON_ASCII = "\x01"


def is_shortcut_name(name: str) -> bool:
    return name.lower().endswith(SHORTCUT_SUFFIX)


def target_search_offset(data: bytes) -> int:
    """Offset just past the header, or past the target ID list when flagged."""
    (flags,) = struct.unpack_from("<I", data, FLAGS_OFFSET)
    if not flags & HAS_TARGET_ID_LIST:
        return HEADER_SIZE
    if len(data) < ID_LIST_SIZE_OFFSET + ID_LIST_SIZE_BYTES:
        return HEADER_SIZE
    (id_list_size,) = struct.unpack_from("<H", data, ID_LIST_SIZE_OFFSET)
    return ID_LIST_SIZE_OFFSET + ID_LIST_SIZE_BYTES + id_list_size


def read_utf16z(data: bytes, offset: int, max_bytes: int = MAX_CANDIDATE_BYTES) -> str | None:
    """Decode a NUL-terminated UTF-16LE string at ``offset`` (bounded)."""
    if offset < 0 or offset >= len(data):
        return None
    chunk = data[offset : offset + max_bytes]
    chunk = chunk[: len(chunk) - len(chunk) % 2]
    for idx in range(0, len(chunk), 2):
        if chunk[idx] == 0 and chunk[idx + 1] == 0:
            chunk = chunk[:idx]
            break
    if not chunk:
        return None
    try:
        return chunk.decode("utf-16-le")
    except UnicodeDecodeError:
        return None


def candidate_offset_target(data: bytes) -> str | None:
    """Strategy 1: decode strings at the computed offset, then known offsets."""
    offsets = [target_search_offset(data)]
    offsets.extend(offset for offset in COMMON_TARGET_OFFSETS if offset not in offsets)
    for offset in offsets:
        text = read_utf16z(data, offset)
        if text is not None and _CANDIDATE_RE.fullmatch(text):
            logger.debug("shortcut target candidate at offset %#x", offset)
            return text
    return None


def _printable_runs(data: bytes, alignment: int) -> str:
    # printable ASCII is kept; other non-ASCII units become "\x01" so a match
    # cut short by e.g. CJK characters can be told apart from a terminator
    chars: list[str] = []
    for idx in range(alignment, len(data) - 1, 2):
        code = data[idx] | (data[idx + 1] << 8)
        if 0x20 <= code <= 0x7E:
            chars.append(chr(code))
        elif code > 0x7E:
            chars.append(_NON_ASCII)
        else:
            chars.append("\x00")
    return "".join(chars)


def buffer_scan_target(data: bytes) -> str | None:
    """Strategy 2: scan every UTF-16LE code unit for a drive-letter path.

    Only runs that end at a terminator count; a path cut short by non-ASCII
    text, an illegal character, or the length cap is skipped, never returned
    truncated.
    """
    for alignment in (0, 1):
        text = _printable_runs(data, alignment)
        for match in _SCAN_RE.finditer(text):
            if text[match.end() : match.end() + 1] not in ("", "\x00"):
                continue
            candidate = match.group(0).rstrip(" ")
            logger.debug("shortcut target found by buffer scan (alignment %d)", alignment)
            return candidate
    return None


SHORTCUT_TARGET_STRATEGIES: tuple[Callable[[bytes], str | None], ...] = (
    candidate_offset_target,
    buffer_scan_target,
)


def normalize_target(path: str) -> str:
    """Native separators, no doubled separators, no trailing separator."""
    normalized = _REPEATED_SEPARATORS_RE.sub("\\\\", path.replace("/", "\\"))
    stripped = normalized.rstrip("\\")
    if re.fullmatch(r"[A-Za-z]:", stripped):
        return stripped + "\\"
    return stripped


def locate_shortcut_target(data: bytes) -> str:
    """Extract and validate a drive-letter target path from shortcut bytes.

    Raises ``InvalidFormat`` for a bad header and ``TargetNotFound`` when no
    strategy yields a valid absolute path.
    """
    if len(data) < HEADER_SIZE or data[0] != MAGIC_BYTE:
        raise InvalidFormat("Not a shortcut file: missing 0x4C header")

    for strategy in SHORTCUT_TARGET_STRATEGIES:
        found = strategy(data)
        if found is None:
            continue
        target = normalize_target(found)
        if _DRIVE_PATH_RE.match(target):
            return target
    raise TargetNotFound("No absolute target path found in shortcut")


class ShortcutResolver:
    """Resolve ``.lnk`` files to existing folder paths.

    ``exists`` and ``is_dir`` check the resolved target; they default to the
    ``os.path`` functions and are injectable for hosts where the Windows
    target cannot exist.
    """

    def __init__(
        self,
        exists: Callable[[str], bool] = os.path.exists,
        is_dir: Callable[[str], bool] = os.path.isdir,
    ) -> None:
        self._exists = exists
        self._is_dir = is_dir

    def resolve(self, shortcut_path: Path | str) -> str:
        shortcut_path = Path(shortcut_path)
        if not is_shortcut_name(shortcut_path.name):
            raise InvalidFormat(f"Not a shortcut file: {shortcut_path}", shortcut_path)
        try:
            data = shortcut_path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(f"Shortcut does not exist: {shortcut_path}", shortcut_path) from exc
        except OSError as exc:
            raise wrap_os_error(exc, shortcut_path) from exc

        target = locate_shortcut_target(data)
        if not self._exists(target):
            repaired = normalize_target(_REPEATED_SEPARATORS_RE.sub("\\\\", target))
            if repaired == target or not self._exists(repaired):
                raise TargetMissing(f"Shortcut target does not exist: {target}", shortcut_path)
            target = repaired
        if not self._is_dir(target):
            raise ShortcutNotADirectory(f"Shortcut target is not a folder: {target}", shortcut_path)
        logger.info("resolved shortcut %s -> %s", shortcut_path, target)
        return target


__all__ = [
    "HEADER_SIZE",
    "MAGIC_BYTE",
    "COMMON_TARGET_OFFSETS",
    "SHORTCUT_TARGET_STRATEGIES",
    "is_shortcut_name",
    "target_search_offset",
    "read_utf16z",
    "candidate_offset_target",
    "buffer_scan_target",
    "normalize_target",
    "locate_shortcut_target",
    "ShortcutResolver",
]
