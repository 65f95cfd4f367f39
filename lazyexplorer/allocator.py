"""Collision-free destination names for "paste into the same folder" copies.

Candidates are tried with a plain sequential existence check. Another writer
can claim the returned name before the copy lands; callers surface the resulting
``AlreadyExists`` instead of retrying silently.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from itertools import count
from pathlib import Path

COPY_MARKER = "副本"


def copy_name(stem: str, suffix: str, index: int) -> str:
    """``stem(副本)suffix`` for index 0, ``stem(副本N)suffix`` afterwards."""
    numeral = str(index) if index else ""
    return f"{stem}({COPY_MARKER}{numeral}){suffix}"


def allocate_copy_destination(
    target: Path | str,
    exists: Callable[[Path], bool] = os.path.lexists,
) -> Path:
    """Return the first ``copy_name`` sibling of ``target`` that does not exist."""
    target = Path(target)
    parent = target.parent
    stem, suffix = target.stem, target.suffix
    for index in count():
        candidate = parent / copy_name(stem, suffix, index)
        if not exists(candidate):
            return candidate
    raise AssertionError("unreachable")


__all__ = ["COPY_MARKER", "copy_name", "allocate_copy_destination"]
