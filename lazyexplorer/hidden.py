"""Name-based hidden-entry policy applied before anything is listed or cached."""

from __future__ import annotations

import re

HIDDEN_NAME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        # lock/temp files (office "~$doc.docx" and friends)
        r"^~",
        r"^desktop\.ini$",
        r"\.sys$",
        r"\.bak$",
        r"^\.",
        r"^Thumbs\.db$",
        r"^ehthumbs\.db$",
        r"^\.DS_Store$",
        r"^\.Spotlight-V100",
        r"^\.Trashes",
        r"^Icon\r$",
        r"^\.AppleDouble$",
        r"^\.LSOverride$",
        r"^\$RECYCLE\.BIN$",
        r"^System Volume Information$",
        r"^bootmgr$",
        r"^BOOTSECT\.BAK$",
    )
)


def is_hidden(name: str) -> bool:
    """Return whether ``name`` is a hidden/system artifact."""
    return any(pattern.search(name) for pattern in HIDDEN_NAME_PATTERNS)


__all__ = ["HIDDEN_NAME_PATTERNS", "is_hidden"]
