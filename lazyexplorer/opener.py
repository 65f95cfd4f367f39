"""Hand a file to the operating system's default application.

Returns an error message string instead of raising so callers can fall back
or report without unwinding.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def opener_command(target: Path, platform: str = sys.platform) -> list[str] | None:
    """Command used to open ``target``; ``None`` means ``os.startfile``."""
    if platform.startswith("win"):
        return None
    if platform == "darwin":
        return ["open", str(target)]
    return ["xdg-open", str(target)]


def open_path(target: Path | str) -> str | None:
    target = Path(target)
    if not os.path.lexists(target):
        return f"Cannot open: {target} does not exist."
    cmd = opener_command(target)
    try:
        if cmd is None:
            os.startfile(str(target))  # type: ignore[attr-defined]
        else:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
    except Exception as exc:
        return f"Failed to open {target}: {exc}"
    return None


__all__ = ["opener_command", "open_path"]
