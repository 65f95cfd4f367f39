"""Persistent JSON config helpers.

Stores the last browsed directory, the preferred list sort, and the listing
cache bound. All access is defensive: malformed or missing config falls back
safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .catalog import CATALOG_CACHE_MAX, SortDirection, SortField

APP_NAME = "lazyexplorer"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_last_path() -> Path | None:
    """Return the last browsed directory when it is still a directory."""
    value = load_config().get("last_path")
    if not isinstance(value, str) or not value.strip():
        return None
    path = Path(value)
    return path if path.is_dir() else None


def save_last_path(path: Path) -> None:
    config = load_config()
    config["last_path"] = str(path)
    save_config(config)


def load_sort_preference() -> tuple[SortField | None, SortDirection]:
    """Return ``(field, direction)``; unknown values fall back to baseline order."""
    config = load_config()
    try:
        field = SortField(config.get("sort_field"))
    except ValueError:
        field = None
    try:
        direction = SortDirection(config.get("sort_direction"))
    except ValueError:
        direction = SortDirection.ASC
    return field, direction


def save_sort_preference(field: SortField | None, direction: SortDirection) -> None:
    config = load_config()
    if field is None:
        config.pop("sort_field", None)
        config.pop("sort_direction", None)
    else:
        config["sort_field"] = SortField(field).value
        config["sort_direction"] = SortDirection(direction).value
    save_config(config)


def load_cache_max_entries() -> int:
    """Listing cache bound; booleans and non-positive values are rejected."""
    value = load_config().get("cache_max_entries")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return CATALOG_CACHE_MAX
    return value
