"""JSON persistence for the Favorites and Cooked lists.

Each list is stored as its own file holding a single JSON object that maps
meal ID to meal name, e.g. ``{"52772": "Teriyaki Chicken Casserole"}``.
Full meal details are always fetched live from the API.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .config import CONFIG_DIR
from .models import ListName, clean_text

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Exception raised when a list file cannot be read or written."""

    pass


def sanitize_meal_map(raw: dict[Any, Any]) -> dict[str, str]:
    """
    Clean a loaded ID -> name mapping.

    Keys and values are trimmed, missing or nested (object/array) names
    become "", and entries whose ID is blank after trimming are dropped. When
    two raw keys trim to the same ID the first one wins. Order is preserved.

    Args:
        raw: Mapping as decoded from disk

    Returns:
        Sanitized mapping, safe to put in memory
    """
    sanitized: dict[str, str] = {}
    for key, value in raw.items():
        meal_id = clean_text(key)
        if not meal_id or meal_id in sanitized:
            continue
        sanitized[meal_id] = "" if isinstance(value, (dict, list)) else clean_text(value)
    return sanitized


def load_meal_map(path: Path) -> dict[str, str]:
    """
    Load and sanitize a meal map from disk.

    Args:
        path: JSON file to read

    Returns:
        Sanitized ID -> name mapping ({} if the file does not exist)

    Raises:
        StorageError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageError(f"Failed to load {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        kind = type(data).__name__
        raise StorageError(f"Failed to load {path}: expected a JSON object, got {kind}")

    return sanitize_meal_map(data)


def save_meal_map(path: Path, meal_map: dict[str, str]) -> None:
    """
    Replace a meal map file on disk.

    The data is written to a temporary file next to the target and then moved
    over it, so the previous content survives a failed write.

    Raises:
        StorageError: If the file cannot be written
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            json.dump(meal_map, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(f"Failed to save {path}: {e}") from e

    logger.debug("Saved %d entries to %s", len(meal_map), path)


class ListPersistence(Protocol):
    """Where a ListStore reads and writes its lists."""

    def load(self, list_name: ListName) -> dict[str, str]: ...

    def save(self, list_name: ListName, meal_map: dict[str, str]) -> None: ...


class MealStorage:
    """File-backed list persistence, one JSON file per list."""

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = Path(data_dir) if data_dir is not None else CONFIG_DIR

    def path_for(self, list_name: ListName) -> Path:
        """Get the file holding a list."""
        return self.data_dir / f"{ListName(list_name).value}.json"

    @property
    def favorites_file(self) -> Path:
        return self.path_for(ListName.FAVORITES)

    @property
    def cooked_file(self) -> Path:
        return self.path_for(ListName.COOKED)

    def load(self, list_name: ListName) -> dict[str, str]:
        return load_meal_map(self.path_for(list_name))

    def save(self, list_name: ListName, meal_map: dict[str, str]) -> None:
        save_meal_map(self.path_for(list_name), meal_map)
