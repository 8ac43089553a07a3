"""Storage backends."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .protocol import StorageError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class MemoryStorage:
    """Dict-backed storage, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage:
    """
    Storage that keeps each key in ``<root>/<key>.json``.

    Keys are sanitised so owner/repo names cannot escape the root.
    """

    SUFFIX = ".json"

    def __init__(self, root: Path) -> None:
        """
        Initialize storage.

        Args:
            root: Directory holding the value files (created on first write)
        """
        self.root = root

    def ensure_directory(self) -> None:
        """Create the storage directory if it doesn't exist."""
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{_SAFE_KEY.sub('_', key)}{self.SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.ensure_directory()
            # Write then rename so readers never see a half-written file
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot remove {path}: {e}") from e
