"""
Persistence of the active wallet index.

Only one integer is stored. A missing or unreadable value reads as None and
callers fall back to the first account.
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

ACTIVE_INDEX_KEY = "active_wallet_index"


class IndexStore(ABC):
    """Key-value slot holding the active wallet index"""

    @abstractmethod
    def get(self) -> int | None:
        """Return the stored index, or None if nothing is stored"""

    @abstractmethod
    def set(self, index: int) -> None:
        """Store the index"""

    @abstractmethod
    def delete(self) -> None:
        """Forget the stored index"""


class MemoryIndexStore(IndexStore):
    def __init__(self, index: int | None = None):
        self._index = index

    def get(self) -> int | None:
        return self._index

    def set(self, index: int) -> None:
        self._index = index

    def delete(self) -> None:
        self._index = None


class JsonFileIndexStore(IndexStore):
    """Stores the index as {"active_wallet_index": n} in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> int | None:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable wallet state file {self.path}: {e}")
            return None

        value = data.get(ACTIVE_INDEX_KEY) if isinstance(data, dict) else None
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def set(self, index: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps({ACTIVE_INDEX_KEY: index}), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
