"""Key-value persistence backends for the workout blob."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from backend.core.config import default_data_dir

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self) -> None: ...


def _key_filename(key: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9_-]+", "-", key.strip()).strip("-")
    if not s:
        raise ValueError(f"Invalid storage key {key!r}")
    return f"{s}.json"


class FileStorage:
    """One file per key under the app data directory."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir or default_data_dir()
        self.root = self.base_dir / "storage"

    def path_for(self, key: str) -> Path:
        return self.root / _key_filename(key)

    def get(self, key: str) -> str | None:
        target = self.path_for(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        target = self.path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(target)

    def clear(self) -> None:
        if not self.root.exists():
            return
        for file in sorted(self.root.glob("*.json")):
            file.unlink()
            logger.debug("Removed stored key file %s", file)


class MemoryStorage:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()
