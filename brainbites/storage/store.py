from __future__ import annotations

"""Durable key/value stores for quiz state.

Values are opaque strings (the quiz core stores JSON text). ``JsonFileStore``
keeps every key in one JSON object on disk and rewrites the whole file on
each write, via a temporary file so readers never see a half-written state.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..quiz.errors import PersistenceFailure


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store; useful for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Single-file JSON object store: ``{key: value, ...}``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceFailure(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Store {self.path} does not hold a JSON object")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceFailure(f"Cannot write store {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


def make_store(cfg: Dict) -> KeyValueStore:
    """Build the store named by the ``storage`` config section."""
    storage = cfg.get("storage", {})
    if storage.get("backend", "json") == "memory":
        return MemoryStore()
    return JsonFileStore(storage.get("path", "./brainbites_storage.json"))
