# app/client/storage.py
"""
On-device key/value storage for the client.

Everything lives in a single JSON object on disk; each key maps to a
serialized string value. Writes replace the whole file, so concurrent writers
(two processes sharing the file) race with last-write-wins.
"""
import json
import logging
import os
from pathlib import Path

from app.config import settings

logger = logging.getLogger(__name__)

TODOS_KEY = "todos"  # Fixed key holding the serialized todo array


class LocalStorage:
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path or settings.local_storage_path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning("[storage] unreadable %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    # -------- todo list helpers --------
    def load_todos(self) -> list[dict]:
        """Stored todo array; anything missing or not a JSON array loads as []."""
        raw = self.get_item(TODOS_KEY)
        if raw is None:
            return []
        try:
            todos = json.loads(raw)
        except ValueError:
            logger.warning("[storage] discarding malformed todo list")
            return []
        return todos if isinstance(todos, list) else []

    def save_todos(self, todos: list[dict]) -> None:
        """Persist the whole list in one write."""
        self.set_item(TODOS_KEY, json.dumps(todos, ensure_ascii=False))
