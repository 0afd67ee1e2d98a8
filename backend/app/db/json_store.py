from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# One advisory lock per collection file, shared by every repository instance.
_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def collection_lock(path: Path) -> threading.RLock:
    key = str(Path(path).resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _locks[key] = lock
        return lock


class JsonCollection:
    """A list of JSON objects stored wholesale in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock = collection_lock(self.path)

    def load_raw(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError:
            log.warning("collection file is not valid JSON, treating as empty: %s", self.path)
            return []
        if not isinstance(data, list):
            log.warning("collection file does not hold a list, treating as empty: %s", self.path)
            return []
        return [x for x in data if isinstance(x, dict)]

    def save_raw(self, items: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(items, ensure_ascii=False, indent=2)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except Exception:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise


class JsonRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, path: Path):
        self._collection = JsonCollection(path)

    @property
    def path(self) -> Path:
        return self._collection.path

    def locked(self) -> threading.RLock:
        return self._collection.lock

    def load_all(self) -> list[ModelT]:
        with self._collection.lock:
            return [self.model.model_validate(x) for x in self._collection.load_raw()]

    def save_all(self, items: list[ModelT]) -> None:
        with self._collection.lock:
            self._collection.save_raw([x.model_dump(by_alias=True) for x in items])
