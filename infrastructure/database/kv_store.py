"""Key-value storage backends for the plant repository.

Values are JSON-compatible (dicts, lists, strings, numbers, booleans).
``put_many`` writes several keys as one unit: either every key is stored or
none is.

Backends:
- ``InMemoryKeyValueStore``: dict guarded by a lock; for tests and
  short-lived processes.
- ``JsonFileKeyValueStore``: the whole store as one JSON document, written
  through a temp file and ``os.replace`` under an advisory lock file. Intended
  for a single writer process.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import threading
import time
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

from app.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal storage surface used by ``PlantRepository``."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def put(self, key: str, value: Any) -> None:
        ...

    def put_many(self, items: Mapping[str, Any]) -> None:
        ...

    def contains(self, key: str) -> bool:
        ...


class InMemoryKeyValueStore:
    """Process-local store; values are copied on the way in and out."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self.put_many({key: value})

    def put_many(self, items: Mapping[str, Any]) -> None:
        staged = copy.deepcopy(dict(items))
        with self._lock:
            self._data.update(staged)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class FileLock:
    """Simple file-lock using a lockfile (cross-platform, advisory).

    Uses atomic creation of a .lock file and retries until timeout.
    """

    def __init__(self, lock_path: str, timeout: float = 5.0, retry: float = 0.05) -> None:
        self.lock_path = lock_path
        self.timeout = float(timeout)
        self.retry = float(retry)
        self._acquired = False

    def acquire(self) -> bool:
        start = time.time()
        while True:
            try:
                # O_EXCL ensures atomic creation; failing if exists
                fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                os.close(fd)
                self._acquired = True
                return True
            except FileExistsError:
                if (time.time() - start) >= self.timeout:
                    return False
                time.sleep(self.retry)

    def release(self) -> None:
        try:
            if self._acquired and os.path.exists(self.lock_path):
                os.unlink(self.lock_path)
        finally:
            self._acquired = False

    def __enter__(self):
        if not self.acquire():
            raise RepositoryError(
                f"Failed to acquire file lock: {self.lock_path}",
                detail={"lock_path": self.lock_path, "timeout": self.timeout},
            )
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()


class JsonFileKeyValueStore:
    """Durable store persisted as a single JSON document."""

    def __init__(self, path: str, *, lock_timeout: float = 5.0) -> None:
        self.path = os.path.abspath(path)
        self.lock_timeout = lock_timeout
        self._lock = threading.Lock()
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._data: Dict[str, Any] = self._load()

    @property
    def _lock_path(self) -> str:
        return self.path + ".lock"

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with FileLock(self._lock_path, timeout=self.lock_timeout):
                with open(self.path, "r", encoding="utf-8") as fh:
                    data = json.load(fh) or {}
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Failed to load JSON store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise RepositoryError(f"JSON store {self.path} does not contain an object")
        logger.debug("Loaded %d keys from %s", len(data), self.path)
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp = self.path + ".tmp"
        try:
            with FileLock(self._lock_path, timeout=self.lock_timeout):
                with open(tmp, "w", encoding="utf-8") as fh:
                    json.dump(data, fh)
                os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise RepositoryError(f"Failed to save JSON store {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self.put_many({key: value})

    def put_many(self, items: Mapping[str, Any]) -> None:
        with self._lock:
            staged = dict(self._data)
            staged.update(copy.deepcopy(dict(items)))
            # In-memory view only changes once the file write succeeded
            self._write(staged)
            self._data = staged

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
