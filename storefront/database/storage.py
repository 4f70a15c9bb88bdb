"""Key-value storage for persisted carts"""

import json
import logging
import os
import tempfile
import threading
from typing import Optional, Protocol

from ..core.config import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a value cannot be written to storage"""


class KeyValueStore(Protocol):
    """String key-value store with local-storage semantics"""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-memory key-value storage"""

    def __init__(self):
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)


class FileStorage:
    """
    Key-value storage kept in a single JSON document on disk.

    Writes replace the document atomically, so a crash mid-write leaves the
    previous contents intact.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error(f"Error reading storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


def build_storage(settings: Settings) -> KeyValueStore:
    """Pick the storage backend from settings"""
    if settings.cart_storage_path:
        logger.info(f"Cart storage: file {settings.cart_storage_path}")
        return FileStorage(settings.cart_storage_path)
    logger.info("Cart storage: in-memory")
    return MemoryStorage()
