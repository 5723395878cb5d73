"""Key-value storage backends for local preferences and project lists."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from .interface import KeyValueStoreInterface, StorageError
from .utils import sanitize_key


logger = logging.getLogger(__name__)


class FileKeyValueStore(KeyValueStoreInterface):
    """Persistent key-value store with one text file per key.

    Reads and writes are synchronous so that rendering code which cannot
    await still gets a consistent view of the stored values.
    """

    def __init__(self, base_path: str):
        """Initialize the store.

        Args:
            base_path: Directory holding one ``<key>.json`` file per key
        """
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key must not be empty")
        return self.base_path / f"{sanitize_key(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_name(path.name + ".tmp")
        try:
            temp_path.write_text(value, encoding="utf-8")
            os.replace(temp_path, path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to write {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Non-persistent store, used for per-session state and in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not key:
            raise ValueError("Storage key must not be empty")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items)
