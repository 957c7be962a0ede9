"""Key-value store implementations."""

from typing import Dict, Optional
from pathlib import Path
import json
import os
import tempfile
import threading

from ...domain.repositories import KeyValueStore
from ...exceptions import StorageUnavailable
from ...logging_config import get_logger

logger = get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, mainly for tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """Stores all keys in one JSON object file."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise StorageUnavailable(
                message=f"Could not read store file {self.path}",
                details={'path': str(self.path), 'error': str(e)}
            ) from e
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
            raise StorageUnavailable(
                message=f"Store file {self.path} is corrupted",
                error_code="StoreCorrupted",
                details={'path': str(self.path), 'error': str(e)}
            ) from e
        if not isinstance(data, dict):
            raise StorageUnavailable(
                message=f"Store file {self.path} does not hold a JSON object",
                error_code="StoreCorrupted",
                details={'path': str(self.path)}
            )
        return data

    def _load_for_write(self) -> Dict[str, str]:
        """Like _load, but a corrupted file is replaced rather than kept."""
        try:
            return self._load()
        except StorageUnavailable as e:
            if e.error_code != "StoreCorrupted":
                raise
            logger.warning(f"Overwriting corrupted store file {self.path}")
            return {}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".tmp")
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageUnavailable(
                message=f"Could not write store file {self.path}",
                details={'path': str(self.path), 'error': str(e)}
            ) from e

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load_for_write()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load_for_write()
            if key in data:
                del data[key]
                self._save(data)
