import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

class KeyValueStore(ABC):
    """Byte values under string keys."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> bool:
        ...

class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._values: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._values[key] = value
        return True

class FileKeyValueStore(KeyValueStore):
    """Stores each key as its own file under a base directory."""

    def __init__(self, base_dir: str = "data/preferences"):
        self.base_dir = Path(base_dir)
        self._ensure_storage_dir()

    def _ensure_storage_dir(self) -> None:
        """Ensure the storage directory exists."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def get_file_path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        file_path = self.get_file_path(key)
        if not file_path.exists():
            return None
        try:
            return file_path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading preference file {file_path}: {str(e)}")
            return None

    def set(self, key: str, value: bytes) -> bool:
        """Write value synchronously; False if the write failed."""
        file_path = self.get_file_path(key)
        tmp_path = file_path.with_suffix(".tmp")
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'wb') as f:
                f.write(value)
            tmp_path.replace(file_path)
            return True
        except OSError as e:
            logger.error(f"Error saving preference file {file_path}: {str(e)}")
            return False
