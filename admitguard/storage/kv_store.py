"""
Key-value storage for persisted intake state.

The audit log and the rule overrides are stored as JSON documents under
fixed keys. Two backends are provided: an in-memory store for tests and
embedding, and a JSON file store whose writes replace the file atomically.
"""
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from admitguard.core.errors import StorageError
from admitguard.observability.logger import get_logger

logger = get_logger(__name__)

LOGS_KEY = "admitguard_logs"
RULES_KEY = "admitguard_rules"
DEFAULT_STORE_PATH = ".admitguard.json"


class KeyValueStore(ABC):
    """Minimal JSON-document store keyed by string."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the document stored under ``key``, or ``default``."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable document under ``key``."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it existed."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store. Documents are copied through JSON on write."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}") from e

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    Every write rewrites the whole file through a temporary file and
    ``os.replace``, so readers never observe a partially written document.
    """

    def __init__(self, path: str | Path):
        """
        Args:
            path: Location of the JSON file (created on first write)
        """
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Store {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} must contain a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write store {self.path}: {e}") from e

        logger.debug(f"Wrote store {self.path}", extra={"keys": sorted(data)})

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        return True

    def keys(self) -> list[str]:
        return list(self._load())


def open_store(path: str | Path | None = None) -> KeyValueStore:
    """
    Open the file store at ``path``, ``ADMITGUARD_STORE``, or ``.admitguard.json``.

    The special path ``:memory:`` returns an InMemoryStore.
    """
    store_path = path or os.getenv("ADMITGUARD_STORE", DEFAULT_STORE_PATH)
    if str(store_path) == ":memory:":
        return InMemoryStore()
    return JsonFileStore(store_path)
