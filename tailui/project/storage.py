"""Key-value persistence collaborators.

The serializer autosaves the current project under a single fixed key. Any
object with ``get``/``set``/``delete`` works; two implementations ship here:
an in-memory store (tests, headless use) and a JSON file on disk.
"""

import json
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

from ..builder_logging import LogCategory, get_category_logger
from ..errors import StorageError

logger = get_category_logger(LogCategory.STORAGE)


class KeyValueStore(Protocol):
    """Minimal persistence interface used for autosave."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local key-value store.

    Values are round-tripped through JSON so the stored copy is detached
    from the caller's objects, matching what a real backend would do.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError("Value is not serializable", key=key, original_error=str(e)) from e

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Key-value store kept as one JSON object in a file.

    File Structure:
        {"<key>": <value>, ...}
    """

    def __init__(self, path: Path | str):
        """Initialize the store.

        Args:
            path: JSON file holding every key. Created on first write.
        """
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Failed to read storage file {self.path}", original_error=str(e)
            ) from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(data, indent=2)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(
                f"Failed to write storage file {self.path}", original_error=str(e)
            ) from e

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)
        logger.debug(f"Stored key {key} in {self.path}")

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
