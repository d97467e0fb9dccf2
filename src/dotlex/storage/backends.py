"""Durable key/value storage backends for the persistent bundle cache.

Components:
    Storage - Protocol for string key/value stores (structural typing)
    MemoryStorage - Dict-backed store living as long as the process (session scope)
    JsonFileStorage - Store persisted as one JSON object file (longer-lived)

Both implementations keep keys in insertion order so index-based
enumeration via key(i) is stable between mutations.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Protocol

from dotlex.diagnostics import StorageError, StorageQuotaExceededError

__all__ = ["JsonFileStorage", "MemoryStorage", "Storage"]

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Protocol for durable string key/value stores.

    Mirrors the contract the persistent bundle cache needs: get, set,
    remove, and enumeration of (index -> key) pairs with a count.

    Example:
        >>> class DictStorage:
        ...     def __init__(self) -> None:
        ...         self.data: dict[str, str] = {}
        ...     def get_item(self, key: str) -> str | None:
        ...         return self.data.get(key)
        ...     def set_item(self, key: str, value: str) -> None:
        ...         self.data[key] = value
        ...     def remove_item(self, key: str) -> None:
        ...         self.data.pop(key, None)
        ...     def key(self, index: int) -> str | None:
        ...         keys = list(self.data)
        ...         return keys[index] if 0 <= index < len(keys) else None
        ...     def __len__(self) -> int:
        ...         return len(self.data)
    """

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            StorageError: If the value cannot be persisted (OSError is
                also tolerated by the bundle cache)
        """

    def remove_item(self, key: str) -> None:
        """Remove a value; absent keys are ignored.

        Raises:
            StorageError: If the value cannot be removed
        """

    def key(self, index: int) -> str | None:
        """Return the key at position index, or None when out of range."""

    def __len__(self) -> int:
        """Number of stored keys."""


class MemoryStorage:
    """Process-lifetime storage backed by a dict.

    Attributes:
        quota: Optional limit on total characters (keys + values). Writes
            that would exceed it raise StorageQuotaExceededError and leave
            the store unchanged.
    """

    __slots__ = ("_data", "_lock", "quota")

    def __init__(self, quota: int | None = None) -> None:
        """Initialize empty store.

        Args:
            quota: Maximum characters held (None for unlimited)
        """
        if quota is not None and quota <= 0:
            msg = "quota must be positive"
            raise ValueError(msg)
        self.quota = quota
        self._data: dict[str, str] = {}
        self._lock = RLock()

    def _size_with(self, key: str, value: str) -> int:
        size = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
        return size + len(key) + len(value)

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            if self.quota is not None:
                required = self._size_with(key, value)
                if required > self.quota:
                    raise StorageQuotaExceededError(self.quota, required)
            self._data[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def key(self, index: int) -> str | None:
        with self._lock:
            keys = list(self._data)
            return keys[index] if 0 <= index < len(keys) else None

    def clear(self) -> None:
        """Remove every key."""
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class JsonFileStorage:
    """Storage persisted as a single JSON object file.

    The file is read lazily on first access and rewritten atomically
    (temporary file + os.replace) after every mutation. A missing file is
    an empty store; an unreadable or non-object file is logged and treated
    as empty, and is overwritten by the next write.

    Example:
        >>> storage = JsonFileStorage("~/.cache/myapp/i18n.json")
        >>> storage.set_item("i18n_cache_abc", "{...}")
    """

    __slots__ = ("_data", "_lock", "_path")

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize file-backed store.

        Args:
            path: JSON file location (parent directories are created on write)
        """
        self._path = Path(path).expanduser()
        self._data: dict[str, str] | None = None
        self._lock = RLock()

    @property
    def path(self) -> Path:
        """Backing file location."""
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raw = {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self._path, e)
            raw = {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring storage file %s: top level is not an object", self._path)
            raw = {}
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            msg = f"Cannot write storage file {self._path}: {e}"
            raise StorageError(msg) from e

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._load())
            updated[key] = value
            self._flush(updated)
            self._data = updated

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key not in data:
                return
            updated = {k: v for k, v in data.items() if k != key}
            self._flush(updated)
            self._data = updated

    def key(self, index: int) -> str | None:
        with self._lock:
            keys = list(self._load())
            return keys[index] if 0 <= index < len(keys) else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._load())
