"""Process-wide registry of named storage backends.

Plays the role of the host environment's storage globals: the persistent
bundle cache looks its backend up here on every access, so an application
can register (or remove) backends at any time. Nothing is registered by
default; an absent backend turns persistence into a no-op.

Python 3.13+.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING

from dotlex.enums import StorageKind

if TYPE_CHECKING:
    from dotlex.storage.backends import Storage

__all__ = ["get_storage", "register_storage", "unregister_storage"]

logger = logging.getLogger(__name__)

_lock = Lock()
_backends: dict[StorageKind, Storage] = {}


def register_storage(kind: StorageKind | str, backend: Storage) -> None:
    """Make backend available under the given storage kind.

    Example:
        >>> register_storage(StorageKind.SESSION, MemoryStorage())
        >>> register_storage("localStorage", JsonFileStorage("i18n-cache.json"))
    """
    storage_kind = StorageKind(kind)
    with _lock:
        _backends[storage_kind] = backend
    logger.debug("Registered %s backend: %s", storage_kind, type(backend).__name__)


def unregister_storage(kind: StorageKind | str) -> Storage | None:
    """Remove and return the backend registered under kind."""
    with _lock:
        return _backends.pop(StorageKind(kind), None)


def get_storage(kind: StorageKind | str) -> Storage | None:
    """Return the backend registered under kind, or None."""
    with _lock:
        return _backends.get(StorageKind(kind))
