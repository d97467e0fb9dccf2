"""Durable storage for the persistent bundle cache.

Submodules:
    backends - Storage protocol, MemoryStorage, JsonFileStorage
    registry - Process-wide backend registry keyed by StorageKind

Python 3.13+. Zero external dependencies.
"""

from dotlex.storage.backends import JsonFileStorage, MemoryStorage, Storage
from dotlex.storage.registry import get_storage, register_storage, unregister_storage

__all__ = [
    "JsonFileStorage",
    "MemoryStorage",
    "Storage",
    "get_storage",
    "register_storage",
    "unregister_storage",
]
