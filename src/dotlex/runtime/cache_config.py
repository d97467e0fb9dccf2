"""Cache configuration for Localization.

Provides frozen dataclasses for the two caching layers:
    CacheConfig - in-memory translation result cache
    PersistentCacheConfig - two-tier cache for fetched translation bundles

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from dotlex.constants import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_PERSISTENT_MAX_ENTRIES,
    DEFAULT_PERSISTENT_PREFIX,
    DEFAULT_PERSISTENT_TTL,
)
from dotlex.enums import StorageKind

__all__ = ["CacheConfig", "PersistentCacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable configuration for the translation result cache.

    Pass an instance to ``Localization(cache=CacheConfig(...))`` to enable
    caching; ``None`` disables it.

    Attributes:
        size: Maximum cache entries (default: 500). Oldest-inserted entries
            are evicted first.

    Example:
        >>> from dotlex import Localization
        >>> l10n = Localization(cache=CacheConfig(size=100))
        >>> l10n.cache_enabled
        True
    """

    size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If size is not positive
        """
        if self.size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PersistentCacheConfig:
    """Immutable configuration for the persistent bundle cache.

    Attributes:
        enabled: Persist fetched bundles to durable storage (default: False).
            The in-process tier is always active.
        storage: Which named backend to use (default: StorageKind.LOCAL)
        prefix: Key prefix namespacing this cache in the backend
        max_entries: Maximum persisted bundles before oldest-first eviction
        ttl: Maximum entry age in seconds (default: 7 days)
    """

    enabled: bool = False
    storage: StorageKind = StorageKind.LOCAL
    prefix: str = DEFAULT_PERSISTENT_PREFIX
    max_entries: int = DEFAULT_PERSISTENT_MAX_ENTRIES
    ttl: float = DEFAULT_PERSISTENT_TTL

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If storage is not a known kind, prefix is empty,
                or max_entries/ttl is not positive
        """
        object.__setattr__(self, "storage", StorageKind(self.storage))
        if not self.prefix:
            msg = "prefix must be non-empty"
            raise ValueError(msg)
        if self.max_entries <= 0:
            msg = "max_entries must be positive"
            raise ValueError(msg)
        if self.ttl <= 0:
            msg = "ttl must be positive"
            raise ValueError(msg)
