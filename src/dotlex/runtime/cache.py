"""Thread-safe bounded cache for translation results.

Provides transparent caching of translate() calls with wholesale
invalidation on locale switches and translation loads.

Architecture:
    - Thread-safe using threading.RLock (reentrant lock)
    - FIFO eviction via OrderedDict (oldest inserted entry removed first)
    - Hits do not promote entries; existing keys are never re-inserted
    - Immutable cache keys (tuples of hashable types)

Cache Key Structure:
    (locale_code, key, params_tuple)
    - locale_code: str
    - key: str
    - params_tuple: tuple[tuple[str, ParamValue], ...] (sorted by name)

Python 3.13+.
"""

from __future__ import annotations

from collections import OrderedDict
from threading import RLock
from typing import TYPE_CHECKING

from dotlex.constants import DEFAULT_CACHE_SIZE

if TYPE_CHECKING:
    from dotlex.localization.types import ParamValue, TranslationParams

__all__ = ["TranslationCache"]

type _CacheKey = tuple[str, str, tuple[tuple[str, ParamValue], ...]]


class TranslationCache:
    """Bounded (locale, key, params) -> string cache.

    Transparent to caller - returns None on cache miss.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses", "_unhashable_skips")

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize translation cache.

        Args:
            maxsize: Maximum number of entries (default: 500)
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._cache: OrderedDict[_CacheKey, str] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0
        self._unhashable_skips = 0

    def get(
        self,
        locale_code: str,
        key: str,
        params: TranslationParams | None,
    ) -> str | None:
        """Get cached result if exists.

        Returns:
            Cached translation or None
        """
        cache_key = self._make_key(locale_code, key, params)

        with self._lock:
            if cache_key is None:
                self._unhashable_skips += 1
                self._misses += 1
                return None
            result = self._cache.get(cache_key)
            if result is None:
                self._misses += 1
            else:
                self._hits += 1
            return result

    def put(
        self,
        locale_code: str,
        key: str,
        params: TranslationParams | None,
        result: str,
    ) -> None:
        """Store result if the key is absent, evicting the oldest entry when full."""
        cache_key = self._make_key(locale_code, key, params)

        with self._lock:
            if cache_key is None:
                self._unhashable_skips += 1
                return
            if cache_key in self._cache:
                return
            if len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)
            self._cache[cache_key] = result

    def clear(self) -> None:
        """Clear all cached entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0
            self._unhashable_skips = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached entries
            - maxsize (int): Maximum cache capacity
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
            - unhashable_skips (int): Operations skipped due to unhashable params
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0

            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "unhashable_skips": self._unhashable_skips,
            }

    @staticmethod
    def _make_key(
        locale_code: str,
        key: str,
        params: TranslationParams | None,
    ) -> _CacheKey | None:
        """Create immutable cache key.

        Parameters are sorted by name so {"a": 1, "b": 2} and {"b": 2, "a": 1}
        share one entry. An empty map and None share one entry as well.

        Returns:
            Cache key tuple, or None if a parameter value is unhashable
        """
        if not params:
            return (locale_code, key, ())
        try:
            params_tuple = tuple(sorted(params.items()))
            hash(params_tuple)
        except TypeError:
            return None
        return (locale_code, key, params_tuple)

    def __len__(self) -> int:
        """Get current cache size."""
        with self._lock:
            return len(self._cache)

    def __contains__(self, item: tuple[str, str, TranslationParams | None]) -> bool:
        """Check whether (locale_code, key, params) is cached without touching metrics."""
        cache_key = self._make_key(*item)
        with self._lock:
            return cache_key is not None and cache_key in self._cache

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def hits(self) -> int:
        """Number of cache hits."""
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of cache misses."""
        with self._lock:
            return self._misses
