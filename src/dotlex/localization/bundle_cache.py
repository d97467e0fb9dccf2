"""Two-tier cache for translation bundles fetched by URL.

Tier 1 is an in-process dict keyed by the exact URL; it is always active
and skips the storage read and JSON decode on repeat access. Tier 2 is a
durable Storage backend (optional) holding one JSON envelope per URL:

    {"url": <original URL>, "timestamp": <POSIX seconds>, "data": <tree>}

stored under ``prefix + hash_url(url)``. The hash is short and only
probabilistically unique, so the envelope keeps the full URL and a lookup
whose stored URL differs is a miss that leaves the other entry in place.

Eviction:
    - Expiry: entries older than ttl are deleted on read and on cleanup
    - Count: after each write, entries beyond max_entries are deleted
      oldest timestamp first
    - Corruption: envelopes that fail to decode are deleted

Storage failures never propagate: a failed write triggers one cleanup pass
and one retry, then persistence of that bundle is abandoned.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock
from typing import TYPE_CHECKING

from dotlex.diagnostics import StorageError
from dotlex.runtime.cache_config import PersistentCacheConfig
from dotlex.storage.registry import get_storage

if TYPE_CHECKING:
    from dotlex.localization.types import TranslationTree
    from dotlex.storage.backends import Storage

__all__ = ["BundleEnvelope", "PersistentBundleCache", "hash_url"]

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Write and remove failures from any Storage, including unwrapped I/O errors
_STORAGE_FAILURES = (StorageError, OSError)


def hash_url(url: str) -> str:
    """Hash a URL to a short base-36 storage key.

    Computes the 32-bit ``h = h * 31 + c`` string hash over UTF-16 code
    units, then encodes its absolute value in base 36. Deterministic across
    processes; not cryptographic.

    Example:
        >>> hash_url("")
        '0'
        >>> hash_url("a")
        '2p'
    """
    encoded = url.encode("utf-16-le")
    value = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    value = abs(value)

    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


@dataclass(frozen=True, slots=True)
class BundleEnvelope:
    """Decoded persistent cache entry."""

    url: str
    timestamp: float
    data: TranslationTree

    @classmethod
    def decode(cls, raw: str) -> BundleEnvelope:
        """Decode a stored envelope.

        Raises:
            ValueError: If raw is not a well-formed envelope
        """
        entry = json.loads(raw)
        match entry:
            case {"url": str(url), "timestamp": int() | float() as timestamp, "data": dict(data)}:
                if isinstance(timestamp, bool):
                    msg = "timestamp must be a number"
                    raise ValueError(msg)
                return cls(url=url, timestamp=float(timestamp), data=data)
            case _:
                msg = "not a bundle cache envelope"
                raise ValueError(msg)

    def encode(self) -> str:
        """Serialize to the stored JSON form."""
        return json.dumps(
            {"url": self.url, "timestamp": self.timestamp, "data": self.data},
            ensure_ascii=False,
        )


class PersistentBundleCache:
    """Memory + durable storage cache for fetched translation bundles.

    Thread Safety:
        All operations are serialized by an RLock.

    Example:
        >>> cache = PersistentBundleCache(
        ...     PersistentCacheConfig(enabled=True), storage=MemoryStorage()
        ... )
        >>> cache.store("https://cdn.example.com/en.json", {"hi": "Hello"})
        >>> cache.lookup("https://cdn.example.com/en.json")
        {'hi': 'Hello'}
    """

    __slots__ = ("_clock", "_config", "_lock", "_memory", "_storage")

    def __init__(
        self,
        config: PersistentCacheConfig | None = None,
        *,
        storage: Storage | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize bundle cache.

        Args:
            config: Persistence settings (default: persistence disabled)
            storage: Explicit backend; when None, the backend registered for
                config.storage is looked up on every access
            clock: Returns current POSIX time in seconds
        """
        self._config = config or PersistentCacheConfig()
        self._storage = storage
        self._clock = clock
        self._memory: dict[str, TranslationTree] = {}
        self._lock = RLock()

    @property
    def config(self) -> PersistentCacheConfig:
        """Persistence settings."""
        return self._config

    @property
    def persistence_enabled(self) -> bool:
        """True when bundles are written to durable storage."""
        return self._config.enabled

    def _backend(self) -> Storage | None:
        if self._storage is not None:
            return self._storage
        return get_storage(self._config.storage)

    def _storage_key(self, url: str) -> str:
        return self._config.prefix + hash_url(url)

    def _prefixed_keys(self, storage: Storage) -> list[str]:
        keys = (storage.key(i) for i in range(len(storage)))
        return [k for k in keys if k is not None and k.startswith(self._config.prefix)]

    @staticmethod
    def _remove(storage: Storage, key: str) -> bool:
        try:
            storage.remove_item(key)
        except _STORAGE_FAILURES as e:
            logger.warning("Cannot remove bundle cache entry %s: %s", key, e)
            return False
        return True

    def lookup(self, url: str) -> TranslationTree | None:
        """Return the cached bundle for url from memory, then durable storage.

        A durable hit is promoted into the memory tier.
        """
        with self._lock:
            data = self._memory.get(url)
            if data is not None:
                return data
            if not self._config.enabled:
                return None
            data = self.read_persistent(url)
            if data is not None:
                self._memory[url] = data
            return data

    def read_persistent(self, url: str) -> TranslationTree | None:
        """Read a bundle from durable storage only.

        Returns:
            The bundle, or None on absence, expiry (entry deleted), hash
            collision (entry kept), corruption (entry deleted) or missing backend
        """
        storage = self._backend()
        if storage is None:
            return None
        key = self._storage_key(url)

        with self._lock:
            raw = storage.get_item(key)
            if raw is None:
                return None
            try:
                envelope = BundleEnvelope.decode(raw)
            except ValueError:
                logger.debug("Deleting corrupt bundle cache entry %s", key)
                self._remove(storage, key)
                return None

            if self._clock() - envelope.timestamp > self._config.ttl:
                logger.debug("Bundle cache entry for %s expired", url)
                self._remove(storage, key)
                return None

            if envelope.url != url:
                logger.debug("Bundle cache key %s holds %s, not %s", key, envelope.url, url)
                return None

            return envelope.data

    def store(self, url: str, data: TranslationTree) -> None:
        """Cache a bundle in memory and, when enabled, in durable storage."""
        with self._lock:
            self._memory[url] = data
            if self._config.enabled:
                self.write_persistent(url, data)

    def write_persistent(self, url: str, data: TranslationTree) -> bool:
        """Persist a bundle envelope stamped with the current time.

        On a storage failure, runs cleanup() once and retries once.

        Returns:
            True if the envelope was written
        """
        storage = self._backend()
        if storage is None:
            return False
        key = self._storage_key(url)
        payload = BundleEnvelope(url=url, timestamp=self._clock(), data=data).encode()

        with self._lock:
            try:
                storage.set_item(key, payload)
            except _STORAGE_FAILURES as first_error:
                logger.debug("Bundle cache write failed (%s); cleaning up and retrying", first_error)
                self.cleanup()
                try:
                    storage.set_item(key, payload)
                except _STORAGE_FAILURES as e:
                    logger.warning("Abandoning persistent cache write for %s: %s", url, e)
                    return False
            else:
                self.cleanup()
            return True

    def cleanup(self) -> int:
        """Delete expired, corrupt and excess entries under the prefix.

        Returns:
            Number of entries deleted
        """
        storage = self._backend()
        if storage is None:
            return 0

        with self._lock:
            now = self._clock()
            removed = 0
            live: list[tuple[float, str]] = []

            for key in self._prefixed_keys(storage):
                raw = storage.get_item(key)
                if raw is None:
                    continue
                try:
                    envelope = BundleEnvelope.decode(raw)
                except ValueError:
                    removed += self._remove(storage, key)
                    continue
                if now - envelope.timestamp > self._config.ttl:
                    removed += self._remove(storage, key)
                    continue
                live.append((envelope.timestamp, key))

            excess = len(live) - self._config.max_entries
            if excess > 0:
                live.sort(key=lambda item: item[0])
                removed += sum(self._remove(storage, key) for _, key in live[:excess])

            if removed:
                logger.debug("Bundle cache cleanup removed %d entries", removed)
            return removed

    def clear(self) -> None:
        """Delete every durable entry under the prefix and empty the memory tier."""
        with self._lock:
            self._memory.clear()
            storage = self._backend()
            if storage is None:
                return
            for key in self._prefixed_keys(storage):
                self._remove(storage, key)

    def persisted_urls(self) -> list[str]:
        """URLs of decodable durable entries, oldest first."""
        storage = self._backend()
        if storage is None:
            return []
        with self._lock:
            envelopes: list[BundleEnvelope] = []
            for key in self._prefixed_keys(storage):
                raw = storage.get_item(key)
                if raw is None:
                    continue
                try:
                    envelopes.append(BundleEnvelope.decode(raw))
                except ValueError:
                    continue
            return [e.url for e in sorted(envelopes, key=lambda e: e.timestamp)]

    def __contains__(self, url: object) -> bool:
        """Check the memory tier for url."""
        with self._lock:
            return url in self._memory
