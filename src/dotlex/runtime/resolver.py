"""Dotted key path resolution against translation trees.

Keys are split strictly on "." (no escaping) and the parsed segment tuples
are memoized per full key. The memo is bounded: once it holds
MAX_KEY_PATH_CACHE_SIZE keys, further keys are split on demand and never
inserted, so no eviction policy is needed.

Thread Safety:
    The segment memo is protected by an RLock. Tree walks are read-only.

Python 3.13+.
"""

from __future__ import annotations

from threading import RLock
from typing import TYPE_CHECKING

from dotlex.constants import MAX_KEY_PATH_CACHE_SIZE

if TYPE_CHECKING:
    from dotlex.localization.types import TranslationKey, TranslationNode, TranslationTree

__all__ = ["KeyResolver"]


class KeyResolver:
    """Resolve dotted keys to leaf strings.

    Example:
        >>> resolver = KeyResolver()
        >>> resolver.resolve({"nav": {"home": "Home"}}, "nav.home")
        'Home'
        >>> resolver.resolve({"nav": {"home": "Home"}}, "nav") is None
        True
    """

    __slots__ = ("_lock", "_max_cached", "_segments")

    def __init__(self, max_cached: int = MAX_KEY_PATH_CACHE_SIZE) -> None:
        """Initialize resolver.

        Args:
            max_cached: Maximum number of distinct keys whose segments are memoized
        """
        if max_cached < 0:
            msg = "max_cached must be non-negative"
            raise ValueError(msg)
        self._segments: dict[TranslationKey, tuple[str, ...]] = {}
        self._max_cached = max_cached
        self._lock = RLock()

    def parse_key(self, key: TranslationKey) -> tuple[str, ...]:
        """Split a dotted key into its segments, memoizing when under the bound."""
        with self._lock:
            segments = self._segments.get(key)
            if segments is None:
                segments = tuple(key.split("."))
                if len(self._segments) < self._max_cached:
                    self._segments[key] = segments
            return segments

    def resolve(self, tree: TranslationTree, key: TranslationKey) -> str | None:
        """Walk the tree along the key's segments.

        A walk that ends on a subtree is a miss: partial objects are never
        coerced to strings.

        Args:
            tree: Translation tree to search
            key: Dotted key path

        Returns:
            The leaf string, or None if not found
        """
        node: TranslationNode | None = tree
        for segment in self.parse_key(key):
            match node:
                case dict():
                    node = node.get(segment)
                case _:
                    return None
            if node is None:
                return None
        return node if isinstance(node, str) else None

    @property
    def cached_keys(self) -> int:
        """Number of keys with memoized segments."""
        with self._lock:
            return len(self._segments)
