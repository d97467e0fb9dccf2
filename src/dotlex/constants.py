"""Shared constants for dotlex.

Centralized configuration constants used across the runtime, storage and
localization packages. Placing constants here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Merge safety: Keys that are never stored in a translation tree
- Cache limits: Memory bounds for the caching subsystems
- Persistent cache defaults: Bundle cache configuration defaults
- Time units: Thresholds for relative time formatting
- Escaping: HTML entity table for interpolated values

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Merge safety
    "DANGEROUS_KEYS",
    # Cache limits
    "MAX_KEY_PATH_CACHE_SIZE",
    "DEFAULT_CACHE_SIZE",
    # Persistent cache defaults
    "DEFAULT_PERSISTENT_PREFIX",
    "DEFAULT_PERSISTENT_MAX_ENTRIES",
    "DEFAULT_PERSISTENT_TTL",
    # Locale defaults
    "DEFAULT_LOCALE",
    "DEFAULT_LOCALES",
    # Time units
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "MONTH",
    "YEAR",
    # Escaping
    "HTML_ESCAPE_TABLE",
]

# ============================================================================
# MERGE SAFETY
# ============================================================================

# Structural key names dropped during merge. Translation payloads come from
# the network and persistent storage; these names are never valid message keys.
DANGEROUS_KEYS: frozenset[str] = frozenset({"__proto__", "constructor", "prototype"})

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum number of memoized key paths. Keys beyond this bound are still
# resolved, just split on every call.
MAX_KEY_PATH_CACHE_SIZE: int = 1000

# Default maximum entries in the translation result cache.
DEFAULT_CACHE_SIZE: int = 500

# ============================================================================
# PERSISTENT CACHE DEFAULTS
# ============================================================================

DEFAULT_PERSISTENT_PREFIX: str = "i18n_cache_"
DEFAULT_PERSISTENT_MAX_ENTRIES: int = 10

# Seven days, in seconds.
DEFAULT_PERSISTENT_TTL: float = 7 * 24 * 60 * 60.0

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

DEFAULT_LOCALE: str = "zh-CN"
DEFAULT_LOCALES: tuple[str, ...] = ("zh-CN", "en-US")

# ============================================================================
# TIME UNITS (seconds)
# ============================================================================

MINUTE: int = 60
HOUR: int = 60 * MINUTE
DAY: int = 24 * HOUR
WEEK: int = 7 * DAY
MONTH: int = 30 * DAY
YEAR: int = 365 * DAY

# ============================================================================
# ESCAPING
# ============================================================================

# str.translate() table for the five HTML-sensitive characters.
HTML_ESCAPE_TABLE: dict[int, str] = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})
