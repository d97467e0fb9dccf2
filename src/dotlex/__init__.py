"""dotlex - dotted-key translation lookup with fallback and bundle caching.

Translations are nested dictionaries addressed by dot-separated keys
("nav.home"). A Localization instance resolves keys against the current
locale, falls back to the default locale, applies a missing-key policy,
interpolates {name} placeholders and caches the results.

Public API:
    Localization - Translation engine (lookup, locale switching, loading)
    CacheConfig - Result cache settings
    PersistentCacheConfig - Durable bundle cache settings
    FallbackBehavior - Missing-key policy
    create_localization - Build the process-wide default instance
    get_localization - Return (lazily creating) the default instance
    t - Translate through the installed instance

Exceptions:
    LocalizationError - Base exception class
    BundleNetworkError - Non-success status or transport failure
    BundleParseError - Bundle body is not a JSON object
    StorageError - Durable storage write/remove failure

Submodules:
    dotlex.runtime - Resolution, interpolation, caching, formatting
    dotlex.localization - Engine, loading, detection, events
    dotlex.storage - Durable storage backends and registry
    dotlex.instance - Process-wide instance slot
"""

from .diagnostics import (
    BundleLoadError,
    BundleNetworkError,
    BundleParseError,
    LocalizationError,
    StorageError,
    StorageQuotaExceededError,
)
from .enums import DateStyle, FallbackBehavior, StorageKind
from .instance import create_localization, get_localization, t
from .localization import FallbackInfo, Localization
from .runtime import CacheConfig, DateFormat, NumberFormat, PersistentCacheConfig

# Version information - Auto-populated from package metadata
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("dotlex")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BundleLoadError",
    "BundleNetworkError",
    "BundleParseError",
    "CacheConfig",
    "DateFormat",
    "DateStyle",
    "FallbackBehavior",
    "FallbackInfo",
    "Localization",
    "LocalizationError",
    "NumberFormat",
    "PersistentCacheConfig",
    "StorageError",
    "StorageKind",
    "StorageQuotaExceededError",
    "__version__",
    "create_localization",
    "get_localization",
    "t",
]
