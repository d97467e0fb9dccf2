"""Error types raised by dotlex.

Python 3.13+. Zero external dependencies.
"""

from .errors import (
    BundleLoadError,
    BundleNetworkError,
    BundleParseError,
    LocalizationError,
    StorageError,
    StorageQuotaExceededError,
)

__all__ = [
    "BundleLoadError",
    "BundleNetworkError",
    "BundleParseError",
    "LocalizationError",
    "StorageError",
    "StorageQuotaExceededError",
]
