"""Lookup runtime: key resolution, interpolation, caching and formatting.

Depends only on dotlex.constants and dotlex.enums; the localization
package composes these pieces into the Localization engine.

Python 3.13+.
"""

from .cache import TranslationCache
from .cache_config import CacheConfig, PersistentCacheConfig
from .formatting import (
    DateFormat,
    NumberFormat,
    format_currency,
    format_date,
    format_number,
    format_relative,
)
from .interpolation import escape_html, interpolate
from .merge import safe_merge
from .resolver import KeyResolver
from .rwlock import RWLock

__all__ = [
    "CacheConfig",
    "DateFormat",
    "KeyResolver",
    "NumberFormat",
    "PersistentCacheConfig",
    "RWLock",
    "TranslationCache",
    "escape_html",
    "format_currency",
    "format_date",
    "format_number",
    "format_relative",
    "interpolate",
    "safe_merge",
]
