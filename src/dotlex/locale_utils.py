"""Locale code utilities on top of Babel's identifier parser.

Translation tables are keyed by BCP-47 style codes ("zh-CN"), while host
environments report POSIX identifiers ("zh_CN.UTF-8"). This module converts
between the two and implements the primary-language matching used by
locale detection.

Python 3.13+. Uses Babel for locale identifier parsing.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable

from babel.core import parse_locale

__all__ = [
    "match_locale",
    "normalize_locale",
    "primary_language",
    "to_bcp47",
]

# Pseudo-locales reported by C runtimes when no real locale is configured.
_PSEUDO_LOCALES = frozenset({"C", "POSIX"})


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=256)
def to_bcp47(identifier: str) -> str | None:
    """Convert a host locale identifier to a hyphenated BCP-47 code.

    Encoding suffixes and modifiers are dropped; language is lowercased and
    territory uppercased by Babel's parser.

    Args:
        identifier: POSIX or BCP-47 identifier (e.g., "zh_CN.UTF-8", "en-us")

    Returns:
        Normalized code (e.g., "zh-CN"), or None for empty, pseudo
        ("C", "POSIX") or unparseable identifiers

    Example:
        >>> to_bcp47("zh_CN.UTF-8")
        'zh-CN'
        >>> to_bcp47("C") is None
        True
    """
    stripped = identifier.strip()
    if not stripped or stripped.split(".")[0] in _PSEUDO_LOCALES:
        return None
    try:
        parts = parse_locale(normalize_locale(stripped))
    except ValueError:
        return None
    language, territory, script = parts[0], parts[1], parts[2]
    return "-".join(part for part in (language, script, territory) if part)


def primary_language(locale_code: str) -> str:
    """Return the lowercase primary language subtag.

    Example:
        >>> primary_language("zh-CN")
        'zh'
        >>> primary_language("en_GB")
        'en'
    """
    return normalize_locale(locale_code).split("_", 1)[0].lower()


def match_locale(candidate: str, available: Iterable[str]) -> str | None:
    """Find the registry locale that best serves a candidate code.

    Exact matches win; otherwise the first available locale sharing the
    candidate's primary language is returned ("zh" and "zh-TW" both match
    "zh-CN").

    Args:
        candidate: Requested locale code
        available: Registry locales in priority order

    Returns:
        Matching registry locale, or None
    """
    locales = list(available)
    if candidate in locales:
        return candidate
    primary = primary_language(candidate)
    for locale in locales:
        if locale == primary or locale.startswith(f"{primary}-"):
            return locale
    return None
