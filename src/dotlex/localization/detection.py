"""Locale detection sources.

A LocaleSource inspects some host signal and proposes a registry locale.
Localization consults its configured source only when auto_detect is on
and only accepts registry members.

Components:
    LocaleSource - Protocol (structural typing)
    EnvironmentLocaleSource - LC_ALL / LANG / LANGUAGE environment variables
    PreferenceLocaleSource - Ordered preference list (e.g. Accept-Language)

Python 3.13+. Uses Babel for identifier parsing.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Protocol

from dotlex.locale_utils import match_locale, primary_language, to_bcp47

__all__ = ["EnvironmentLocaleSource", "LocaleSource", "PreferenceLocaleSource"]

_ENV_VARS: tuple[str, ...] = ("LC_ALL", "LANG", "LANGUAGE")


class LocaleSource(Protocol):
    """Protocol for proposing a locale from the host environment."""

    def detect(self, available: Sequence[str]) -> str | None:
        """Return the best registry locale, or None if nothing matches.

        Args:
            available: Registry locales in priority order
        """


class EnvironmentLocaleSource:
    """Detect the locale from POSIX environment variables.

    The first non-empty of LC_ALL, LANG, LANGUAGE is parsed ("zh_CN.UTF-8"
    -> "zh-CN"); LANGUAGE may hold a colon-separated list, of which the
    first entry is used. Exact registry matches win over primary-language
    matches.

    Example:
        >>> EnvironmentLocaleSource({"LANG": "en_GB.UTF-8"}).detect(["zh-CN", "en-US"])
        'en-US'
    """

    __slots__ = ("_environ",)

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize source.

        Args:
            environ: Environment mapping (default: os.environ, read at detect time)
        """
        self._environ = environ

    def detect(self, available: Sequence[str]) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        for var in _ENV_VARS:
            value = environ.get(var, "").split(":", 1)[0]
            if not value:
                continue
            code = to_bcp47(value)
            if code is None:
                continue
            return match_locale(code, available)
        return None


class PreferenceLocaleSource:
    """Detect the locale from an ordered list of preferred languages.

    Any exact match in the list wins; otherwise the first preference whose
    primary language matches a registry locale decides.

    Example:
        >>> PreferenceLocaleSource(["fr-FR", "en"]).detect(["zh-CN", "en-US"])
        'en-US'
    """

    __slots__ = ("_preferred",)

    def __init__(self, preferred: Sequence[str]) -> None:
        self._preferred = tuple(preferred)

    @classmethod
    def from_accept_language(cls, header: str) -> PreferenceLocaleSource:
        """Build a source from an Accept-Language header, ordered by q-value."""
        weighted: list[tuple[float, int, str]] = []
        for position, part in enumerate(header.split(",")):
            tag, _, params = part.strip().partition(";")
            if not tag or tag == "*":
                continue
            quality = 1.0
            if params.strip().startswith("q="):
                try:
                    quality = float(params.strip()[2:])
                except ValueError:
                    quality = 0.0
            if quality > 0:
                weighted.append((-quality, position, tag))
        return cls([tag for _, _, tag in sorted(weighted)])

    @property
    def preferred(self) -> tuple[str, ...]:
        """Preferences in priority order."""
        return self._preferred

    def detect(self, available: Sequence[str]) -> str | None:
        for candidate in self._preferred:
            if candidate in available:
                return candidate
        for candidate in self._preferred:
            primary = primary_language(candidate)
            for locale in available:
                if locale == primary or locale.startswith(f"{primary}-"):
                    return locale
        return None
