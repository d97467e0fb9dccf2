"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the package and by user code
when annotating Localization call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable, Mapping

__all__ = [
    "LocaleChangeCallback",
    "LocaleCode",
    "ParamValue",
    "TranslationKey",
    "TranslationNode",
    "TranslationParams",
    "TranslationTree",
]

type LocaleCode = str
"""BCP-47 locale code (e.g., 'zh-CN', 'en-US')."""

type TranslationKey = str
"""Dotted key path into a translation tree (e.g., 'nav.home')."""

type TranslationNode = str | dict[str, TranslationNode]
"""Either a leaf string or a nested subtree."""

type TranslationTree = dict[str, TranslationNode]
"""Recursively nested mapping whose leaves are translatable strings."""

type ParamValue = str | int | float | bool | None
"""Value substituted into a {name} placeholder."""

type TranslationParams = Mapping[str, ParamValue]
"""Named interpolation parameters."""

type LocaleChangeCallback = Callable[[LocaleCode], None]
"""Listener invoked with the new locale after a successful switch."""
