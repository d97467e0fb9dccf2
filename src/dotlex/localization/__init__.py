"""Multi-locale orchestration, bundle loading and locale detection.

Python 3.13+.
"""

from .bundle_cache import BundleEnvelope, PersistentBundleCache, hash_url
from .detection import EnvironmentLocaleSource, LocaleSource, PreferenceLocaleSource
from .events import LANGUAGE_CHANGED_EVENT, EventDispatcher, LocaleChangedEvent, host_events
from .fetching import BundleFetcher, HttpxBundleFetcher, parse_bundle
from .orchestrator import FallbackInfo, Localization
from .types import (
    LocaleChangeCallback,
    LocaleCode,
    ParamValue,
    TranslationKey,
    TranslationNode,
    TranslationParams,
    TranslationTree,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Engine
    "FallbackInfo",
    "Localization",
    # Loading
    "BundleEnvelope",
    "BundleFetcher",
    "HttpxBundleFetcher",
    "PersistentBundleCache",
    "hash_url",
    "parse_bundle",
    # Detection
    "EnvironmentLocaleSource",
    "LocaleSource",
    "PreferenceLocaleSource",
    # Events
    "LANGUAGE_CHANGED_EVENT",
    "EventDispatcher",
    "LocaleChangedEvent",
    "host_events",
    # Type aliases
    "LocaleChangeCallback",
    "LocaleCode",
    "ParamValue",
    "TranslationKey",
    "TranslationNode",
    "TranslationParams",
    "TranslationTree",
]
