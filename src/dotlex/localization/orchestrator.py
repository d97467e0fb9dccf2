"""Translation engine: locale registry, lookup with fallback, and loading.

Localization owns one locale registry, one translation table, one result
cache and one listener set; nothing is shared between instances except the
durable storage backend and the host event dispatcher.

Lookup order for translate():
    1. Result cache (when enabled), keyed by (current locale, key, params)
    2. Current locale's tree
    3. Default locale's tree, when it differs from the current locale
    4. Missing-key policy (FallbackBehavior)

Found values are interpolated and cached; policy results are not.

Loading order for load_translations_async():
    in-process bundle map -> durable bundle cache (when enabled) -> fetcher

Thread Safety:
    An RWLock guards the registry, the table and the current locale.
    Listeners, the fallback observer and the host broadcast run after the
    lock is released, so they may call back into the instance.

Python 3.13+.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from itertools import count
from typing import TYPE_CHECKING, Any

from dotlex.constants import DEFAULT_LOCALE, DEFAULT_LOCALES
from dotlex.enums import DateStyle, FallbackBehavior, StorageKind
from dotlex.localization.bundle_cache import PersistentBundleCache
from dotlex.localization.detection import EnvironmentLocaleSource, LocaleSource
from dotlex.localization.events import (
    LANGUAGE_CHANGED_EVENT,
    EventDispatcher,
    LocaleChangedEvent,
    host_events,
)
from dotlex.localization.fetching import BundleFetcher, HttpxBundleFetcher
from dotlex.runtime.cache import TranslationCache
from dotlex.runtime.cache_config import CacheConfig, PersistentCacheConfig
from dotlex.runtime.formatting import (
    DateFormat,
    NumberFormat,
    format_currency,
    format_date,
    format_number,
    format_relative,
)
from dotlex.runtime.interpolation import interpolate
from dotlex.runtime.merge import safe_merge
from dotlex.runtime.resolver import KeyResolver
from dotlex.runtime.rwlock import RWLock

if TYPE_CHECKING:
    from decimal import Decimal

    from dotlex.localization.types import (
        LocaleChangeCallback,
        LocaleCode,
        TranslationKey,
        TranslationParams,
        TranslationTree,
    )
    from dotlex.runtime.formatting import Timestamp
    from dotlex.storage.backends import Storage

__all__ = ["FallbackInfo", "Localization"]

logger = logging.getLogger(__name__)

# camelCase configuration names accepted by Localization.from_options()
_OPTION_NAMES = frozenset({
    "defaultLocale",
    "locales",
    "translations",
    "dateFormat",
    "numberFormat",
    "fallbackBehavior",
    "escapeHtml",
    "enableCache",
    "cacheMaxSize",
    "autoDetect",
    "persistentCache",
})


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a default-locale fallback.

    Provided to the on_fallback callback when translate() answers a key
    from the default locale because the current locale lacks it.

    Attributes:
        requested_locale: The current locale at lookup time
        resolved_locale: The default locale that contained the key
        key: The translation key that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.key}: {info.requested_locale} -> {info.resolved_locale}")
        >>> l10n = Localization(on_fallback=log_fallback)
    """

    requested_locale: LocaleCode
    resolved_locale: LocaleCode
    key: TranslationKey


class Localization:
    """Translation lookup, locale switching and formatting for one application.

    Example:
        >>> l10n = Localization(
        ...     default_locale="zh-CN",
        ...     locales=["zh-CN", "en-US"],
        ...     translations={
        ...         "zh-CN": {"greeting": "你好", "welcome": "欢迎 {name}"},
        ...         "en-US": {"greeting": "Hello", "welcome": "Welcome {name}"},
        ...     },
        ... )
        >>> l10n.t("welcome", {"name": "张三"})
        '欢迎 张三'
        >>> l10n.set_locale("en-US")
        True
        >>> l10n.t("greeting")
        'Hello'

    Attributes:
        locales: Immutable tuple of registered locale codes
        locale: The current locale
        default_locale: The fallback locale
    """

    __slots__ = (
        "_bundle_cache",
        "_cache",
        "_clock",
        "_current_locale",
        "_date_format",
        "_default_locale",
        "_escape_html",
        "_event_target",
        "_fallback_behavior",
        "_fetcher",
        "_listener_ids",
        "_listeners",
        "_locale_set",
        "_locale_source",
        "_locales",
        "_lock",
        "_number_format",
        "_on_fallback",
        "_resolver",
        "_translations",
    )

    def __init__(
        self,
        *,
        default_locale: LocaleCode = DEFAULT_LOCALE,
        locales: Iterable[LocaleCode] = DEFAULT_LOCALES,
        translations: Mapping[LocaleCode, Mapping[str, Any]] | None = None,
        date_format: DateFormat | None = None,
        number_format: NumberFormat | None = None,
        fallback_behavior: FallbackBehavior | str = FallbackBehavior.KEY,
        escape_html: bool = False,
        cache: CacheConfig | None = None,
        auto_detect: bool = False,
        locale_source: LocaleSource | None = None,
        persistent_cache: PersistentCacheConfig | None = None,
        storage: Storage | None = None,
        fetcher: BundleFetcher | None = None,
        event_target: EventDispatcher | None = host_events,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize localization.

        Args:
            default_locale: Fallback locale, also the initial locale (need not
                be registered)
            locales: Registered locale codes; duplicates are dropped
            translations: Initial trees per locale, safe-merged at construction
            date_format: Named date patterns (default: DateFormat())
            number_format: Number formatting defaults (default: NumberFormat())
            fallback_behavior: Missing-key policy ("key", "empty", "default")
            escape_html: HTML-escape interpolated parameter values
            cache: Result cache configuration; None disables caching
            auto_detect: Start in the locale proposed by locale_source when
                it is registered
            locale_source: Detection source (default: environment variables)
            persistent_cache: Bundle persistence settings (default: disabled)
            storage: Explicit durable backend; otherwise the backend registered
                for persistent_cache.storage is used
            fetcher: Bundle fetcher (default: HttpxBundleFetcher())
            event_target: Dispatcher receiving the language-changed event;
                None disables the broadcast
            on_fallback: Called when a key is answered by the default locale
            clock: Returns current POSIX time in seconds

        Raises:
            ValueError: If locales is empty or fallback_behavior is unknown
        """
        self._locales: tuple[LocaleCode, ...] = tuple(dict.fromkeys(locales))
        if not self._locales:
            msg = "At least one locale is required"
            raise ValueError(msg)
        self._locale_set: frozenset[LocaleCode] = frozenset(self._locales)
        self._default_locale = default_locale
        self._fallback_behavior = FallbackBehavior(fallback_behavior)
        self._escape_html = escape_html
        self._date_format = date_format or DateFormat()
        self._number_format = number_format or NumberFormat()
        self._cache = TranslationCache(cache.size) if cache is not None else None
        self._resolver = KeyResolver()
        self._clock = clock
        self._bundle_cache = PersistentBundleCache(persistent_cache, storage=storage, clock=clock)
        self._fetcher: BundleFetcher = fetcher or HttpxBundleFetcher()
        self._event_target = event_target
        self._on_fallback = on_fallback
        self._locale_source = locale_source
        self._listeners: dict[int, LocaleChangeCallback] = {}
        self._listener_ids = count()
        self._lock = RWLock()

        self._translations: dict[LocaleCode, TranslationTree] = {}
        for locale, tree in (translations or {}).items():
            safe_merge(self._translations.setdefault(locale, {}), tree)

        self._current_locale = default_locale
        if auto_detect:
            detected = self.detect_locale()
            if detected is not None and detected in self._locale_set:
                self._current_locale = detected
            else:
                logger.debug("No registered locale detected; using %s", default_locale)

    @classmethod
    def from_options(cls, options: Mapping[str, Any], **kwargs: Any) -> Localization:
        """Build an instance from the camelCase configuration mapping.

        Recognized keys: defaultLocale, locales, translations, dateFormat,
        numberFormat, fallbackBehavior, escapeHtml, enableCache, cacheMaxSize,
        autoDetect, persistentCache. persistentCache.ttl is in milliseconds.
        Extra keyword arguments (storage, fetcher, clock, ...) are passed
        through to the constructor.

        Raises:
            ValueError: On unrecognized option names or invalid values

        Example:
            >>> l10n = Localization.from_options(
            ...     {"defaultLocale": "en-US", "locales": ["en-US"], "enableCache": True}
            ... )
            >>> l10n.cache_enabled
            True
        """
        unknown = set(options) - _OPTION_NAMES
        if unknown:
            msg = f"Unknown localization options: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        params: dict[str, Any] = {}
        if "defaultLocale" in options:
            params["default_locale"] = options["defaultLocale"]
        if "locales" in options:
            params["locales"] = options["locales"]
        if "translations" in options:
            params["translations"] = options["translations"]
        if "fallbackBehavior" in options:
            params["fallback_behavior"] = options["fallbackBehavior"]
        if "escapeHtml" in options:
            params["escape_html"] = bool(options["escapeHtml"])
        if "autoDetect" in options:
            params["auto_detect"] = bool(options["autoDetect"])

        if date_opts := options.get("dateFormat"):
            defaults = DateFormat()
            params["date_format"] = DateFormat(
                date=date_opts.get("date", defaults.date),
                time=date_opts.get("time", defaults.time),
                datetime=date_opts.get("datetime", defaults.datetime),
            )
        if number_opts := options.get("numberFormat"):
            defaults_n = NumberFormat()
            params["number_format"] = NumberFormat(
                decimals=number_opts.get("decimals", defaults_n.decimals),
                thousands_separator=number_opts.get(
                    "thousandsSeparator", defaults_n.thousands_separator
                ),
                decimal_separator=number_opts.get(
                    "decimalSeparator", defaults_n.decimal_separator
                ),
            )

        if options.get("enableCache"):
            if "cacheMaxSize" in options:
                params["cache"] = CacheConfig(size=int(options["cacheMaxSize"]))
            else:
                params["cache"] = CacheConfig()

        if persistent_opts := options.get("persistentCache"):
            defaults_p = PersistentCacheConfig()
            ttl_ms = persistent_opts.get("ttl")
            params["persistent_cache"] = PersistentCacheConfig(
                enabled=bool(persistent_opts.get("enabled", defaults_p.enabled)),
                storage=StorageKind(persistent_opts.get("storage", defaults_p.storage)),
                prefix=persistent_opts.get("prefix", defaults_p.prefix),
                max_entries=int(persistent_opts.get("maxEntries", defaults_p.max_entries)),
                ttl=defaults_p.ttl if ttl_ms is None else ttl_ms / 1000,
            )

        params.update(kwargs)
        return cls(**params)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def locale(self) -> LocaleCode:
        """The current locale."""
        with self._lock.read():
            return self._current_locale

    @property
    def default_locale(self) -> LocaleCode:
        """The fallback locale."""
        return self._default_locale

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Registered locales in configuration order."""
        return self._locales

    @property
    def fallback_behavior(self) -> FallbackBehavior:
        """Missing-key policy."""
        return self._fallback_behavior

    @property
    def cache_enabled(self) -> bool:
        """True when the result cache is active."""
        return self._cache is not None

    @property
    def bundle_cache(self) -> PersistentBundleCache:
        """Two-tier cache used by load_translations_async()."""
        return self._bundle_cache

    def is_locale_supported(self, locale: LocaleCode) -> bool:
        """Check registry membership."""
        return locale in self._locale_set

    def get_translations(self, locale: LocaleCode | None = None) -> TranslationTree:
        """Return a copy of a locale's tree (current locale by default; {} if none)."""
        with self._lock.read():
            target = self._current_locale if locale is None else locale
            return copy.deepcopy(self._translations.get(target, {}))

    def __repr__(self) -> str:
        """Return string representation for debugging.

        Example:
            >>> repr(Localization(locales=["zh-CN", "en-US"]))
            "Localization(locale='zh-CN', locales=('zh-CN', 'en-US'), loaded=0)"
        """
        with self._lock.read():
            return (
                f"Localization(locale={self._current_locale!r}, "
                f"locales={self._locales!r}, loaded={len(self._translations)})"
            )

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def _resolve_in(self, locale: LocaleCode, key: TranslationKey) -> str | None:
        tree = self._translations.get(locale)
        if tree is None:
            return None
        return self._resolver.resolve(tree, key)

    def _handle_missing(self, key: TranslationKey, params: TranslationParams | None) -> str:
        logger.debug("Translation for '%s' not found in %s", key, self._current_locale)
        match self._fallback_behavior:
            case FallbackBehavior.EMPTY:
                return ""
            case FallbackBehavior.DEFAULT:
                value = self._resolve_in(self._default_locale, key)
                if value is not None:
                    return interpolate(value, params, escape=self._escape_html)
                return key
            case _:
                return key

    def translate(self, key: TranslationKey, params: TranslationParams | None = None) -> str:
        """Translate a key, interpolating {name} placeholders from params.

        Never raises for missing keys: the missing-key policy always yields
        a string.

        Args:
            key: Dotted key path (e.g., "nav.home")
            params: Placeholder values

        Returns:
            Translated string

        Example:
            >>> l10n = Localization(translations={"zh-CN": {"nav": {"home": "首页"}}})
            >>> l10n.translate("nav.home")
            '首页'
            >>> l10n.translate("nav.missing")
            'nav.missing'
        """
        fallback: FallbackInfo | None = None

        with self._lock.read():
            locale = self._current_locale
            if self._cache is not None:
                cached = self._cache.get(locale, key, params)
                if cached is not None:
                    return cached

            value = self._resolve_in(locale, key)
            if value is None and locale != self._default_locale:
                value = self._resolve_in(self._default_locale, key)
                if value is not None:
                    logger.debug("Key '%s' resolved from default locale %s", key, self._default_locale)
                    fallback = FallbackInfo(locale, self._default_locale, key)

            if value is None:
                result = self._handle_missing(key, params)
            else:
                result = interpolate(value, params, escape=self._escape_html)
                if self._cache is not None:
                    self._cache.put(locale, key, params, result)

        if fallback is not None and self._on_fallback is not None:
            self._on_fallback(fallback)
        return result

    t = translate

    def has(self, key: TranslationKey) -> bool:
        """Check whether the current locale (only) has a leaf string at key."""
        with self._lock.read():
            return self._resolve_in(self._current_locale, key) is not None

    # ------------------------------------------------------------------
    # Locale switching
    # ------------------------------------------------------------------

    def set_locale(self, locale: LocaleCode) -> bool:
        """Switch the current locale.

        Switching to the current locale is a successful no-op: no cache
        clear and no notification.

        Args:
            locale: Target locale

        Returns:
            False if locale is not registered (state unchanged), else True
        """
        with self._lock.write():
            if locale == self._current_locale:
                return True
            if locale not in self._locale_set:
                logger.debug("Rejected unsupported locale %s", locale)
                return False

            old_locale = self._current_locale
            self._current_locale = locale
            if self._cache is not None:
                self._cache.clear()
            listeners = list(self._listeners.values())
            event: LocaleChangedEvent | None = None
            if self._event_target is not None and self._event_target.has_listeners(
                LANGUAGE_CHANGED_EVENT
            ):
                event = LocaleChangedEvent(
                    locale=locale,
                    old_locale=old_locale,
                    translations=copy.deepcopy(self._translations.get(locale, {})),
                )

        logger.info("Locale changed: %s -> %s", old_locale, locale)
        for listener in listeners:
            try:
                listener(locale)
            except Exception:
                logger.exception("Locale change listener %r failed", listener)

        if event is not None and self._event_target is not None:
            self._event_target.dispatch(LANGUAGE_CHANGED_EVENT, event)
        return True

    def on_change(self, callback: LocaleChangeCallback) -> Callable[[], None]:
        """Register a locale-change listener.

        Listeners run in registration order with the new locale. Exceptions
        are logged and do not affect other listeners or set_locale().

        Returns:
            Disposer removing exactly this registration

        Example:
            >>> unsubscribe = l10n.on_change(lambda locale: print(locale))
            >>> l10n.set_locale("en-US")
            en-US
            True
            >>> unsubscribe()
        """
        with self._lock.write():
            handle = next(self._listener_ids)
            self._listeners[handle] = callback

        def dispose() -> None:
            with self._lock.write():
                self._listeners.pop(handle, None)

        return dispose

    def remove_all_listeners(self) -> None:
        """Remove every locale-change listener."""
        with self._lock.write():
            self._listeners.clear()

    def detect_locale(self) -> LocaleCode | None:
        """Ask the configured locale source for a registered locale."""
        source = self._locale_source or EnvironmentLocaleSource()
        return source.detect(self._locales)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_translations(self, locale: LocaleCode, data: Mapping[str, Any]) -> None:
        """Safe-merge data into a locale's tree and invalidate the result cache.

        The locale does not have to be registered; loading does not change
        the registry.
        """
        with self._lock.write():
            safe_merge(self._translations.setdefault(locale, {}), data)
            if self._cache is not None:
                self._cache.clear()
        logger.debug("Loaded translations for %s", locale)

    async def load_translations_async(self, locale: LocaleCode, url: str) -> None:
        """Load a translation bundle by URL and merge it into locale.

        The in-process bundle map and (when enabled) the durable cache are
        consulted before fetching. Cache entries are keyed by the exact URL,
        so changing the URL (e.g., a content hash or query string) forces a
        refetch.

        Raises:
            BundleNetworkError: On non-success status or transport failure
            BundleParseError: If the body is not a JSON object
        """
        data = self._bundle_cache.lookup(url)
        if data is None:
            logger.info("Fetching translations for %s from %s", locale, url)
            data = await self._fetcher.fetch(url)
            self._bundle_cache.store(url, data)
        else:
            logger.debug("Translations for %s served from bundle cache: %s", locale, url)
        self.load_translations(locale, data)

    # ------------------------------------------------------------------
    # Caches
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Clear the result cache."""
        if self._cache is not None:
            self._cache.clear()
            logger.debug("Translation cache cleared")

    def clear_persistent_cache(self) -> None:
        """Clear the in-process bundle map and every durable entry under the prefix."""
        self._bundle_cache.clear()
        logger.debug("Persistent bundle cache cleared")

    def get_cache_stats(self) -> dict[str, int | float] | None:
        """Get result cache statistics, or None if caching is disabled.

        Keys: size, maxsize, hits, misses, hit_rate, unhashable_skips.
        """
        if self._cache is None:
            return None
        return self._cache.get_stats()

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format_number(self, value: float | int | Decimal, **overrides: Any) -> str:
        """Format a number with the configured NumberFormat.

        Keyword overrides: decimals, thousands_separator, decimal_separator.

        Example:
            >>> Localization().format_number(1234.5, decimals=0)
            '1,235'
        """
        options = self._number_format.replace(**overrides) if overrides else self._number_format
        return format_number(value, options)

    def format_currency(self, value: float | int | Decimal, currency: str | None = None) -> str:
        """Format a monetary amount; the symbol defaults from the current locale."""
        return format_currency(value, self.locale, currency, self._number_format)

    def format_date(self, value: Timestamp, style: DateStyle | str = DateStyle.DATE) -> str:
        """Format a timestamp with a named style or a custom pattern."""
        return format_date(value, style, self._date_format)

    def format_relative(self, value: Timestamp) -> str:
        """Describe a timestamp relative to the engine clock."""
        return format_relative(value, self.locale, now=self._clock())

    # ------------------------------------------------------------------
    # Process-wide installation
    # ------------------------------------------------------------------

    def install(self) -> None:
        """Make this instance the one used by dotlex.instance.t()."""
        from dotlex.instance import install  # noqa: PLC0415

        install(self)

    def uninstall(self) -> None:
        """Clear the installed instance slot."""
        from dotlex.instance import uninstall  # noqa: PLC0415

        uninstall()
