"""Tests for Localization.load_translations_async and bundle caching.

HTTP is simulated with httpx.MockTransport; coroutines are driven with
asyncio.run().
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from dotlex import CacheConfig, Localization, PersistentCacheConfig
from dotlex.diagnostics import BundleNetworkError, BundleParseError, StorageError
from dotlex.enums import StorageKind
from dotlex.localization.fetching import HttpxBundleFetcher
from dotlex.storage import MemoryStorage, register_storage

URL = "https://cdn.example.com/i18n/en-US.json"


class CountingFetcher:
    """Bundle fetcher returning fixed data and recording requested URLs."""

    def __init__(self, data: dict[str, object]) -> None:
        self.data = data
        self.urls: list[str] = []

    async def fetch(self, url: str) -> dict[str, object]:
        self.urls.append(url)
        return self.data


class BrokenStorage(MemoryStorage):
    """Storage rejecting every write with the given exception type."""

    def __init__(self, error: type[Exception] = StorageError) -> None:
        super().__init__()
        self.error = error

    def set_item(self, key: str, value: str) -> None:
        msg = "quota"
        raise self.error(msg)


def _persistent() -> PersistentCacheConfig:
    return PersistentCacheConfig(enabled=True)


class TestLoadTranslationsAsync:
    """Fetch, cache and merge."""

    def test_fetch_and_merge(self) -> None:
        """Fetched bundles merge into the locale tree."""
        fetcher = CountingFetcher({"greeting": "Hello"})
        l10n = Localization(fetcher=fetcher, event_target=None)
        asyncio.run(l10n.load_translations_async("en-US", URL))

        l10n.set_locale("en-US")
        assert l10n.t("greeting") == "Hello"
        assert fetcher.urls == [URL]

    def test_memory_tier_prevents_refetch(self) -> None:
        """The same URL is fetched once per instance."""
        fetcher = CountingFetcher({"greeting": "Hello"})
        l10n = Localization(fetcher=fetcher, event_target=None)
        asyncio.run(l10n.load_translations_async("en-US", URL))
        asyncio.run(l10n.load_translations_async("en-US", URL))
        assert fetcher.urls == [URL]

    def test_url_change_forces_refetch(self) -> None:
        """A cache-busting query string is a distinct entry."""
        fetcher = CountingFetcher({"greeting": "Hello"})
        l10n = Localization(fetcher=fetcher, event_target=None)
        asyncio.run(l10n.load_translations_async("en-US", URL))
        asyncio.run(l10n.load_translations_async("en-US", URL + "?v=2"))
        assert fetcher.urls == [URL, URL + "?v=2"]

    def test_durable_tier_shared_between_instances(self) -> None:
        """A second instance over the same storage skips the network."""
        storage = MemoryStorage()
        first = CountingFetcher({"greeting": "Hello"})
        second = CountingFetcher({"greeting": "unused"})

        asyncio.run(
            Localization(
                fetcher=first, persistent_cache=_persistent(), storage=storage, event_target=None
            ).load_translations_async("en-US", URL)
        )
        l10n = Localization(
            fetcher=second, persistent_cache=_persistent(), storage=storage, event_target=None
        )
        asyncio.run(l10n.load_translations_async("en-US", URL))

        assert second.urls == []
        assert l10n.get_translations("en-US") == {"greeting": "Hello"}

    def test_registered_backend(self) -> None:
        """Without an explicit storage, the registered backend is used."""
        storage = MemoryStorage()
        register_storage(StorageKind.LOCAL, storage)
        l10n = Localization(
            fetcher=CountingFetcher({"a": "b"}), persistent_cache=_persistent(), event_target=None
        )
        asyncio.run(l10n.load_translations_async("en-US", URL))
        assert len(storage) == 1

    @pytest.mark.parametrize("error", [StorageError, OSError])
    def test_storage_failure_does_not_fail_load(self, error: type[Exception]) -> None:
        """Abandoned persistence still loads the bundle."""
        l10n = Localization(
            fetcher=CountingFetcher({"greeting": "Hello"}),
            persistent_cache=_persistent(),
            storage=BrokenStorage(error),
            event_target=None,
        )
        asyncio.run(l10n.load_translations_async("en-US", URL))
        assert l10n.get_translations("en-US") == {"greeting": "Hello"}

    def test_load_invalidates_result_cache(self) -> None:
        """Async loads clear cached results like synchronous loads."""
        l10n = Localization(
            translations={"zh-CN": {"greeting": "旧"}},
            fetcher=CountingFetcher({"greeting": "新"}),
            cache=CacheConfig(),
            event_target=None,
        )
        assert l10n.t("greeting") == "旧"
        asyncio.run(l10n.load_translations_async("zh-CN", URL))
        assert l10n.t("greeting") == "新"

    def test_dangerous_keys_in_bundle_dropped(self) -> None:
        """Fetched payloads go through the same merge filter."""
        l10n = Localization(
            fetcher=CountingFetcher({"constructor": {"x": "y"}, "safe": "ok"}),
            event_target=None,
        )
        asyncio.run(l10n.load_translations_async("zh-CN", URL))
        assert l10n.get_translations() == {"safe": "ok"}

    def test_clear_persistent_cache(self) -> None:
        """Clearing forces the next load to fetch again."""
        storage = MemoryStorage()
        fetcher = CountingFetcher({"a": "b"})
        l10n = Localization(
            fetcher=fetcher, persistent_cache=_persistent(), storage=storage, event_target=None
        )
        asyncio.run(l10n.load_translations_async("en-US", URL))
        l10n.clear_persistent_cache()
        assert len(storage) == 0
        asyncio.run(l10n.load_translations_async("en-US", URL))
        assert fetcher.urls == [URL, URL]


class TestAsyncErrors:
    """Failures surface to the awaiting caller."""

    @staticmethod
    def _load_with(handler: Callable[[httpx.Request], httpx.Response]) -> Localization:
        async def run() -> Localization:
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport) as client:
                l10n = Localization(fetcher=HttpxBundleFetcher(client), event_target=None)
                await l10n.load_translations_async("en-US", URL)
                return l10n

        return asyncio.run(run())

    def test_http_error(self) -> None:
        """Non-success statuses raise BundleNetworkError and cache nothing."""
        with pytest.raises(BundleNetworkError) as exc_info:
            self._load_with(lambda request: httpx.Response(500))
        assert exc_info.value.status_code == 500

    def test_parse_error(self) -> None:
        """Malformed bodies raise BundleParseError."""
        with pytest.raises(BundleParseError):
            self._load_with(lambda request: httpx.Response(200, text="[]"))

    def test_http_success_end_to_end(self) -> None:
        """A real HttpxBundleFetcher over a mock transport loads data."""
        l10n = self._load_with(
            lambda request: httpx.Response(200, json={"nav": {"home": "Home"}})
        )
        assert l10n.get_translations("en-US") == {"nav": {"home": "Home"}}
        assert URL in l10n.bundle_cache

    def test_moved_bundle_loads(self) -> None:
        """A bundle behind a 301 is followed and merged."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/new.json":
                return httpx.Response(200, json={"greeting": "Hello"})
            return httpx.Response(301, headers={"Location": "https://cdn.example.com/new.json"})

        l10n = self._load_with(handler)
        assert l10n.get_translations("en-US") == {"greeting": "Hello"}
