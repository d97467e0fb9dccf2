"""Bundle Loading Example - Remote Translations with a Persistent Cache.

Demonstrates load_translations_async() with a JSON file backed durable
cache. The HTTP layer is an httpx.MockTransport so the example runs offline;
in production, pass a configured httpx.AsyncClient instead.

Scenarios covered:
1. First load fetches and persists the bundle
2. A new Localization over the same cache file skips the network
3. Changing the URL (content hash) forces a refetch

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import httpx

from dotlex import Localization, PersistentCacheConfig
from dotlex.localization import HttpxBundleFetcher
from dotlex.storage import JsonFileStorage

BUNDLES = {
    "/i18n/en-US.v1.json": {"greeting": "Hello", "nav": {"home": "Home"}},
    "/i18n/en-US.v2.json": {"greeting": "Hi there", "nav": {"home": "Start"}},
}


def handler(request: httpx.Request) -> httpx.Response:
    print(f"  [network] GET {request.url.path}")
    bundle = BUNDLES.get(request.url.path)
    if bundle is None:
        return httpx.Response(404)
    return httpx.Response(200, json=bundle)


async def main(cache_file: Path) -> None:
    storage = JsonFileStorage(cache_file)
    config = PersistentCacheConfig(enabled=True)

    async with httpx.AsyncClient(
        base_url="https://cdn.example.com", transport=httpx.MockTransport(handler)
    ) as client:
        fetcher = HttpxBundleFetcher(client)

        print("Scenario 1: first load")
        first = Localization(
            persistent_cache=config, storage=storage, fetcher=fetcher, event_target=None
        )
        await first.load_translations_async("en-US", "/i18n/en-US.v1.json")
        first.set_locale("en-US")
        print(" ", first.t("greeting"))

        print("Scenario 2: new instance, same cache file")
        second = Localization(
            persistent_cache=config, storage=storage, fetcher=fetcher, event_target=None
        )
        await second.load_translations_async("en-US", "/i18n/en-US.v1.json")
        second.set_locale("en-US")
        print(" ", second.t("nav.home"))

        print("Scenario 3: new content hash")
        await second.load_translations_async("en-US", "/i18n/en-US.v2.json")
        print(" ", second.t("greeting"))
        print("  persisted:", second.bundle_cache.persisted_urls())


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(main(Path(tmp) / "i18n-cache.json"))
