"""Network loading of translation bundles.

Components:
    BundleFetcher - Protocol for asynchronous bundle sources (structural typing)
    HttpxBundleFetcher - HTTP GET via httpx.AsyncClient
    parse_bundle - Decode a response body into a translation tree

No timeout or retry is imposed here; both belong to the transport (pass a
configured httpx.AsyncClient).

Python 3.13+. Uses httpx for HTTP.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Protocol

import httpx

from dotlex.diagnostics import BundleNetworkError, BundleParseError

if TYPE_CHECKING:
    from dotlex.localization.types import TranslationTree

__all__ = ["BundleFetcher", "HttpxBundleFetcher", "parse_bundle"]

logger = logging.getLogger(__name__)


class BundleFetcher(Protocol):
    """Protocol for loading a translation bundle from a URL.

    Example:
        >>> class StaticFetcher:
        ...     async def fetch(self, url: str) -> dict:
        ...         return {"greeting": "Hello"}
        >>> l10n = Localization(fetcher=StaticFetcher())
    """

    async def fetch(self, url: str) -> TranslationTree:
        """Fetch and decode the bundle at url.

        Raises:
            BundleNetworkError: On non-success status or transport failure
            BundleParseError: If the body is not a JSON object
        """


def parse_bundle(body: str | bytes, url: str) -> TranslationTree:
    """Decode a bundle body.

    Only the top level is checked: it must be a JSON object. Nested values
    are not validated beyond the dangerous-key filtering done on merge.

    Raises:
        BundleParseError: If body is not valid JSON or not an object
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        msg = f"Invalid JSON in translation bundle {url}: {e}"
        raise BundleParseError(msg, url=url) from e
    if not isinstance(data, dict):
        msg = f"Translation bundle {url} must be a JSON object, got {type(data).__name__}"
        raise BundleParseError(msg, url=url)
    return data


class HttpxBundleFetcher:
    """Fetch bundles with HTTP GET.

    Uses the provided client (and its base_url, headers, timeouts and
    transport) or a short-lived client per request. Redirects are followed
    unless follow_redirects is False, regardless of the client's own setting.

    Example:
        >>> async with httpx.AsyncClient(base_url="https://cdn.example.com") as client:
        ...     l10n = Localization(fetcher=HttpxBundleFetcher(client))
        ...     await l10n.load_translations_async("en-US", "/i18n/en-US.abc123.json")
    """

    __slots__ = ("_client", "_follow_redirects")

    def __init__(
        self, client: httpx.AsyncClient | None = None, *, follow_redirects: bool = True
    ) -> None:
        self._client = client
        self._follow_redirects = follow_redirects

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, follow_redirects=self._follow_redirects)
        async with httpx.AsyncClient(follow_redirects=self._follow_redirects) as client:
            return await client.get(url)

    async def fetch(self, url: str) -> TranslationTree:
        try:
            response = await self._get(url)
        except httpx.RequestError as e:
            raise BundleNetworkError(url, None, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise BundleNetworkError(url, response.status_code, response.reason_phrase)

        logger.debug("Fetched translation bundle %s (%d bytes)", url, len(response.content))
        return parse_bundle(response.content, url)
