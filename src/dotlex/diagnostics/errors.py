"""dotlex exception hierarchy.

Resolution misses, unsupported locales and listener failures are NOT
exceptions: they are handled by fallback policy, boolean returns and logging.
The classes here cover the two failure domains that do propagate or that
storage backends use to signal a failed write.

Hierarchy:
    LocalizationError (base)
    ├─ BundleLoadError (remote translation bundle could not be loaded)
    │  ├─ BundleNetworkError (non-success status or transport failure)
    │  └─ BundleParseError (malformed JSON or non-object body)
    └─ StorageError (durable backend failed to persist)
       └─ StorageQuotaExceededError (backend quota exhausted)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = [
    "BundleLoadError",
    "BundleNetworkError",
    "BundleParseError",
    "LocalizationError",
    "StorageError",
    "StorageQuotaExceededError",
]


class LocalizationError(Exception):
    """Base exception for all dotlex errors."""


class BundleLoadError(LocalizationError):
    """A translation bundle could not be loaded from its URL.

    Attributes:
        url: The bundle URL that was requested
    """

    def __init__(self, message: str, *, url: str) -> None:
        """Initialize BundleLoadError.

        Args:
            message: Human-readable error description
            url: The bundle URL that was requested
        """
        super().__init__(message)
        self.url = url


class BundleNetworkError(BundleLoadError):
    """The bundle request failed at the HTTP level.

    Raised for non-success status codes and for transport failures
    (connection refused, DNS errors, timeouts raised by the transport).
    Not retried internally.

    Attributes:
        status_code: HTTP status code, or None for transport failures
        status_text: HTTP reason phrase, or the transport error description
    """

    def __init__(
        self,
        url: str,
        status_code: int | None,
        status_text: str,
    ) -> None:
        """Initialize BundleNetworkError.

        Args:
            url: The bundle URL that was requested
            status_code: HTTP status code (None for transport failures)
            status_text: Reason phrase or transport error text
        """
        if status_code is None:
            message = f"Failed to load translations from {url}: {status_text}"
        else:
            message = f"Failed to load translations from {url}: {status_code} {status_text}"
        super().__init__(message, url=url)
        self.status_code = status_code
        self.status_text = status_text


class BundleParseError(BundleLoadError):
    """The bundle body is not a JSON object.

    Example:
        >>> try:
        ...     parse_bundle("[1, 2]", "https://cdn.example.com/en.json")
        ... except BundleParseError as e:
        ...     print(e.url)
        https://cdn.example.com/en.json
    """


class StorageError(LocalizationError):
    """A durable storage backend failed to persist a value."""


class StorageQuotaExceededError(StorageError):
    """Writing the value would exceed the backend's quota.

    Attributes:
        quota: Configured quota in characters
        required: Characters the store would hold after the write
    """

    def __init__(self, quota: int, required: int) -> None:
        """Initialize StorageQuotaExceededError.

        Args:
            quota: Configured quota in characters
            required: Characters the store would hold after the write
        """
        super().__init__(f"Storage quota exceeded: {required} > {quota} characters")
        self.quota = quota
        self.required = required
