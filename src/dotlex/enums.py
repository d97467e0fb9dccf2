"""Enumerations for dotlex type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so configuration values read from
JSON or keyword arguments compare equal to the members directly.

Python 3.13+.
"""

from enum import StrEnum


class FallbackBehavior(StrEnum):
    """What translate() returns when a key resolves nowhere.

    StrEnum provides automatic string conversion: str(FallbackBehavior.KEY) == "key"
    """

    KEY = "key"
    """Return the requested key itself."""

    EMPTY = "empty"
    """Return an empty string."""

    DEFAULT = "default"
    """Retry the default locale's table, then return the key."""


class StorageKind(StrEnum):
    """Named durable storage backend used by the persistent bundle cache.

    The two kinds are interchangeable and differ only in retention.
    """

    LOCAL = "localStorage"
    """Longer-lived storage that survives process restarts."""

    SESSION = "sessionStorage"
    """Storage scoped to the current session."""


class DateStyle(StrEnum):
    """Named date pattern selected from DateFormat."""

    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


__all__ = [
    "DateStyle",
    "FallbackBehavior",
    "StorageKind",
]
