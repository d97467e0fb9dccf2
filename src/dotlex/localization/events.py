"""Host-level broadcast of locale changes.

Localization instances notify their own on_change listeners directly. In
addition, every successful set_locale dispatches a named event on an
EventDispatcher (the process-wide ``host_events`` by default) so that code
which does not hold a reference to the instance, such as renderers, can
observe language switches. With no handlers registered, dispatch is a
silent no-op.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from itertools import count
from threading import RLock
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dotlex.localization.types import LocaleCode, TranslationTree

__all__ = [
    "LANGUAGE_CHANGED_EVENT",
    "EventDispatcher",
    "LocaleChangedEvent",
    "host_events",
]

logger = logging.getLogger(__name__)

LANGUAGE_CHANGED_EVENT = "i18n:language-changed"

type EventHandler = Callable[[object], None]


@dataclass(frozen=True, slots=True)
class LocaleChangedEvent:
    """Payload of the language-changed event.

    Attributes:
        locale: The new current locale
        old_locale: The locale active before the switch
        translations: Snapshot of the new locale's tree ({} if none loaded)
    """

    locale: LocaleCode
    old_locale: LocaleCode
    translations: TranslationTree


class EventDispatcher:
    """Named-event dispatcher with per-handler failure isolation.

    Example:
        >>> events = EventDispatcher()
        >>> dispose = events.add_listener("i18n:language-changed", print)
        >>> events.dispatch("i18n:language-changed", "en-US")
        en-US
        1
        >>> dispose()
    """

    __slots__ = ("_handlers", "_ids", "_lock")

    def __init__(self) -> None:
        self._handlers: dict[str, dict[int, EventHandler]] = {}
        self._ids = count()
        self._lock = RLock()

    def add_listener(self, name: str, handler: EventHandler) -> Callable[[], None]:
        """Register handler for name.

        Returns:
            Disposer removing exactly this registration
        """
        with self._lock:
            handle = next(self._ids)
            self._handlers.setdefault(name, {})[handle] = handler

        def dispose() -> None:
            with self._lock:
                handlers = self._handlers.get(name)
                if handlers is not None:
                    handlers.pop(handle, None)
                    if not handlers:
                        del self._handlers[name]

        return dispose

    def has_listeners(self, name: str) -> bool:
        """True if at least one handler is registered for name."""
        with self._lock:
            return bool(self._handlers.get(name))

    def dispatch(self, name: str, payload: object) -> int:
        """Invoke handlers for name in registration order.

        Handler exceptions are logged and do not stop later handlers.

        Returns:
            Number of handlers invoked
        """
        with self._lock:
            handlers = list(self._handlers.get(name, {}).values())
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler for event %r failed", name)
        return len(handlers)

    def clear(self) -> None:
        """Remove every handler for every event."""
        with self._lock:
            self._handlers.clear()


host_events = EventDispatcher()
