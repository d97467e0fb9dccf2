"""Tests for the host event dispatcher."""

from __future__ import annotations

import pytest

from dotlex.localization.events import EventDispatcher


class TestEventDispatcher:
    """Named-event registration and dispatch."""

    def test_dispatch_in_registration_order(self) -> None:
        """Handlers receive the payload in the order they were added."""
        events = EventDispatcher()
        calls: list[tuple[str, object]] = []
        events.add_listener("e", lambda p: calls.append(("first", p)))
        events.add_listener("e", lambda p: calls.append(("second", p)))

        assert events.dispatch("e", 1) == 2
        assert calls == [("first", 1), ("second", 1)]

    def test_no_handlers_is_silent(self) -> None:
        """Dispatching an unknown event does nothing."""
        assert EventDispatcher().dispatch("nothing", None) == 0

    def test_disposer_removes_only_its_registration(self) -> None:
        """The same handler registered twice is removed once per disposer."""
        events = EventDispatcher()
        calls: list[object] = []
        dispose = events.add_listener("e", calls.append)
        events.add_listener("e", calls.append)
        dispose()
        dispose()

        events.dispatch("e", "x")
        assert calls == ["x"]

    def test_has_listeners(self) -> None:
        """has_listeners tracks registrations per event."""
        events = EventDispatcher()
        assert not events.has_listeners("e")
        dispose = events.add_listener("e", print)
        assert events.has_listeners("e")
        dispose()
        assert not events.has_listeners("e")

    def test_failing_handler_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        """A raising handler is logged and later handlers still run."""
        events = EventDispatcher()
        calls: list[object] = []

        def boom(payload: object) -> None:
            msg = "boom"
            raise RuntimeError(msg)

        events.add_listener("e", boom)
        events.add_listener("e", calls.append)
        events.dispatch("e", "x")

        assert calls == ["x"]
        assert "Handler for event 'e' failed" in caplog.text

    def test_clear(self) -> None:
        """clear() drops every handler."""
        events = EventDispatcher()
        events.add_listener("e", print)
        events.clear()
        assert not events.has_listeners("e")
