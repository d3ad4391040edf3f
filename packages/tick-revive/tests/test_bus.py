"""Unit tests for SignalBus."""
from __future__ import annotations

from tick_revive import SignalBus


def test_emit_delivers_immediately():
    """emit() calls handlers before returning, no flush needed."""
    bus = SignalBus()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append((signal_name, data))

    bus.subscribe("health", handler)
    bus.emit("health", health=3)

    assert received == [("health", {"health": 3})]


def test_publish_waits_for_flush():
    """publish() queues; flush() delivers in FIFO order."""
    bus = SignalBus()
    order = []

    def handler(signal_name: str, data: dict) -> None:
        order.append(signal_name)

    bus.subscribe("a", handler)
    bus.subscribe("b", handler)
    bus.publish("a")
    bus.publish("b")
    assert order == []

    bus.flush()
    assert order == ["a", "b"]


def test_signal_published_during_flush_waits_for_next_flush():
    bus = SignalBus()
    received = []

    def first(signal_name: str, data: dict) -> None:
        bus.publish("second")

    def second(signal_name: str, data: dict) -> None:
        received.append(signal_name)

    bus.subscribe("first", first)
    bus.subscribe("second", second)
    bus.publish("first")
    bus.flush()
    assert received == []
    bus.flush()
    assert received == ["second"]


def test_unsubscribe():
    """Unsubscribed handler no longer receives signals."""
    bus = SignalBus()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append(data)

    bus.subscribe("tick", handler)
    assert bus.has_subscriber("tick", handler) is True
    bus.unsubscribe("tick", handler)
    assert bus.has_subscriber("tick", handler) is False
    bus.emit("tick")
    assert received == []


def test_unsubscribe_unknown_is_noop():
    """Removing a handler that was never added does not raise."""
    bus = SignalBus()
    bus.unsubscribe("never", lambda n, d: None)
    bus.subscribe("tick", lambda n, d: None)
    bus.unsubscribe("tick", lambda n, d: None)


def test_handler_unsubscribing_during_emit():
    """A handler removing itself mid-emit does not skip the next handler."""
    bus = SignalBus()
    calls = []

    def once(signal_name: str, data: dict) -> None:
        calls.append("once")
        bus.unsubscribe("tick", once)

    def always(signal_name: str, data: dict) -> None:
        calls.append("always")

    bus.subscribe("tick", once)
    bus.subscribe("tick", always)
    bus.emit("tick")
    bus.emit("tick")

    assert calls == ["once", "always", "always"]


def test_clear_drops_queue():
    bus = SignalBus()
    received = []
    bus.subscribe("x", lambda n, d: received.append(n))
    bus.publish("x")
    bus.clear()
    bus.flush()
    assert received == []
