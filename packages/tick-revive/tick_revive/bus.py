"""In-memory pub/sub event bus used as the host agent's event source."""
from __future__ import annotations

from typing import Any, Callable

Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Routes named signals to subscribed handlers.

    ``emit`` delivers at once, the way a host agent raises events inline.
    ``publish`` queues and ``flush`` delivers the queue in FIFO order.
    Handlers subscribed or removed during delivery take effect on the
    next signal.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def has_subscriber(self, signal_name: str, handler: Handler) -> bool:
        return handler in self._subscribers.get(signal_name, ())

    def emit(self, signal_name: str, **data: Any) -> None:
        for handler in list(self._subscribers.get(signal_name, ())):
            handler(signal_name, data)

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def flush(self) -> None:
        snapshot = self._queue
        self._queue = []
        for signal_name, data in snapshot:
            self.emit(signal_name, **data)

    def clear(self) -> None:
        self._queue.clear()
