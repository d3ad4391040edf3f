"""Protocols for the host agent the revival guard plugs into."""
from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Iterable, Mapping, Protocol, runtime_checkable

from tick_revive.types import Item


@runtime_checkable
class Cancellable(Protocol):
    def cancel(self) -> Any:
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Defers a callback by a number of seconds.

    ``asyncio`` event loops conform out of the box.
    """

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable:
        ...


@runtime_checkable
class InventoryView(Protocol):
    """Read-only view of the agent's inventory.

    Besides ``items()``, an implementation exposes the secondary slot
    either as ``slots`` (window-slot indexed sequence) or as ``offhand``
    (a sequence whose first entry is the held item).
    """

    def items(self) -> Iterable[Item]:
        ...


@runtime_checkable
class RevivalHost(Protocol):
    """The agent the guard is installed on.

    Transfer actions return ``concurrent.futures.Future`` objects and may be
    resolved from any thread; the guard only reads them on its own thread.
    A host that supports manual window clicks also defines
    ``click_slot(slot, button, mode) -> Future[None]``.
    """

    version: str
    items_by_name: Mapping[str, int]
    entity_id: int
    health: float
    inventory: InventoryView

    def equip(self, item: Item, destination: str) -> Future[None]:
        ...
