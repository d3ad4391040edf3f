"""Deterministic host agent, inventories and scheduler for tests and demos.

``MockAgent`` conforms to the RevivalHost protocol. It owns a SignalBus and
offers helpers that raise the same signals a real agent would. Transfer
actions resolve immediately by default; with ``auto_resolve=False`` they
stay pending until ``resolve_next()`` is called, which is how latency is
simulated without threads.
"""
from __future__ import annotations

import heapq
from concurrent.futures import Future
from typing import Any, Callable

from tick_revive.bus import SignalBus
from tick_revive.types import Item

# Window slots holding general inventory (hotbar included).
_GENERAL_SLOTS = range(9, 45)


class SlotInventory:
    """Window-slot inventory where ``slots[offhand_slot]`` is the secondary slot."""

    def __init__(self, offhand_slot: int = 45) -> None:
        self.offhand_slot = offhand_slot
        self.slots: list[Item | None] = [None] * (offhand_slot + 1)

    def items(self) -> list[Item]:
        return [
            item for i, item in enumerate(self.slots)
            if item is not None and i in _GENERAL_SLOTS
        ]

    def put(self, slot: int, item_type: int, name: str = "", count: int = 1) -> Item:
        item = Item(type=item_type, slot=slot, name=name, count=count)
        self.slots[slot] = item
        return item

    def get(self, slot: int) -> Item | None:
        return self.slots[slot]

    def set(self, slot: int, item: Item | None) -> None:
        if item is not None:
            item = Item(type=item.type, slot=slot, name=item.name, count=item.count)
        self.slots[slot] = item


class OffhandInventory:
    """Inventory exposing the secondary slot as a separate ``offhand`` list."""

    def __init__(self, offhand_slot: int = 45) -> None:
        self.offhand_slot = offhand_slot
        self.offhand: list[Item] = []
        self._stacks: dict[int, Item] = {}

    def items(self) -> list[Item]:
        return [self._stacks[slot] for slot in sorted(self._stacks)]

    def put(self, slot: int, item_type: int, name: str = "", count: int = 1) -> Item:
        item = Item(type=item_type, slot=slot, name=name, count=count)
        self.set(slot, item)
        return item

    def get(self, slot: int) -> Item | None:
        if slot == self.offhand_slot:
            return self.offhand[0] if self.offhand else None
        return self._stacks.get(slot)

    def set(self, slot: int, item: Item | None) -> None:
        if item is not None:
            item = Item(type=item.type, slot=slot, name=item.name, count=item.count)
        if slot == self.offhand_slot:
            self.offhand = [] if item is None else [item]
        elif item is None:
            self._stacks.pop(slot, None)
        else:
            self._stacks[slot] = item


MockInventory = SlotInventory | OffhandInventory


class MockAgent:
    """Host agent double.

    Args:
        version: Protocol version string.
        items_by_name: Game-data item ids by name.
        inventory: SlotInventory (default) or OffhandInventory.
        entity_id: The agent's own entity id.
        health: Starting health.
        auto_resolve: Resolve transfer futures immediately when True.
        equip_error: Exception every equip call fails with, if set.
    """

    def __init__(
        self,
        version: str = "1.20.4",
        items_by_name: dict[str, int] | None = None,
        inventory: MockInventory | None = None,
        entity_id: int = 1,
        health: float = 20,
        auto_resolve: bool = True,
        equip_error: BaseException | None = None,
    ) -> None:
        self.version = version
        self.items_by_name = (
            items_by_name if items_by_name is not None
            else {"totem_of_undying": 1190}
        )
        self.inventory: MockInventory = (
            inventory if inventory is not None else SlotInventory()
        )
        self.entity_id = entity_id
        self.health = health
        self.auto_resolve = auto_resolve
        self.equip_error = equip_error
        self.bus = SignalBus()

        self.equip_calls: list[tuple[Item, str]] = []
        self._pending: list[tuple[Future[None], Callable[[], None]]] = []

    # --- RevivalHost ---

    def equip(self, item: Item, destination: str) -> Future[None]:
        self.equip_calls.append((item, destination))
        offhand_slot = self.inventory.offhand_slot

        def apply() -> None:
            held = self.inventory.get(offhand_slot)
            self.inventory.set(offhand_slot, self.inventory.get(item.slot))
            self.inventory.set(item.slot, held)

        return self._transfer(apply, self.equip_error)

    # --- Transfer plumbing ---

    @property
    def pending_transfers(self) -> int:
        return len(self._pending)

    def _transfer(
        self, apply: Callable[[], None], error: BaseException | None,
    ) -> Future[None]:
        future: Future[None] = Future()
        if error is not None:
            future.set_exception(error)
            return future
        if self.auto_resolve:
            apply()
            future.set_result(None)
        else:
            self._pending.append((future, apply))
        return future

    def resolve_next(self, error: BaseException | None = None) -> None:
        """Complete the oldest pending transfer, failing it if ``error`` is set."""
        future, apply = self._pending.pop(0)
        if error is not None:
            future.set_exception(error)
            return
        apply()
        future.set_result(None)

    # --- Signal helpers ---

    def tick(self, n: int = 1) -> None:
        for _ in range(n):
            self.bus.emit("tick")

    def set_health(self, health: float) -> None:
        self.health = health
        self.bus.emit("health", health=health)

    def entity_status(self, entity_id: int, status: int) -> None:
        self.bus.emit("entity_status", entity_id=entity_id, status=status)

    def collect(self, collector_id: int | None = None) -> None:
        collector = self.entity_id if collector_id is None else collector_id
        self.bus.emit("player_collect", collector_id=collector)


class MockWindowAgent(MockAgent):
    """MockAgent that also supports manual window clicks.

    A click on a slot swaps its contents with the cursor, so picking up
    the source stack and clicking the secondary slot moves the item.
    """

    def __init__(self, *args: Any, click_error: BaseException | None = None,
                 **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.click_error = click_error
        self.click_calls: list[tuple[int, int, int]] = []
        self.cursor: Item | None = None

    def click_slot(self, slot: int, button: int, mode: int) -> Future[None]:
        self.click_calls.append((slot, button, mode))

        def apply() -> None:
            picked = self.inventory.get(slot)
            self.inventory.set(slot, self.cursor)
            self.cursor = picked

        return self._transfer(apply, self.click_error)


class _Handle:
    __slots__ = ("when", "seq", "callback", "cancelled")

    def __init__(self, when: float, seq: int, callback: Callable[[], Any]) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: _Handle) -> bool:
        return (self.when, self.seq) < (other.when, other.seq)


class ManualScheduler:
    """Scheduler driven by explicit ``advance()`` calls.

    ``time()`` is the scheduler's clock, suitable as the governor clock so
    throttle and backoff windows follow the same simulated time.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._seq = 0
        self._heap: list[_Handle] = []

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], Any]) -> _Handle:
        self._seq += 1
        handle = _Handle(self._now + delay, self._seq, callback)
        heapq.heappush(self._heap, handle)
        return handle

    @property
    def scheduled(self) -> int:
        return sum(1 for h in self._heap if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, running due callbacks in order. Returns how many ran."""
        target = self._now + seconds
        ran = 0
        while self._heap and self._heap[0].when <= target:
            handle = heapq.heappop(self._heap)
            self._now = handle.when
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        self._now = target
        return ran
