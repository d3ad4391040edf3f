"""Equip maintainer: keeps the revival item in the secondary slot.

The maintainer is invoked every tick and shortly after each pickup. Each
invocation does three things in order:

1. Harvest the in-flight attempt if its future is done. A finished step
   either starts the next step, hands over to the next strategy, or
   settles the attempt as a success or a failure.
2. Bail out if the guard is inactive, backing off, or still waiting on
   an attempt (single flight).
3. Reconcile: if the slot already holds the item, or there is no item
   to move, the pass succeeds without touching the inventory. Otherwise
   a new attempt starts with the first strategy.

Attempts carry the generation they were started in. Stopping the guard
bumps the generation, so a result that arrives after a stop is dropped
without touching the governor. A step still unresolved after
``transfer_timeout`` seconds is abandoned, not cancelled: the slot frees up,
a current-generation attempt counts as a failure, and any late result is
ignored.
"""
from __future__ import annotations

import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable

from tick_revive.bus import SignalBus
from tick_revive.config import RevivalConfig
from tick_revive.governor import ErrorStormGovernor
from tick_revive.host import Cancellable, RevivalHost, Scheduler
from tick_revive.inventory import SlotLookup, find_item
from tick_revive.strategies import Step, TransferStrategy
from tick_revive.types import Item, TransferError


@dataclass
class _Attempt:
    """Internal record of an in-flight transfer."""

    item: Item
    strategy_index: int
    steps: list[Step]
    step_index: int
    future: Future[None]
    generation: int
    submitted_at: float


class _Deferred:
    """Slot for a scheduler handle, registered before the handle exists."""

    __slots__ = ("handle",)

    def __init__(self) -> None:
        self.handle: Cancellable | None = None


def _call_step(step: Step) -> Future[None]:
    """Run a step, turning a synchronous raise into a failed future."""
    try:
        return step()
    except Exception as exc:
        failed: Future[None] = Future()
        failed.set_exception(exc)
        return failed


def _outcome(future: Future[None]) -> BaseException | None:
    if future.cancelled():
        return TransferError("transfer cancelled")
    return future.exception()


class EquipMaintainer:
    """Idempotent reconciler for the secondary slot.

    Use ``attach(bus)`` to drive it from ``"tick"`` and ``"player_collect"``
    signals, or call ``maintain()`` directly.
    """

    def __init__(
        self,
        host: RevivalHost,
        item_id: int,
        lookup: SlotLookup,
        strategies: list[TransferStrategy],
        governor: ErrorStormGovernor,
        scheduler: Scheduler,
        is_active: Callable[[], bool],
        on_equip: Callable[[str], None] | None = None,
        config: RevivalConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not strategies:
            raise ValueError("at least one transfer strategy is required")
        self._config = config if config is not None else RevivalConfig()
        self._host = host
        self._item_id = item_id
        self._lookup = lookup
        self._strategies = strategies
        self._governor = governor
        self._scheduler = scheduler
        self._is_active = is_active
        self._on_equip = on_equip
        self._clock = clock
        self._pending: _Attempt | None = None
        self._generation = 0
        self._deferred_holders: list[_Deferred] = []
        self._bus: SignalBus | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def attached(self) -> bool:
        return self._bus is not None

    # --- Wiring ---

    def attach(self, bus: SignalBus) -> None:
        if self._bus is not None:
            return
        bus.subscribe("tick", self._on_tick)
        bus.subscribe("player_collect", self._on_player_collect)
        self._bus = bus

    def detach(self) -> None:
        """Stop listening and cancel deferred passes. In-flight work is left alone."""
        if self._bus is not None:
            self._bus.unsubscribe("tick", self._on_tick)
            self._bus.unsubscribe("player_collect", self._on_player_collect)
            self._bus = None
        for holder in self._deferred_holders:
            if holder.handle is not None:
                holder.handle.cancel()
        self._deferred_holders.clear()

    def invalidate(self) -> None:
        """Mark any in-flight attempt stale; its result will be dropped."""
        self._generation += 1

    def _on_tick(self, signal_name: str, data: dict[str, Any]) -> None:
        self.maintain()

    def _on_player_collect(self, signal_name: str, data: dict[str, Any]) -> None:
        if data.get("collector_id") != self._host.entity_id:
            return
        # Registered before call_later; a scheduler may run the callback inline.
        holder = _Deferred()
        self._deferred_holders.append(holder)

        def deferred() -> None:
            if holder in self._deferred_holders:
                self._deferred_holders.remove(holder)
            self.maintain()

        handle = self._scheduler.call_later(self._config.pickup_delay, deferred)
        if holder in self._deferred_holders:
            holder.handle = handle

    # --- Reconciliation ---

    def maintain(self) -> None:
        """Run one maintenance pass. Never raises."""
        try:
            self._harvest_ready()
            self._expire_overdue()

            if not self._is_active():
                return
            if not self._governor.allows_attempt():
                return
            if self._pending is not None:
                return

            self._reconcile()
        except Exception as exc:
            self._pending = None
            self._governor.record_failure(exc)

    def _reconcile(self) -> None:
        inventory = self._host.inventory
        held = self._lookup.held(inventory)
        if held is not None and held.type == self._item_id:
            self._governor.record_success()
            return

        item = find_item(inventory, self._item_id)
        if item is None:
            self._governor.record_success()
            return

        self._start_strategy(0, item)
        self._harvest_ready()

    def _start_strategy(self, index: int, item: Item) -> None:
        steps = self._strategies[index].steps(self._host, item)
        self._pending = _Attempt(
            item=item,
            strategy_index=index,
            steps=steps,
            step_index=0,
            future=_call_step(steps[0]),
            generation=self._generation,
            submitted_at=self._clock(),
        )

    def _expire_overdue(self) -> None:
        """Abandon an attempt whose current step outlived ``transfer_timeout``."""
        attempt = self._pending
        if attempt is None:
            return
        if self._clock() - attempt.submitted_at < self._config.transfer_timeout:
            return
        self._pending = None
        if attempt.generation != self._generation:
            return
        self._governor.record_failure(TransferError("transfer timed out"))

    def _harvest_ready(self) -> None:
        while self._pending is not None and self._pending.future.done():
            self._harvest(self._pending)

    def _harvest(self, attempt: _Attempt) -> None:
        error = _outcome(attempt.future)

        if attempt.generation != self._generation:
            self._pending = None
            return

        strategy = self._strategies[attempt.strategy_index]

        if error is None:
            attempt.step_index += 1
            if attempt.step_index < len(attempt.steps):
                attempt.future = _call_step(attempt.steps[attempt.step_index])
                attempt.submitted_at = self._clock()
                return
            self._pending = None
            self._governor.record_success()
            if self._on_equip is not None:
                self._on_equip(strategy.name)
            return

        next_index = attempt.strategy_index + 1
        if next_index < len(self._strategies) and self._strategies[next_index].accepts(error):
            self._start_strategy(next_index, attempt.item)
            return

        self._pending = None
        self._governor.record_failure(strategy.wrap(error))

    def snapshot(self) -> dict[str, Any]:
        attempt = self._pending
        return {
            "lookup": self._lookup.name,
            "strategies": [s.name for s in self._strategies],
            "generation": self._generation,
            "attached": self.attached,
            "deferred": len(self._deferred_holders),
            "pending": None if attempt is None else {
                "strategy": self._strategies[attempt.strategy_index].name,
                "step": attempt.step_index,
                "slot": attempt.item.slot,
                "stale": attempt.generation != self._generation,
            },
        }
