"""Activation detector: fuses the health heuristic and the server status signal.

Neither signal is reliable alone. A health jump out of the near-death band
can be a large heal, and the status packet is not sent by every server.
Both feed one emission point guarded by a CooldownGate, so a single
revival that trips both signals is reported once.
"""
from __future__ import annotations

from typing import Any, Callable

from tick_revive.bus import SignalBus
from tick_revive.config import RevivalConfig
from tick_revive.cooldown import CooldownGate


class ActivationDetector:
    """Emits a debounced activation when the revival item appears to trigger.

    Args:
        entity_id: The agent's own entity id; status signals for other
            entities are ignored.
        initial_health: Health at install time, the first previous sample.
        emit: Called with the tick number of each accepted activation.
        config: Thresholds and cooldown length.
    """

    def __init__(
        self,
        entity_id: int,
        initial_health: float,
        emit: Callable[[int], None],
        config: RevivalConfig | None = None,
    ) -> None:
        self._config = config if config is not None else RevivalConfig()
        self._entity_id = entity_id
        self._last_health = initial_health
        self._emit = emit
        self._gate = CooldownGate(self._config.cooldown_ticks)
        self._tick_number = 0
        self._bus: SignalBus | None = None

    @property
    def gate(self) -> CooldownGate:
        return self._gate

    @property
    def last_health(self) -> float:
        return self._last_health

    # --- Wiring ---

    def attach(self, bus: SignalBus) -> None:
        if self._bus is not None:
            return
        bus.subscribe("tick", self._on_tick)
        bus.subscribe("health", self._on_health)
        bus.subscribe("entity_status", self._on_entity_status)
        self._bus = bus

    def detach(self) -> None:
        if self._bus is None:
            return
        self._bus.unsubscribe("tick", self._on_tick)
        self._bus.unsubscribe("health", self._on_health)
        self._bus.unsubscribe("entity_status", self._on_entity_status)
        self._bus = None

    def _on_tick(self, signal_name: str, data: dict[str, Any]) -> None:
        self.tick()

    def _on_health(self, signal_name: str, data: dict[str, Any]) -> None:
        self.observe_health(data["health"])

    def _on_entity_status(self, signal_name: str, data: dict[str, Any]) -> None:
        self.observe_status(data["entity_id"], data["status"])

    # --- Signals ---

    def tick(self) -> None:
        self._tick_number += 1
        self._gate.tick()

    def observe_health(self, health: float) -> bool:
        """Record a health sample. Returns True if it produced an activation."""
        previous = self._last_health
        if health == previous:
            return False
        self._last_health = health
        was_near_death = previous <= self._config.near_death_health
        jumped_up = health > previous and health > self._config.revived_health_floor
        if was_near_death and jumped_up:
            return self._fire()
        return False

    def observe_status(self, entity_id: int, status: int) -> bool:
        """Handle a raw entity status. Returns True if it produced an activation."""
        if entity_id != self._entity_id or status != self._config.revival_status_code:
            return False
        return self._fire()

    def _fire(self) -> bool:
        if not self._gate.is_open():
            return False
        self._gate.arm()
        self._emit(self._tick_number)
        return True

    def reset(self, health: float) -> None:
        self._last_health = health
        self._gate.reset()

    def snapshot(self) -> dict[str, Any]:
        return {
            "last_health": self._last_health,
            "tick_number": self._tick_number,
            "gate": self._gate.snapshot(),
        }
