"""Tick-driven cooldown gate used to debounce activation signals."""
from __future__ import annotations

from typing import Any

from tick_revive.types import GateState


class CooldownGate:
    """Decrementing counter. Open at zero, cooling otherwise."""

    def __init__(self, cooldown_ticks: int = 20) -> None:
        if cooldown_ticks < 0:
            raise ValueError(f"cooldown_ticks must be >= 0, got {cooldown_ticks}")
        self._cooldown_ticks = cooldown_ticks
        self._remaining = 0

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def state(self) -> GateState:
        return GateState.OPEN if self._remaining == 0 else GateState.COOLING

    def is_open(self) -> bool:
        return self._remaining == 0

    def tick(self) -> GateState:
        """Advance one simulation tick. Never goes below zero."""
        if self._remaining > 0:
            self._remaining -= 1
        return self.state

    def arm(self) -> GateState:
        self._remaining = self._cooldown_ticks
        return self.state

    def reset(self) -> None:
        self._remaining = 0

    def snapshot(self) -> dict[str, Any]:
        return {"state": self.state.value, "remaining": self._remaining}
