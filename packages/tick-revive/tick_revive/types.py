"""Core data types, state enums and errors for the revival guard."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Item:
    """An item stack as seen through the host inventory.

    Attributes:
        type: Numeric item id from the active game data.
        slot: Window slot index the stack currently occupies.
        name: Game-data name, informational only.
        count: Stack size.
    """

    type: int
    slot: int
    name: str = ""
    count: int = 1


@dataclass(frozen=True)
class CapabilityProfile:
    """What the active game revision supports. Derived once at install."""

    revival_item_id: int | None
    offhand_supported: bool

    @property
    def supported(self) -> bool:
        return self.revival_item_id is not None and self.offhand_supported


class GateState(Enum):
    OPEN = "open"
    COOLING = "cooling"


class Activity(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BackoffState(Enum):
    CLEAR = "clear"
    BACKING_OFF = "backing_off"


class TransferError(Exception):
    """Raised (or set on a future) when moving an item between slots fails."""


class UnsupportedDestinationError(TransferError):
    """The primary equip mechanism cannot address the destination slot."""

    def __init__(self, destination: str) -> None:
        self.destination = destination
        super().__init__(f"invalid destination: {destination}")


class FallbackTransferError(TransferError):
    """A fallback strategy failed. The original error is chained as __cause__."""

    def __init__(self, strategy: str, message: str) -> None:
        self.strategy = strategy
        super().__init__(f"Failed alternative equip method ({strategy}): {message}")
