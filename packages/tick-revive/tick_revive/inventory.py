"""Secondary-slot lookups for the two inventory shapes hosts expose."""
from __future__ import annotations

from typing import Protocol

from tick_revive.host import InventoryView
from tick_revive.types import Item


class SlotLookup(Protocol):
    """Reads whatever item currently occupies the secondary slot."""

    name: str

    def held(self, inventory: InventoryView) -> Item | None:
        ...


class IndexedSlotLookup:
    """Secondary slot addressed as a fixed window-slot index."""

    name = "indexed"

    def __init__(self, slot: int = 45) -> None:
        self.slot = slot

    def held(self, inventory: InventoryView) -> Item | None:
        slots = inventory.slots  # type: ignore[attr-defined]
        if self.slot >= len(slots):
            return None
        return slots[self.slot]


class OffhandCollectionLookup:
    """Secondary slot exposed as a dedicated ``offhand`` collection."""

    name = "offhand"

    def held(self, inventory: InventoryView) -> Item | None:
        offhand = inventory.offhand  # type: ignore[attr-defined]
        if not offhand:
            return None
        return offhand[0]


def select_slot_lookup(inventory: InventoryView, slot: int = 45) -> SlotLookup | None:
    """Pick the lookup matching the inventory model. None if neither fits."""
    slots = getattr(inventory, "slots", None)
    if slots is not None and len(slots) > slot:
        return IndexedSlotLookup(slot)
    if getattr(inventory, "offhand", None) is not None:
        return OffhandCollectionLookup()
    return None


def find_item(inventory: InventoryView, item_id: int) -> Item | None:
    """First general-inventory stack of the given type, in host order."""
    for item in inventory.items():
        if item is not None and item.type == item_id:
            return item
    return None
