"""tick-revive - Revival item activation detection and offhand upkeep for game agents."""
from __future__ import annotations

from tick_revive.bus import SignalBus
from tick_revive.capability import detect_capabilities, offhand_supported, parse_version
from tick_revive.config import RevivalConfig
from tick_revive.controller import ACTIVATION_SIGNAL, RevivalGuard, install
from tick_revive.cooldown import CooldownGate
from tick_revive.detector import ActivationDetector
from tick_revive.governor import ErrorStormGovernor, FailureTracker
from tick_revive.host import Cancellable, InventoryView, RevivalHost, Scheduler
from tick_revive.inventory import (
    IndexedSlotLookup,
    OffhandCollectionLookup,
    SlotLookup,
    find_item,
    select_slot_lookup,
)
from tick_revive.maintainer import EquipMaintainer
from tick_revive.mock import (
    ManualScheduler,
    MockAgent,
    MockWindowAgent,
    OffhandInventory,
    SlotInventory,
)
from tick_revive.strategies import (
    ManualClick,
    PrimaryEquip,
    TransferStrategy,
    build_strategies,
    is_unsupported_destination,
)
from tick_revive.types import (
    Activity,
    BackoffState,
    CapabilityProfile,
    FallbackTransferError,
    GateState,
    Item,
    TransferError,
    UnsupportedDestinationError,
)

__all__ = [
    "ACTIVATION_SIGNAL",
    "ActivationDetector",
    "Activity",
    "BackoffState",
    "Cancellable",
    "CapabilityProfile",
    "CooldownGate",
    "EquipMaintainer",
    "ErrorStormGovernor",
    "FailureTracker",
    "FallbackTransferError",
    "GateState",
    "IndexedSlotLookup",
    "InventoryView",
    "Item",
    "ManualClick",
    "ManualScheduler",
    "MockAgent",
    "MockWindowAgent",
    "OffhandCollectionLookup",
    "OffhandInventory",
    "PrimaryEquip",
    "RevivalConfig",
    "RevivalGuard",
    "RevivalHost",
    "Scheduler",
    "SignalBus",
    "SlotInventory",
    "SlotLookup",
    "TransferError",
    "TransferStrategy",
    "UnsupportedDestinationError",
    "build_strategies",
    "detect_capabilities",
    "find_item",
    "install",
    "is_unsupported_destination",
    "offhand_supported",
    "parse_version",
    "select_slot_lookup",
]
