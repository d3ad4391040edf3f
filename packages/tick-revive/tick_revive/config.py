"""Revival guard configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RevivalConfig:
    """Immutable configuration for the revival guard.

    Attributes:
        item_name: Game-data name of the revival item.
        cooldown_ticks: Ticks an accepted activation suppresses further ones.
        near_death_health: Health at or below which the agent counts as dying.
        revived_health_floor: Health must rise above this to count as revived.
        revival_status_code: Entity status code the server sends on revival.
        offhand_slot: Window slot index of the secondary slot.
        offhand_destination: Destination name passed to the host's equip action.
        min_offhand_version: First (major, minor) protocol with a secondary slot.
        pickup_delay: Seconds between a pickup and the fast-path equip pass.
        error_throttle: Seconds between two failure reports.
        failure_threshold: Failures tolerated before backing off.
        backoff_duration: Seconds equip attempts pause once backing off.
        transfer_timeout: Seconds an unresolved transfer step is waited on.
    """

    item_name: str = "totem_of_undying"
    cooldown_ticks: int = 20
    near_death_health: float = 4
    revived_health_floor: float = 1
    revival_status_code: int = 35
    offhand_slot: int = 45
    offhand_destination: str = "offhand"
    min_offhand_version: tuple[int, int] = (1, 9)
    pickup_delay: float = 0.05
    error_throttle: float = 10.0
    failure_threshold: int = 10
    backoff_duration: float = 5.0
    transfer_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.item_name:
            raise ValueError("item_name must be non-empty")
        if self.cooldown_ticks < 0:
            raise ValueError(f"cooldown_ticks must be >= 0, got {self.cooldown_ticks}")
        if self.offhand_slot < 0:
            raise ValueError(f"offhand_slot must be >= 0, got {self.offhand_slot}")
        if self.pickup_delay < 0:
            raise ValueError(f"pickup_delay must be >= 0, got {self.pickup_delay}")
        if self.error_throttle <= 0:
            raise ValueError(f"error_throttle must be > 0, got {self.error_throttle}")
        if self.failure_threshold < 0:
            raise ValueError(
                f"failure_threshold must be >= 0, got {self.failure_threshold}"
            )
        if self.backoff_duration <= 0:
            raise ValueError(
                f"backoff_duration must be > 0, got {self.backoff_duration}"
            )
        if self.transfer_timeout <= 0:
            raise ValueError(
                f"transfer_timeout must be > 0, got {self.transfer_timeout}"
            )
