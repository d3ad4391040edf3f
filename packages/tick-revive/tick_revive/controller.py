"""RevivalGuard lifecycle controller and the install() entry point."""
from __future__ import annotations

import sys
import time
from typing import Any, Callable

from tick_revive.bus import SignalBus
from tick_revive.capability import detect_capabilities
from tick_revive.config import RevivalConfig
from tick_revive.detector import ActivationDetector
from tick_revive.governor import ErrorStormGovernor
from tick_revive.host import RevivalHost, Scheduler
from tick_revive.inventory import select_slot_lookup
from tick_revive.maintainer import EquipMaintainer
from tick_revive.strategies import build_strategies
from tick_revive.types import Activity, CapabilityProfile

ACTIVATION_SIGNAL = "revival_activated"


class RevivalGuard:
    """Control surface installed on the host as ``host.revival_guard``.

    A guard whose capability check failed is inert: ``enabled`` is False
    and ``start``/``stop``/``unload`` do nothing. Activation detection is
    not affected by ``stop()``; only equip maintenance is paused.
    """

    def __init__(self, profile: CapabilityProfile) -> None:
        self.profile = profile
        self._activity = Activity.INACTIVE
        self._bus: SignalBus | None = None
        self._detector: ActivationDetector | None = None
        self._governor: ErrorStormGovernor | None = None
        self._maintainer: EquipMaintainer | None = None

        self._on_activation: list[Callable[[int], None]] = []
        self._on_failure: list[Callable[[str, str, int], None]] = []
        self._on_equip: list[Callable[[str], None]] = []

    # --- Properties ---

    @property
    def enabled(self) -> bool:
        return self._maintainer is not None

    @property
    def activity(self) -> Activity:
        return self._activity

    @property
    def is_active(self) -> bool:
        return self._activity is Activity.ACTIVE

    @property
    def detector(self) -> ActivationDetector | None:
        return self._detector

    @property
    def governor(self) -> ErrorStormGovernor | None:
        return self._governor

    @property
    def maintainer(self) -> EquipMaintainer | None:
        return self._maintainer

    # --- Callback registration ---

    def on_activation(self, cb: Callable[[int], None]) -> None:
        """Register callback fired on each debounced activation.

        Signature: (tick_number) -> None.
        """
        self._on_activation.append(cb)

    def on_failure(self, cb: Callable[[str, str, int], None]) -> None:
        """Register callback fired on each throttled failure report.

        Signature: (error_type, error_message, failure_count) -> None.
        """
        self._on_failure.append(cb)

    def on_equip(self, cb: Callable[[str], None]) -> None:
        """Register callback fired when a transfer completes.

        Signature: (strategy_name) -> None.
        """
        self._on_equip.append(cb)

    # --- Lifecycle ---

    def start(self) -> None:
        """Resume equip maintenance with a clean failure record."""
        if self._maintainer is None or self._bus is None:
            return
        if self._activity is Activity.ACTIVE:
            return
        self._activity = Activity.ACTIVE
        assert self._governor is not None
        self._governor.reset()
        self._maintainer.attach(self._bus)

    def stop(self) -> None:
        """Pause equip maintenance. Results of in-flight transfers are dropped."""
        if self._maintainer is None:
            return
        if self._activity is Activity.INACTIVE:
            return
        self._activity = Activity.INACTIVE
        assert self._governor is not None
        self._governor.cancel_backoff()
        self._maintainer.detach()
        self._maintainer.invalidate()

    def unload(self) -> None:
        self.stop()

    def snapshot(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "activity": self._activity.value,
            "profile": {
                "revival_item_id": self.profile.revival_item_id,
                "offhand_supported": self.profile.offhand_supported,
            },
            "detector": None if self._detector is None else self._detector.snapshot(),
            "governor": None if self._governor is None else self._governor.snapshot(),
            "maintainer": (
                None if self._maintainer is None else self._maintainer.snapshot()
            ),
        }

    # --- Internal ---

    def _wire(
        self,
        host: RevivalHost,
        bus: SignalBus,
        scheduler: Scheduler,
        config: RevivalConfig,
        clock: Callable[[], float],
    ) -> bool:
        assert self.profile.revival_item_id is not None
        lookup = select_slot_lookup(host.inventory, config.offhand_slot)
        if lookup is None:
            return False

        self._bus = bus
        self._detector = ActivationDetector(
            entity_id=host.entity_id,
            initial_health=host.health,
            emit=self._emit_activation,
            config=config,
        )
        self._governor = ErrorStormGovernor(
            report=self._report_failure, config=config, clock=clock,
        )
        self._maintainer = EquipMaintainer(
            host=host,
            item_id=self.profile.revival_item_id,
            lookup=lookup,
            strategies=build_strategies(host, config),
            governor=self._governor,
            scheduler=scheduler,
            is_active=lambda: self._activity is Activity.ACTIVE,
            on_equip=self._fire_on_equip,
            config=config,
            clock=clock,
        )
        self._detector.attach(bus)
        return True

    def _emit_activation(self, tick: int) -> None:
        assert self._bus is not None
        for cb in self._on_activation:
            try:
                cb(tick)
            except Exception:
                print(
                    f"tick-revive: on_activation callback error: {sys.exc_info()[1]}",
                    file=sys.stderr,
                )
        try:
            self._bus.emit(ACTIVATION_SIGNAL)
        except Exception:
            print(
                f"tick-revive: {ACTIVATION_SIGNAL} subscriber error: {sys.exc_info()[1]}",
                file=sys.stderr,
            )

    def _report_failure(self, error_type: str, message: str, count: int) -> None:
        if not self._on_failure:
            print(
                f"tick-revive: {error_type} after {count} failure(s): {message}",
                file=sys.stderr,
            )
            return
        for cb in self._on_failure:
            try:
                cb(error_type, message, count)
            except Exception:
                print(
                    f"tick-revive: on_failure callback error: {sys.exc_info()[1]}",
                    file=sys.stderr,
                )

    def _fire_on_equip(self, strategy_name: str) -> None:
        for cb in self._on_equip:
            try:
                cb(strategy_name)
            except Exception:
                print(
                    f"tick-revive: on_equip callback error: {sys.exc_info()[1]}",
                    file=sys.stderr,
                )


def install(
    host: RevivalHost,
    bus: SignalBus,
    scheduler: Scheduler,
    config: RevivalConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> RevivalGuard:
    """Install the revival guard on a host agent.

    Returns an inert guard, leaving the host untouched, when the game data
    has no revival item, the protocol predates the secondary slot, or the
    inventory exposes no recognisable secondary slot. Otherwise the guard
    is wired to ``bus``, set as ``host.revival_guard`` and started. A host
    that already carries a guard gets that guard back unchanged.
    """
    existing = getattr(host, "revival_guard", None)
    if isinstance(existing, RevivalGuard):
        return existing
    cfg = config if config is not None else RevivalConfig()
    profile = detect_capabilities(host.items_by_name, host.version, cfg)
    guard = RevivalGuard(profile)
    if not profile.supported:
        return guard
    if not guard._wire(host, bus, scheduler, cfg, clock):
        return guard
    setattr(host, "revival_guard", guard)
    guard.start()
    return guard
