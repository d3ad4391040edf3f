"""Ordered transfer strategies for moving the revival item into the secondary slot."""
from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Protocol

from tick_revive.config import RevivalConfig
from tick_revive.host import RevivalHost
from tick_revive.types import FallbackTransferError, Item, UnsupportedDestinationError

# One asynchronous action of a strategy.
Step = Callable[[], "Future[None]"]


def is_unsupported_destination(error: BaseException) -> bool:
    """True if the error says the equip mechanism cannot reach the slot."""
    if isinstance(error, UnsupportedDestinationError):
        return True
    return "invalid destination" in str(error)


class TransferStrategy(Protocol):
    """A way of getting an item into the secondary slot.

    Strategies are tried in list order. The first one always runs; each
    later one runs only if it ``accepts`` the error the previous one
    failed with.
    """

    name: str

    def accepts(self, error: BaseException) -> bool:
        ...

    def steps(self, host: RevivalHost, item: Item) -> list[Step]:
        ...

    def wrap(self, error: BaseException) -> BaseException:
        ...


class PrimaryEquip:
    """Ask the host to equip the item to the secondary destination."""

    name = "equip"

    def __init__(self, config: RevivalConfig) -> None:
        self._destination = config.offhand_destination

    def accepts(self, error: BaseException) -> bool:
        return False

    def steps(self, host: RevivalHost, item: Item) -> list[Step]:
        return [lambda: host.equip(item, self._destination)]

    def wrap(self, error: BaseException) -> BaseException:
        return error


class ManualClick:
    """Pick the stack up from its slot, then drop it on the secondary slot.

    Only used when the primary equip rejects the destination itself.
    """

    name = "manual_click"

    def __init__(self, config: RevivalConfig) -> None:
        self._offhand_slot = config.offhand_slot

    def accepts(self, error: BaseException) -> bool:
        return is_unsupported_destination(error)

    def steps(self, host: RevivalHost, item: Item) -> list[Step]:
        click_slot = getattr(host, "click_slot")
        return [
            lambda: click_slot(item.slot, 0, 0),
            lambda: click_slot(self._offhand_slot, 0, 0),
        ]

    def wrap(self, error: BaseException) -> BaseException:
        wrapped = FallbackTransferError(self.name, str(error))
        wrapped.__cause__ = error
        return wrapped


def build_strategies(host: RevivalHost, config: RevivalConfig) -> list[TransferStrategy]:
    """Strategies the host can run, primary first."""
    strategies: list[TransferStrategy] = [PrimaryEquip(config)]
    if callable(getattr(host, "click_slot", None)):
        strategies.append(ManualClick(config))
    return strategies
