"""Error-storm governor: throttles failure reports and backs off on failure streaks."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

from tick_revive.config import RevivalConfig
from tick_revive.types import BackoffState, FallbackTransferError

# (error_type, message, failure_count) -> None
ReportFn = Callable[[str, str, int], None]


@dataclass
class FailureTracker:
    """Mutable failure bookkeeping. Times come from the governor's clock.

    Attributes:
        count: Failures since the last success or restart.
        last_reported_at: When the last report went out, None if never.
        backoff_until: End of the current backoff window, None if clear.
    """

    count: int = 0
    last_reported_at: float | None = None
    backoff_until: float | None = None


def error_type(error: BaseException) -> str:
    if isinstance(error, FallbackTransferError):
        return "fallback_error"
    return "transfer_error"


class ErrorStormGovernor:
    """Absorbs equip failures.

    Reports at most one failure per ``error_throttle`` seconds. Once the
    count passes ``failure_threshold``, every further failure opens a
    ``backoff_duration`` window in which ``allows_attempt()`` is False.
    The count only drops back to zero on success or ``reset()``.
    """

    def __init__(
        self,
        report: ReportFn,
        config: RevivalConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config if config is not None else RevivalConfig()
        self._report = report
        self._clock = clock
        self.tracker = FailureTracker()

    @property
    def count(self) -> int:
        return self.tracker.count

    @property
    def state(self) -> BackoffState:
        until = self.tracker.backoff_until
        if until is None:
            return BackoffState.CLEAR
        if self._clock() >= until:
            # Window elapsed: clear it, leave the count alone.
            self.tracker.backoff_until = None
            return BackoffState.CLEAR
        return BackoffState.BACKING_OFF

    def allows_attempt(self) -> bool:
        return self.state is BackoffState.CLEAR

    def record_failure(self, error: BaseException) -> bool:
        """Count a failure. Returns True if it was reported."""
        tracker = self.tracker
        now = self._clock()
        tracker.count += 1

        if tracker.count > self._config.failure_threshold:
            tracker.backoff_until = now + self._config.backoff_duration

        last = tracker.last_reported_at
        if last is not None and now - last < self._config.error_throttle:
            return False
        tracker.last_reported_at = now
        self._report(error_type(error), str(error), tracker.count)
        return True

    def record_success(self) -> None:
        self.tracker.count = 0

    def cancel_backoff(self) -> None:
        self.tracker.backoff_until = None

    def reset(self) -> None:
        """Restart: zero the count and drop any backoff window."""
        self.tracker.count = 0
        self.tracker.backoff_until = None

    def snapshot(self) -> dict[str, Any]:
        state = self.state
        return {
            "state": state.value,
            "count": self.tracker.count,
            "last_reported_at": self.tracker.last_reported_at,
            "backoff_until": self.tracker.backoff_until,
        }
