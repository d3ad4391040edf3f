"""Tests for ActivationDetector."""
from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from tick_revive import ActivationDetector, GateState, RevivalConfig, SignalBus

SELF_ID = 7


def _detector(initial_health: float = 20) -> tuple[ActivationDetector, list[int]]:
    fired: list[int] = []
    detector = ActivationDetector(
        entity_id=SELF_ID, initial_health=initial_health, emit=fired.append,
    )
    return detector, fired


class TestHealthSignal:
    def test_near_death_then_jump(self) -> None:
        """Health 20 -> 3 -> 15 is one activation."""
        detector, fired = _detector(20)
        detector.observe_health(3)
        detector.observe_health(15)
        assert len(fired) == 1

    def test_keeps_falling(self) -> None:
        """Health 20 -> 3 -> 2 never jumps back up."""
        detector, fired = _detector(20)
        detector.observe_health(3)
        detector.observe_health(2)
        assert fired == []

    def test_jump_must_clear_floor(self) -> None:
        """Rising from 0.5 to 1 stays at the floor and does not count."""
        detector, fired = _detector(0.5)
        detector.observe_health(1)
        assert fired == []
        detector.observe_health(1.5)
        assert len(fired) == 1

    def test_threshold_is_inclusive(self) -> None:
        detector, fired = _detector(4)
        detector.observe_health(6)
        assert len(fired) == 1

    def test_not_near_death(self) -> None:
        detector, fired = _detector(5)
        detector.observe_health(20)
        assert fired == []

    def test_unchanged_health_ignored(self) -> None:
        detector, fired = _detector(3)
        assert detector.observe_health(3) is False
        assert detector.last_health == 3
        assert fired == []

    def test_tracks_last_sample(self) -> None:
        detector, _ = _detector(20)
        detector.observe_health(12)
        assert detector.last_health == 12


class TestStatusSignal:
    def test_matching_status_fires(self) -> None:
        detector, fired = _detector()
        assert detector.observe_status(SELF_ID, 35) is True
        assert len(fired) == 1

    def test_other_entity_ignored(self) -> None:
        detector, fired = _detector()
        assert detector.observe_status(SELF_ID + 1, 35) is False
        assert fired == []

    def test_other_status_ignored(self) -> None:
        detector, fired = _detector()
        assert detector.observe_status(SELF_ID, 3) is False
        assert fired == []

    def test_repeat_within_cooldown_suppressed(self) -> None:
        """Second status 5 ticks later is swallowed by the gate."""
        detector, fired = _detector()
        detector.observe_status(SELF_ID, 35)
        for _ in range(5):
            detector.tick()
        assert detector.observe_status(SELF_ID, 35) is False
        assert len(fired) == 1
        assert detector.gate.state is GateState.COOLING

    def test_repeat_after_cooldown_fires(self) -> None:
        detector, fired = _detector()
        detector.observe_status(SELF_ID, 35)
        for _ in range(20):
            detector.tick()
        assert detector.observe_status(SELF_ID, 35) is True
        assert fired == [0, 20]


class TestFusion:
    def test_health_jump_then_status_counts_once(self) -> None:
        detector, fired = _detector(20)
        detector.observe_health(2)
        detector.observe_health(10)
        detector.tick()
        detector.observe_status(SELF_ID, 35)
        assert len(fired) == 1

    def test_status_then_health_jump_counts_once(self) -> None:
        detector, fired = _detector(3)
        detector.observe_status(SELF_ID, 35)
        detector.observe_health(10)
        assert len(fired) == 1

    def test_emit_receives_tick_number(self) -> None:
        detector, fired = _detector(20)
        for _ in range(3):
            detector.tick()
        detector.observe_status(SELF_ID, 35)
        assert fired == [3]


class TestWiring:
    def test_attach_drives_from_bus(self) -> None:
        bus = SignalBus()
        detector, fired = _detector(20)
        detector.attach(bus)
        bus.emit("health", health=3)
        bus.emit("health", health=15)
        assert len(fired) == 1
        bus.emit("tick")
        assert detector.gate.remaining == 19

    def test_entity_status_from_bus(self) -> None:
        bus = SignalBus()
        detector, fired = _detector()
        detector.attach(bus)
        bus.emit("entity_status", entity_id=SELF_ID, status=35)
        assert len(fired) == 1

    def test_attach_twice_subscribes_once(self) -> None:
        bus = SignalBus()
        detector, fired = _detector()
        detector.attach(bus)
        detector.attach(bus)
        bus.emit("entity_status", entity_id=SELF_ID, status=35)
        bus.emit("tick")
        assert detector.gate.remaining == 19

    def test_detach(self) -> None:
        bus = SignalBus()
        detector, fired = _detector()
        detector.attach(bus)
        detector.detach()
        bus.emit("entity_status", entity_id=SELF_ID, status=35)
        assert fired == []

    def test_custom_config(self) -> None:
        config = RevivalConfig(cooldown_ticks=2, near_death_health=6, revival_status_code=99)
        fired: list[int] = []
        detector = ActivationDetector(SELF_ID, 6, fired.append, config)
        detector.observe_health(8)
        detector.tick()
        detector.tick()
        detector.observe_status(SELF_ID, 99)
        assert fired == [0, 2]

    def test_snapshot(self) -> None:
        detector, _ = _detector(20)
        detector.tick()
        detector.observe_status(SELF_ID, 35)
        assert detector.snapshot() == {
            "last_health": 20,
            "tick_number": 1,
            "gate": {"state": "cooling", "remaining": 20},
        }


# ---------------------------------------------------------------------------
# Property tests
# ---------------------------------------------------------------------------

_events = st.lists(
    st.one_of(
        st.tuples(st.just("tick"), st.integers(min_value=1, max_value=25)),
        st.tuples(st.just("health"), st.integers(min_value=0, max_value=20)),
        st.tuples(st.just("status"), st.sampled_from([35, 3])),
    ),
    max_size=60,
)


def _reference_activations(initial: int, events: list[tuple[str, int]]) -> int:
    """Count activations straight from the rule: near death, then a real jump."""
    previous = initial
    cooling = 0
    count = 0
    for kind, value in events:
        if kind == "tick":
            cooling = max(0, cooling - value)
        elif kind == "status":
            if value == 35 and cooling == 0:
                count += 1
                cooling = 20
        elif value != previous:
            if previous <= 4 and value > previous and value > 1 and cooling == 0:
                count += 1
                cooling = 20
            previous = value
    return count


def _replay(detector: ActivationDetector, events: list[tuple[str, int]]) -> None:
    for kind, value in events:
        if kind == "tick":
            for _ in range(value):
                detector.tick()
        elif kind == "status":
            detector.observe_status(SELF_ID, value)
        else:
            detector.observe_health(value)


@given(initial=st.integers(min_value=0, max_value=20), events=_events)
def test_activations_match_health_rule(initial: int, events: list[tuple[str, int]]) -> None:
    detector, fired = _detector(initial)
    _replay(detector, events)
    assert len(fired) == _reference_activations(initial, events)


@given(initial=st.integers(min_value=0, max_value=20), events=_events)
def test_activations_at_least_cooldown_apart(
    initial: int, events: list[tuple[str, int]],
) -> None:
    detector, fired = _detector(initial)
    _replay(detector, events)
    for earlier, later in zip(fired, fired[1:]):
        assert later - earlier >= 20


@given(events=st.lists(st.integers(min_value=0, max_value=20), max_size=40))
def test_health_only_needs_near_death_first(events: list[int]) -> None:
    """Without ticks a health-only stream can activate at most once."""
    detector, fired = _detector(20)
    for value in events:
        detector.observe_health(value)
    assert len(fired) <= 1
    if fired:
        pairs = list(zip([20] + events, events))
        assert any(p <= 4 and c > p and c > 1 for p, c in pairs)
