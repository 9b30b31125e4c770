"""Tests for the EvacuationController escalation state machine."""
import pytest

from roomfire import EvacuationController, EvacuationPhase as P


def _controller(countdown_ticks=10, transitions=None):
    def on_transition(old, new):
        if transitions is not None:
            transitions.append((old, new))

    return EvacuationController(80.0, 90.0, 100.0, countdown_ticks, on_transition)


class TestTiers:
    def test_normal_below_warning(self):
        ctrl = _controller()
        assert ctrl.poll(79.9) == []
        assert ctrl.phase is P.NORMAL

    def test_warning_band(self):
        ctrl = _controller()
        assert ctrl.poll(85.0) == [(P.NORMAL, P.WARNING)]

    def test_critical_band(self):
        ctrl = _controller()
        ctrl.poll(85.0)
        assert ctrl.poll(95.0) == [(P.WARNING, P.CRITICAL)]

    def test_jump_walks_every_tier(self):
        ctrl = _controller()
        assert ctrl.poll(100.0) == [
            (P.NORMAL, P.WARNING),
            (P.WARNING, P.CRITICAL),
            (P.CRITICAL, P.TRIGGERED),
            (P.TRIGGERED, P.FINAL_COUNTDOWN),
        ]
        assert ctrl.triggered
        assert ctrl.countdown_remaining == 10

    def test_target_for(self):
        ctrl = _controller()
        assert ctrl.target_for(20.0) is P.NORMAL
        assert ctrl.target_for(80.0) is P.WARNING
        assert ctrl.target_for(90.0) is P.CRITICAL
        assert ctrl.target_for(100.0) is P.FINAL_COUNTDOWN


class TestMonotonic:
    def test_cooling_never_regresses(self):
        transitions = []
        ctrl = _controller(transitions=transitions)
        seen = []
        for reading in (85.0, 70.0, 95.0, 50.0, 20.0, 100.0, 20.0):
            ctrl.poll(reading)
            seen.append(ctrl.phase)
        assert seen == sorted(seen)
        for old, new in transitions:
            assert new > old

    def test_cooling_after_trigger_does_not_untrigger(self):
        ctrl = _controller()
        ctrl.poll(100.0)
        ctrl.poll(20.0)
        assert ctrl.phase is P.FINAL_COUNTDOWN
        assert ctrl.triggered


class TestLatch:
    def test_two_polls_at_max_start_one_countdown(self):
        transitions = []
        ctrl = _controller(countdown_ticks=10, transitions=transitions)
        ctrl.poll(100.0)
        ctrl.tick()
        assert ctrl.poll(100.0) == []
        assert ctrl.countdowns_started == 1
        assert ctrl.countdown_remaining == 9
        assert sum(1 for _, new in transitions if new is P.TRIGGERED) == 1


class TestCountdown:
    def test_counts_down_to_over(self):
        ctrl = _controller(countdown_ticks=3)
        ctrl.poll(100.0)
        assert ctrl.tick() is None
        assert ctrl.tick() is None
        assert ctrl.tick() == (P.FINAL_COUNTDOWN, P.OVER)
        assert ctrl.over
        assert ctrl.countdown_remaining == 0

    def test_tick_is_inert_before_trigger_and_after_over(self):
        ctrl = _controller(countdown_ticks=1)
        assert ctrl.tick() is None
        assert ctrl.countdown_remaining is None
        ctrl.poll(100.0)
        ctrl.tick()
        assert ctrl.tick() is None
        assert ctrl.poll(100.0) == []
        assert ctrl.phase is P.OVER


class TestValidation:
    def test_threshold_order(self):
        with pytest.raises(ValueError):
            EvacuationController(90.0, 80.0, 100.0, 10)

    def test_countdown_positive(self):
        with pytest.raises(ValueError):
            EvacuationController(80.0, 90.0, 100.0, 0)
