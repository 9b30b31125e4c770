"""Tests for the FireAgent state machine."""
import pytest

from roomfire import FireAgent, FireState


def _fire(intensity: float = 1.0) -> FireAgent:
    return FireAgent(id=0, position=(1.0, 2.0), intensity=intensity)


class TestLifecycle:
    def test_starts_spawning_and_burning(self):
        fire = _fire()
        assert fire.state is FireState.SPAWNING
        assert fire.burning
        assert not fire.can_spread

    def test_ignite_arms_timer_once(self):
        fire = _fire()
        assert fire.ignite(20)
        assert fire.state is FireState.ACTIVE
        assert fire.spread_timer == 20
        assert fire.can_spread
        assert not fire.ignite(5)
        assert fire.spread_timer == 20

    def test_no_cycle_back_to_spawning(self):
        fire = _fire()
        fire.ignite(20)
        with pytest.raises(ValueError):
            fire.transition(FireState.SPAWNING)

    def test_extinguished_is_terminal(self):
        fire = _fire()
        fire.transition(FireState.EXTINGUISHED)
        for target in FireState:
            with pytest.raises(ValueError):
                fire.transition(target)


class TestReduce:
    def test_four_hits_of_point_three(self):
        fire = _fire(1.0)
        fire.ignite(20)
        results = []
        intensities = []
        for _ in range(4):
            results.append(fire.reduce(0.3, threshold=0.1))
            intensities.append(fire.intensity)
        assert intensities[:3] == pytest.approx([0.7, 0.4, 0.1])
        assert results == [False, False, True, False]
        assert fire.state is FireState.EXTINGUISHED
        # The fourth hit changed nothing.
        assert intensities[3] == intensities[2]

    def test_surviving_hit_suppresses_spreading(self):
        fire = _fire(1.0)
        fire.ignite(20)
        fire.reduce(0.2, threshold=0.1)
        assert fire.state is FireState.EXTINGUISHING
        assert fire.burning
        assert not fire.can_spread

    def test_intensity_clamped_at_zero(self):
        fire = _fire(0.5)
        assert fire.reduce(5.0, threshold=0.1)
        assert fire.intensity == 0.0

    def test_spawning_fire_can_be_put_out(self):
        fire = _fire(0.3)
        assert fire.reduce(0.25, threshold=0.1)
        assert fire.state is FireState.EXTINGUISHED

    def test_zero_amount_is_not_a_hit(self):
        fire = _fire(1.0)
        fire.ignite(20)
        assert not fire.reduce(0.0, threshold=0.1)
        assert fire.intensity == 1.0
        assert fire.state is FireState.ACTIVE


def test_to_dict():
    fire = FireAgent(id=4, position=(1.5, 2.5), intensity=1.1, born_tick=7, parent=2)
    assert fire.to_dict() == {
        "id": 4,
        "position": [1.5, 2.5],
        "intensity": 1.1,
        "state": "spawning",
        "parent": 2,
        "born_tick": 7,
    }
