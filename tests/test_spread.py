"""Tests for SpreadPolicy placement and timing."""
import random

import pytest

from roomfire import InvalidSpawnPosition, RectRoom, SpreadPolicy
from roomfire import vec

ROOM = RectRoom(0.0, 0.0, 20.0, 20.0)


def _policy(**kwargs) -> SpreadPolicy:
    kwargs.setdefault("spread_range", 2.0)
    kwargs.setdefault("min_separation", 2.0)
    return SpreadPolicy(ROOM, **kwargs)


class TestSeparation:
    def test_midpoint_between_close_fires_rejected(self):
        policy = _policy()
        occupied = [(10.0, 10.0), (10.5, 10.0)]
        assert not policy.is_valid((10.25, 10.0), occupied)

    def test_five_units_away_accepted(self):
        policy = _policy()
        occupied = [(10.0, 10.0), (10.5, 10.0)]
        assert policy.is_valid((15.25, 10.0), occupied)

    def test_check_raises_with_position(self):
        policy = _policy()
        with pytest.raises(InvalidSpawnPosition) as info:
            policy.check((10.25, 10.0), [(10.0, 10.0)])
        assert info.value.position == (10.25, 10.0)

    def test_outside_room_rejected(self):
        policy = _policy()
        assert not policy.is_valid((25.0, 5.0), [])

    def test_fires_beyond_search_range_ignored(self):
        # A neighbour outside spread_range never rejects, whatever min_separation is.
        policy = _policy(spread_range=1.0, min_separation=1.0)
        assert policy.is_valid((5.0, 5.0), [(6.5, 5.0)])

    def test_exactly_at_separation_accepted(self):
        policy = _policy()
        assert policy.is_valid((12.0, 10.0), [(10.0, 10.0)])

    def test_first_rejecting_neighbour_short_circuits(self):
        policy = _policy()
        seen = []

        def occupied():
            for pos in [(10.0, 10.0), (10.1, 10.0), (11.0, 11.0)]:
                seen.append(pos)
                yield pos

        assert not policy.is_valid((10.0, 10.2), occupied())
        assert seen == [(10.0, 10.0)]

    def test_separation_larger_than_range_rejected(self):
        with pytest.raises(ValueError):
            SpreadPolicy(ROOM, spread_range=1.0, min_separation=2.0)


class TestCandidates:
    def test_uniform_without_history(self):
        policy = _policy()
        rng = random.Random(3)
        for _ in range(100):
            assert ROOM.contains(policy.draw_candidate(rng))

    def test_clustering_pulls_toward_history(self):
        policy = _policy(cluster_weight=0.5)
        anchor = (2.0, 2.0)
        policy.record(anchor)
        rng = random.Random(11)
        for _ in range(100):
            candidate = policy.draw_candidate(rng)
            # Halfway between a room point and the anchor: within half the room diagonal.
            assert vec.distance(candidate, anchor) <= vec.distance((20.0, 20.0), anchor) / 2 + 1e-9

    def test_zero_weight_disables_clustering(self):
        clustered = _policy(cluster_weight=0.0)
        clustered.record((2.0, 2.0))
        plain = _policy()
        assert clustered.draw_candidate(random.Random(5)) == plain.draw_candidate(random.Random(5))

    def test_history_is_bounded(self):
        policy = _policy(history_size=3)
        for i in range(10):
            policy.record((float(i), 0.0))
        assert policy.history == ((7.0, 0.0), (8.0, 0.0), (9.0, 0.0))


class TestTiming:
    def test_fixed_delay_without_jitter(self):
        policy = _policy(delay_ticks=20)
        assert policy.next_delay(random.Random(0)) == 20

    def test_jitter_range(self):
        policy = _policy(delay_ticks=20, jitter_ticks=5)
        rng = random.Random(0)
        delays = {policy.next_delay(rng) for _ in range(200)}
        assert delays <= set(range(20, 26))
        assert len(delays) > 1

    def test_certain_spread(self):
        policy = _policy(spread_chance=1.0)
        rng = random.Random(0)
        assert all(policy.roll(rng) for _ in range(50))

    def test_never_spread(self):
        policy = _policy(spread_chance=0.0)
        rng = random.Random(0)
        assert not any(policy.roll(rng) for _ in range(50))

    def test_partial_chance_is_reproducible(self):
        a = _policy(spread_chance=0.15)
        b = _policy(spread_chance=0.15)
        rng_a, rng_b = random.Random(9), random.Random(9)
        rolls = [a.roll(rng_a) for _ in range(100)]
        assert rolls == [b.roll(rng_b) for _ in range(100)]
        assert 0 < sum(rolls) < 100
