"""Tests for room geometry."""
import random

import pytest

from roomfire import ConfigError, InvalidSpawnPosition, PolygonRoom, RectRoom, SpreadPolicy
from roomfire.room import room_from_dict, room_to_dict


class _MidpointRandom(random.Random):
    """Always draws the middle of the requested range."""

    def uniform(self, a, b):
        return (a + b) / 2


class TestRectRoom:
    def test_contains_is_edge_inclusive(self):
        room = RectRoom(0.0, 0.0, 10.0, 5.0)
        assert room.contains((0.0, 0.0))
        assert room.contains((10.0, 5.0))
        assert not room.contains((10.01, 2.0))
        assert not room.contains((5.0, -0.1))

    def test_samples_stay_inside(self):
        room = RectRoom(2.0, 3.0, 4.0, 9.0)
        rng = random.Random(1)
        for _ in range(200):
            assert room.contains(room.sample(rng))

    def test_zero_area_rejected(self):
        with pytest.raises(ConfigError):
            RectRoom(0.0, 0.0, 0.0, 5.0)


class TestPolygonRoom:
    # L-shaped room: the square (5..10, 5..10) is missing.
    L_ROOM = ((0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (5.0, 5.0), (5.0, 10.0), (0.0, 10.0))

    def test_contains(self):
        room = PolygonRoom(self.L_ROOM)
        assert room.contains((2.0, 2.0))
        assert room.contains((8.0, 2.0))
        assert room.contains((2.0, 8.0))
        assert not room.contains((8.0, 8.0))
        assert not room.contains((-1.0, 2.0))

    def test_samples_stay_inside(self):
        room = PolygonRoom(self.L_ROOM)
        rng = random.Random(7)
        for _ in range(200):
            assert room.contains(room.sample(rng))

    def test_fallback_point_may_be_rejected(self):
        # U-shaped room whose vertex centroid (1.5, 1.75) sits in the notch.
        room = PolygonRoom(((0.0, 0.0), (3.0, 0.0), (3.0, 3.0), (2.0, 3.0),
                            (2.0, 1.0), (1.0, 1.0), (1.0, 3.0), (0.0, 3.0)))
        point = room.sample(_MidpointRandom())
        assert point == (1.5, 1.75)
        assert not room.contains(point)
        with pytest.raises(InvalidSpawnPosition):
            SpreadPolicy(room).check(point, [])

    def test_bounds(self):
        assert PolygonRoom(self.L_ROOM).bounds() == ((0.0, 0.0), (10.0, 10.0))

    def test_needs_three_vertices(self):
        with pytest.raises(ConfigError):
            PolygonRoom(((0.0, 0.0), (1.0, 1.0)))

    def test_collinear_rejected(self):
        with pytest.raises(ConfigError):
            PolygonRoom(((0.0, 0.0), (1.0, 1.0), (2.0, 2.0)))


class TestRoomFromDict:
    def test_rect(self):
        room = room_from_dict({"type": "rect", "min": [0, 0], "max": [4, 3]})
        assert room == RectRoom(0.0, 0.0, 4.0, 3.0)

    def test_polygon_round_trip(self):
        room = PolygonRoom(((0.0, 0.0), (4.0, 0.0), (2.0, 3.0)))
        assert room_from_dict(room_to_dict(room)) == room

    def test_unknown_type(self):
        with pytest.raises(ConfigError):
            room_from_dict({"type": "circle"})

    def test_missing_field(self):
        with pytest.raises(ConfigError):
            room_from_dict({"type": "rect", "min": [0, 0]})
