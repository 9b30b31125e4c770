"""Room geometry: the region of legal fire coordinates."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Protocol, Union

from roomfire.types import ConfigError, Position
from roomfire.vec import as_position

_MAX_SAMPLE_TRIES = 256


class Room(Protocol):
    def contains(self, position: Position) -> bool: ...

    def sample(self, rng: random.Random) -> Position: ...

    def bounds(self) -> tuple[Position, Position]: ...


@dataclass(frozen=True)
class RectRoom:
    """Axis-aligned rectangle, edges inclusive."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise ConfigError(
                f"Room rectangle has no area: ({self.min_x}, {self.min_y})"
                f" to ({self.max_x}, {self.max_y})"
            )

    def contains(self, position: Position) -> bool:
        x, y = position
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def sample(self, rng: random.Random) -> Position:
        return (
            rng.uniform(self.min_x, self.max_x),
            rng.uniform(self.min_y, self.max_y),
        )

    def bounds(self) -> tuple[Position, Position]:
        return (self.min_x, self.min_y), (self.max_x, self.max_y)


@dataclass(frozen=True)
class PolygonRoom:
    """Simple polygon given by its vertices in order (either winding).

    Points on the boundary may be reported either way; sampling draws from the
    bounding box and rejects points outside the polygon.
    """

    vertices: tuple[Position, ...]

    def __post_init__(self) -> None:
        if len(self.vertices) < 3:
            raise ConfigError("Polygon room needs at least 3 vertices")
        if _signed_area(self.vertices) == 0.0:
            raise ConfigError("Polygon room has no area")

    def contains(self, position: Position) -> bool:
        # Even-odd ray casting.
        x, y = position
        inside = False
        n = len(self.vertices)
        for i in range(n):
            x1, y1 = self.vertices[i]
            x2, y2 = self.vertices[(i + 1) % n]
            if (y1 > y) != (y2 > y):
                x_cross = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
                if x < x_cross:
                    inside = not inside
        return inside

    def sample(self, rng: random.Random) -> Position:
        """Uniform point inside the room, by rejection over the bounding box.

        Not guaranteed to be inside: see the fallback below.
        """
        (min_x, min_y), (max_x, max_y) = self.bounds()
        for _ in range(_MAX_SAMPLE_TRIES):
            candidate = (rng.uniform(min_x, max_x), rng.uniform(min_y, max_y))
            if self.contains(candidate):
                return candidate
        # Thin rooms can miss every try. The vertex centroid may then lie
        # outside a concave room; callers check containment and reject it.
        n = len(self.vertices)
        return (
            sum(v[0] for v in self.vertices) / n,
            sum(v[1] for v in self.vertices) / n,
        )

    def bounds(self) -> tuple[Position, Position]:
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        return (min(xs), min(ys)), (max(xs), max(ys))


AnyRoom = Union[RectRoom, PolygonRoom]


def _signed_area(vertices: tuple[Position, ...]) -> float:
    total = 0.0
    n = len(vertices)
    for i in range(n):
        x1, y1 = vertices[i]
        x2, y2 = vertices[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def room_from_dict(data: dict[str, Any]) -> AnyRoom:
    """Build a room from ``{"type": "rect", "min": [x, y], "max": [x, y]}``
    or ``{"type": "polygon", "vertices": [[x, y], ...]}``."""
    if not isinstance(data, dict):
        raise ConfigError(f"Room must be a mapping, got {type(data).__name__}")
    kind = data.get("type", "rect")
    try:
        if kind == "rect":
            lo = as_position(data["min"])
            hi = as_position(data["max"])
            return RectRoom(lo[0], lo[1], hi[0], hi[1])
        if kind == "polygon":
            return PolygonRoom(tuple(as_position(v) for v in data["vertices"]))
    except (KeyError, TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Malformed {kind!r} room: {exc}") from exc
    raise ConfigError(f"Unknown room type {kind!r}")


def room_to_dict(room: AnyRoom) -> dict[str, Any]:
    if isinstance(room, RectRoom):
        return {"type": "rect", "min": [room.min_x, room.min_y],
                "max": [room.max_x, room.max_y]}
    return {"type": "polygon", "vertices": [list(v) for v in room.vertices]}
