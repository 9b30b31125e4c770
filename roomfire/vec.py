"""2D vector helpers operating on plain float tuples."""
from __future__ import annotations

import math

from roomfire.types import Position


def sub(a: Position, b: Position) -> Position:
    return (a[0] - b[0], a[1] - b[1])


def distance_sq(a: Position, b: Position) -> float:
    dx, dy = sub(a, b)
    return dx * dx + dy * dy


def distance(a: Position, b: Position) -> float:
    return math.sqrt(distance_sq(a, b))


def lerp(a: Position, b: Position, t: float) -> Position:
    """Linear interpolation from *a* (t=0) to *b* (t=1)."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def as_position(value: object) -> Position:
    """Coerce a 2-sequence of numbers into a ``(float, float)`` tuple."""
    x, y = value  # type: ignore[misc]
    return (float(x), float(y))
