"""Shared type aliases, enums and errors for the fire simulation."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from enum import Enum, IntEnum

FireId = int
Position = tuple[float, float]


class FireState(str, Enum):
    SPAWNING = "spawning"
    ACTIVE = "active"
    EXTINGUISHING = "extinguishing"
    EXTINGUISHED = "extinguished"


class EvacuationPhase(IntEnum):
    """Escalation phases, ordered. A session never moves to a lower value."""

    NORMAL = 0
    WARNING = 1
    CRITICAL = 2
    TRIGGERED = 3
    FINAL_COUNTDOWN = 4
    OVER = 5


class SessionOutcome(str, Enum):
    EVACUATED = "evacuated"
    EXTINGUISHED = "extinguished"


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    random: _random.Random


class RoomFireError(Exception):
    """Base class for simulation errors."""


class ConfigError(RoomFireError, ValueError):
    """Raised at construction time when configuration is missing or invalid."""


class InvalidSpawnPosition(RoomFireError):
    """Raised when a candidate lies outside the room or too close to a fire."""

    def __init__(self, position: Position, message: str) -> None:
        self.position = position
        super().__init__(message)


class CapacityExceeded(RoomFireError):
    """Raised when the active fire population is at its cap."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Fire population at cap ({limit})")


class SessionOverError(RoomFireError):
    """Raised when spawning into a session that has already ended."""
