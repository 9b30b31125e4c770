"""roomfire - Escalating room fire and evacuation simulation on a fixed tick."""

from roomfire.chronicle import Chronicle
from roomfire.config import (
    EvacuationConfig,
    FireConfig,
    SessionConfig,
    SpawnerConfig,
    SpreadConfig,
    ThermalConfig,
    WaterConfig,
    load_config,
)
from roomfire.evacuation import EvacuationController
from roomfire.fire import FireAgent, FireHandle
from roomfire.intents import ExtinguishIntent, HeatIntent, IntentQueue, SpawnIntent
from roomfire.population import PopulationLimiter
from roomfire.room import PolygonRoom, RectRoom
from roomfire.session import FireSession
from roomfire.signals import SignalBus
from roomfire.spread import SpreadPolicy
from roomfire.thermal import ThermalAccumulator
from roomfire.types import (
    CapacityExceeded,
    ConfigError,
    EvacuationPhase,
    FireId,
    FireState,
    InvalidSpawnPosition,
    RoomFireError,
    SessionOutcome,
    SessionOverError,
)

__all__ = [
    "FireSession",
    "SessionConfig",
    "FireConfig",
    "SpreadConfig",
    "ThermalConfig",
    "EvacuationConfig",
    "WaterConfig",
    "SpawnerConfig",
    "load_config",
    "RectRoom",
    "PolygonRoom",
    "FireAgent",
    "FireHandle",
    "ThermalAccumulator",
    "SpreadPolicy",
    "PopulationLimiter",
    "EvacuationController",
    "SignalBus",
    "Chronicle",
    "IntentQueue",
    "SpawnIntent",
    "ExtinguishIntent",
    "HeatIntent",
    "FireId",
    "FireState",
    "EvacuationPhase",
    "SessionOutcome",
    "RoomFireError",
    "ConfigError",
    "InvalidSpawnPosition",
    "CapacityExceeded",
    "SessionOverError",
]
