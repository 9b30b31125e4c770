"""Session configuration dataclasses.

All durations are in seconds of simulated time; the session converts them to
ticks with its clock. Every config is frozen, and :meth:`SessionConfig.validate`
runs when a :class:`~roomfire.session.FireSession` is constructed so bad values
fail before the first tick.
"""
from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from roomfire.room import AnyRoom, room_from_dict, room_to_dict
from roomfire.types import ConfigError, Position
from roomfire.vec import as_position


@dataclass(frozen=True)
class FireConfig:
    """Per-fire behaviour.

    Attributes:
        initial_intensity: Intensity given to externally spawned fires.
        intensity_cap: Upper bound on any fire's intensity.
        growth_factor: Child intensity multiplier relative to its parent.
        extinguish_threshold: A fire at or below this intensity goes out.
        spread_delay: Seconds between spread attempts.
        spread_jitter: Uniform extra delay in ``[0, spread_jitter]`` seconds.
        spread_chance: Probability an attempt actually tries to spread.
        backoff_delay: Wait used instead of ``spread_delay`` at the population cap.
    """

    initial_intensity: float = 1.0
    intensity_cap: float = 3.0
    growth_factor: float = 1.1
    extinguish_threshold: float = 0.1
    spread_delay: float = 1.0
    spread_jitter: float = 0.0
    spread_chance: float = 1.0
    backoff_delay: float = 2.0


@dataclass(frozen=True)
class SpreadConfig:
    """Spatial placement and population policy."""

    max_fires: int = 10
    spread_range: float = 2.0
    min_separation: float = 1.8
    cluster_weight: float = 0.5
    history_size: int = 16


@dataclass(frozen=True)
class ThermalConfig:
    """Thermal accumulator tuning.

    Background heating adds ``heat_per_fire * active_count`` every
    ``heat_interval`` seconds, or every ``crowded_heat_interval`` once more than
    ``crowded_threshold`` fires burn.
    """

    room_baseline: float = 20.0
    max_temperature: float = 100.0
    initial_temperature: float | None = None
    spread_heat: float = 2.0
    background_heating: bool = True
    heat_per_fire: float = 2.0
    heat_interval: float = 5.0
    crowded_heat_interval: float = 10.0
    crowded_threshold: int = 5
    cool_on_extinguish: bool = False
    extinguish_cooling: float = 2.0


@dataclass(frozen=True)
class EvacuationConfig:
    warning_threshold: float = 80.0
    critical_threshold: float = 90.0
    poll_interval: float = 0.25
    countdown: float = 30.0


@dataclass(frozen=True)
class WaterConfig:
    """Defaults for water hits reported by the projectile layer."""

    extinguish_amount: float = 0.25
    hit_radius: float = 0.5


@dataclass(frozen=True)
class SpawnerConfig:
    """Periodic ignition at fixed points. Disabled when there are no points."""

    points: tuple[Position, ...] = ()
    interval: float = 3.0
    intensity: float | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.points)


@dataclass(frozen=True)
class SessionConfig:
    room: AnyRoom | None = None
    tps: int = 20
    seed: int | None = None
    fire: FireConfig = field(default_factory=FireConfig)
    spread: SpreadConfig = field(default_factory=SpreadConfig)
    thermal: ThermalConfig = field(default_factory=ThermalConfig)
    evacuation: EvacuationConfig = field(default_factory=EvacuationConfig)
    water: WaterConfig = field(default_factory=WaterConfig)
    spawner: SpawnerConfig = field(default_factory=SpawnerConfig)

    def validate(self) -> None:
        """Raise ConfigError on the first violated precondition.

        Values of the wrong type (e.g. ``"3"`` from a hand-edited file) are
        reported as ConfigError too.
        """
        try:
            self._check()
        except TypeError as exc:
            raise ConfigError(f"Invalid config value: {exc}") from exc

    def _check(self) -> None:
        if self.room is None:
            raise ConfigError("A room is required")
        if self.tps <= 0:
            raise ConfigError("tps must be positive")

        f = self.fire
        if f.intensity_cap <= 0:
            raise ConfigError("intensity_cap must be positive")
        if not 0 <= f.extinguish_threshold < f.intensity_cap:
            raise ConfigError("extinguish_threshold must lie in [0, intensity_cap)")
        if not f.extinguish_threshold < f.initial_intensity <= f.intensity_cap:
            raise ConfigError(
                "initial_intensity must lie in (extinguish_threshold, intensity_cap]"
            )
        if f.growth_factor <= 0:
            raise ConfigError("growth_factor must be positive")
        if not 0.0 <= f.spread_chance <= 1.0:
            raise ConfigError("spread_chance must lie in [0, 1]")
        for name in ("spread_delay", "backoff_delay"):
            if getattr(f, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if f.spread_jitter < 0:
            raise ConfigError("spread_jitter must not be negative")

        s = self.spread
        if s.max_fires < 1:
            raise ConfigError("max_fires must be at least 1")
        if s.spread_range <= 0:
            raise ConfigError("spread_range must be positive")
        if not 0 <= s.min_separation <= s.spread_range:
            raise ConfigError("min_separation must lie in [0, spread_range]")
        if not 0.0 <= s.cluster_weight <= 1.0:
            raise ConfigError("cluster_weight must lie in [0, 1]")
        if s.history_size < 1:
            raise ConfigError("history_size must be at least 1")

        t = self.thermal
        if t.max_temperature <= t.room_baseline:
            raise ConfigError("max_temperature must exceed room_baseline")
        if t.initial_temperature is not None and not (
            t.room_baseline <= t.initial_temperature <= t.max_temperature
        ):
            raise ConfigError("initial_temperature must lie in [room_baseline, max_temperature]")
        for name in ("spread_heat", "heat_per_fire", "extinguish_cooling"):
            if getattr(t, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if t.heat_interval <= 0 or t.crowded_heat_interval <= 0:
            raise ConfigError("heat intervals must be positive")

        e = self.evacuation
        if not e.warning_threshold <= e.critical_threshold <= t.max_temperature:
            raise ConfigError(
                "thresholds must satisfy warning <= critical <= max_temperature"
            )
        if e.poll_interval <= 0 or e.countdown <= 0:
            raise ConfigError("poll_interval and countdown must be positive")

        if self.water.extinguish_amount < 0 or self.water.hit_radius < 0:
            raise ConfigError("water settings must not be negative")

        sp = self.spawner
        if sp.enabled:
            if sp.interval <= 0:
                raise ConfigError("spawner interval must be positive")
            for point in sp.points:
                if not self.room.contains(point):
                    raise ConfigError(f"Spawn point {point} lies outside the room")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionConfig:
        """Build a config from a nested mapping (e.g. parsed JSON).

        Unknown keys raise ConfigError; omitted keys keep their defaults.
        """
        data = dict(data)
        kwargs: dict[str, Any] = {}
        if "room" in data:
            kwargs["room"] = room_from_dict(data.pop("room"))
        for key in ("tps", "seed"):
            if key in data:
                kwargs[key] = data.pop(key)
        sections: dict[str, type] = {
            "fire": FireConfig,
            "spread": SpreadConfig,
            "thermal": ThermalConfig,
            "evacuation": EvacuationConfig,
            "water": WaterConfig,
            "spawner": SpawnerConfig,
        }
        for key, section_type in sections.items():
            if key in data:
                kwargs[key] = _build_section(section_type, data.pop(key))
        if data:
            raise ConfigError(f"Unknown config keys: {sorted(data)}")
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"tps": self.tps, "seed": self.seed}
        if self.room is not None:
            out["room"] = room_to_dict(self.room)
        for key in ("fire", "spread", "thermal", "evacuation", "water", "spawner"):
            section = dataclasses.asdict(getattr(self, key))
            if key == "spawner":
                section["points"] = [list(p) for p in section["points"]]
            out[key] = section
        return out


def _build_section(section_type: type, values: dict[str, Any]) -> Any:
    name = section_type.__name__
    if not isinstance(values, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(values).__name__}")
    unknown = set(values) - {f.name for f in dataclasses.fields(section_type)}
    if unknown:
        raise ConfigError(f"Unknown {name} keys: {sorted(unknown)}")
    values = dict(values)
    if section_type is SpawnerConfig and "points" in values:
        try:
            values["points"] = tuple(as_position(p) for p in values["points"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Malformed spawner points: {exc}") from exc
    return section_type(**values)


def load_config(path: str | Path) -> SessionConfig:
    """Read a JSON config file."""
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be an object")
    return SessionConfig.from_dict(data)
