"""FireSession — the single-writer coordinator and public API.

The session owns all shared state: the fire table, the thermal accumulator,
the population limiter and the evacuation controller. Per-fire behaviour runs
as cooperative systems on a fixed-rate virtual clock. Systems submit intents
and the session applies them in arrival order, so every read-modify-write of
the fire count and the temperature happens in exactly one place.

External callers (the water/projectile layer, a renderer) use the public
methods between ticks. Lifecycle signals are delivered at the end of each
tick.
"""
from __future__ import annotations

import logging
import os
import random
from typing import Any

from roomfire import signals, vec
from roomfire.chronicle import Chronicle
from roomfire.clock import Clock
from roomfire.config import SessionConfig
from roomfire.evacuation import EvacuationController
from roomfire.fire import FireAgent, FireHandle
from roomfire.intents import ExtinguishIntent, HeatIntent, IntentQueue, SpawnIntent
from roomfire.population import PopulationLimiter
from roomfire.signals import Handler, SignalBus
from roomfire.spread import SpreadPolicy
from roomfire.systems import (
    System,
    make_evacuation_system,
    make_heating_system,
    make_ignition_system,
    make_intent_system,
    make_spawner_system,
    make_spread_system,
)
from roomfire.thermal import ThermalAccumulator
from roomfire.types import (
    CapacityExceeded,
    ConfigError,
    EvacuationPhase,
    FireId,
    InvalidSpawnPosition,
    Position,
    SessionOutcome,
    SessionOverError,
)

logger = logging.getLogger(__name__)


class FireSession:
    def __init__(self, config: SessionConfig | None, chronicle_size: int = 1000) -> None:
        if config is None:
            raise ConfigError("FireSession requires a SessionConfig")
        config.validate()
        assert config.room is not None
        self._config = config
        self._clock = Clock(config.tps)

        seed = config.seed
        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._seed = seed
        self._rng = random.Random(seed)

        fc, sc, tc, ec = config.fire, config.spread, config.thermal, config.evacuation
        clock = self._clock
        self._thermal = ThermalAccumulator.from_config(tc)
        self._limiter = PopulationLimiter(sc.max_fires)
        self._policy = SpreadPolicy(
            config.room,
            spread_range=sc.spread_range,
            min_separation=sc.min_separation,
            cluster_weight=sc.cluster_weight,
            history_size=sc.history_size,
            spread_chance=fc.spread_chance,
            delay_ticks=clock.ticks(fc.spread_delay),
            jitter_ticks=round(fc.spread_jitter * clock.tps),
            backoff_ticks=clock.ticks(fc.backoff_delay),
        )
        self._evacuation = EvacuationController(
            ec.warning_threshold,
            ec.critical_threshold,
            tc.max_temperature,
            clock.ticks(ec.countdown),
            on_transition=self._on_phase_change,
        )

        self._bus = SignalBus()
        self._chronicle = Chronicle(max_entries=chronicle_size)
        self._chronicle.attach(self._bus)

        self._intents = IntentQueue()
        self._intents.handle(SpawnIntent, self._apply_spawn)
        self._intents.handle(ExtinguishIntent, self._apply_extinguish)
        self._intents.handle(HeatIntent, self._apply_heat)

        self._fires: dict[FireId, FireAgent] = {}
        self._burning: dict[FireId, FireAgent] = {}
        self._next_id: FireId = 0
        self._outcome: SessionOutcome | None = None

        # Order matters: ignition runs after the spread pass so a fire waits a
        # full spread delay, and fires created later in the tick ignite next tick.
        self._systems: list[System] = [
            make_spread_system(fc.growth_factor, fc.intensity_cap),
            make_ignition_system(),
        ]
        if config.spawner.enabled:
            self._systems.append(make_spawner_system(
                config.spawner.points,
                clock.ticks(config.spawner.interval),
                config.spawner.intensity,
            ))
        if tc.background_heating:
            self._systems.append(make_heating_system(
                tc.heat_per_fire,
                clock.ticks(tc.heat_interval),
                clock.ticks(tc.crowded_heat_interval),
                tc.crowded_threshold,
            ))
        self._systems.append(make_intent_system())
        self._systems.append(make_evacuation_system(clock.ticks(ec.poll_interval)))

    # -- Accessors --

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def thermal(self) -> ThermalAccumulator:
        return self._thermal

    @property
    def limiter(self) -> PopulationLimiter:
        return self._limiter

    @property
    def policy(self) -> SpreadPolicy:
        return self._policy

    @property
    def evacuation(self) -> EvacuationController:
        return self._evacuation

    @property
    def intents(self) -> IntentQueue:
        return self._intents

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def chronicle(self) -> Chronicle:
        return self._chronicle

    @property
    def outcome(self) -> SessionOutcome | None:
        return self._outcome

    @property
    def over(self) -> bool:
        return self._outcome is not None

    def active_fire_count(self) -> int:
        return self._limiter.active_count

    def temperature(self) -> float:
        return self._thermal.temperature

    def evacuation_phase(self) -> EvacuationPhase:
        return self._evacuation.phase

    def fire(self, fire_id: FireId) -> FireAgent | None:
        return self._fires.get(fire_id)

    def handle(self, fire_id: FireId) -> FireHandle | None:
        if fire_id not in self._fires:
            return None
        return FireHandle(fire_id, self)

    def fires(self, include_extinguished: bool = False) -> list[FireAgent]:
        """Burning fires (or every fire ever created), oldest first."""
        source = self._fires if include_extinguished else self._burning
        return list(source.values())

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._bus.subscribe(signal_name, handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        self._bus.unsubscribe(signal_name, handler)

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    # -- External operations --

    def spawn_fire(
        self, position: Position, initial_intensity: float | None = None,
    ) -> FireHandle:
        """Place a fire directly, e.g. the initial fire or a spawner's.

        The room bounds and the population cap apply; minimum separation does
        not, since external placement is deliberate. Raises
        InvalidSpawnPosition, CapacityExceeded or SessionOverError.
        """
        if self.over:
            raise SessionOverError(f"Session already ended ({self._outcome.value})")
        fc = self._config.fire
        position = vec.as_position(position)
        intensity = fc.initial_intensity if initial_intensity is None else initial_intensity
        if intensity <= fc.extinguish_threshold:
            raise ValueError(
                f"initial intensity {intensity} is at or below the extinguish threshold"
            )
        intensity = min(intensity, fc.intensity_cap)
        if not self._policy.room.contains(position):
            raise InvalidSpawnPosition(position, f"{position} is outside the room")
        self._limiter.admit()
        fire = self._create(position, intensity, parent=None)
        return FireHandle(fire.id, self)

    def extinguish(self, fire_id: FireId, amount: float) -> bool:
        """Reduce a fire's intensity by *amount*.

        Unknown or already extinguished ids are ignored. Returns True if a
        burning fire was hit.
        """
        if amount < 0:
            raise ValueError("amount must not be negative")
        if self.over:
            return False
        return self._apply_extinguish(ExtinguishIntent(fire_id, amount))

    def extinguish_at(
        self,
        position: Position,
        amount: float | None = None,
        radius: float | None = None,
    ) -> FireId | None:
        """Report a water hit at *position*.

        Hits the nearest burning fire within *radius* (default
        ``water.hit_radius``) with *amount* (default
        ``water.extinguish_amount``). Returns the id hit, or None on a miss
        or once the session is over.
        """
        water = self._config.water
        amount = water.extinguish_amount if amount is None else amount
        radius = water.hit_radius if radius is None else radius
        target = self.nearest_fire(position, radius)
        if target is None or not self.extinguish(target.id, amount):
            return None
        return target.id

    def nearest_fire(self, position: Position, radius: float) -> FireAgent | None:
        position = vec.as_position(position)
        best: FireAgent | None = None
        best_dsq = radius * radius
        for fire in self._burning.values():
            dsq = vec.distance_sq(position, fire.position)
            if dsq <= best_dsq:
                best, best_dsq = fire, dsq
        return best

    def submit(self, intent: Any) -> None:
        """Queue an intent for the intent pass of the next tick."""
        if self.over:
            return
        self._intents.submit(intent)

    # -- Loop --

    def step(self) -> None:
        if self.over:
            self._bus.flush()
            return
        self._clock.advance()
        ctx = self._clock.context(self._rng)
        for system in self._systems:
            system(self, ctx)
            if self.over:
                break
        self._bus.flush()

    def run(self, n: int) -> int:
        """Run up to *n* ticks, stopping early if the session ends."""
        ran = 0
        for _ in range(n):
            if self.over:
                break
            self.step()
            ran += 1
        self._bus.flush()
        return ran

    def run_for(self, seconds: float) -> int:
        return self.run(round(seconds * self._clock.tps))

    def run_until_over(self, max_ticks: int) -> SessionOutcome | None:
        self.run(max_ticks)
        return self._outcome

    def snapshot(self) -> dict[str, Any]:
        """JSON-friendly view of the current state for renderers and telemetry."""
        return {
            "tick": self._clock.tick_number,
            "elapsed": self._clock.elapsed,
            "seed": self._seed,
            "temperature": self._thermal.temperature,
            "phase": self._evacuation.phase.name,
            "countdown_remaining": self._evacuation.countdown_remaining,
            "active_fires": self._limiter.active_count,
            "max_fires": self._limiter.max_fires,
            "outcome": self._outcome.value if self._outcome is not None else None,
            "fires": [f.to_dict() for f in self._burning.values()],
        }

    # -- Intent handlers --

    def _apply_spawn(self, intent: SpawnIntent) -> bool:
        parent = self._fires.get(intent.parent)
        if parent is None or not parent.can_spread:
            return False
        if intent.intensity <= self._config.fire.extinguish_threshold:
            logger.debug("fire %d too weak to spread (child intensity %.3f)",
                         parent.id, intent.intensity)
            return False
        try:
            self._policy.check(intent.position, self._occupied())
            self._limiter.admit()
        except InvalidSpawnPosition as exc:
            logger.debug("fire %d cannot spread: %s", parent.id, exc)
            return False
        except CapacityExceeded:
            parent.spread_timer = self._policy.backoff_ticks
            logger.debug("fire %d cannot spread: room is full", parent.id)
            return False
        child = self._create(intent.position, intent.intensity, parent=parent.id)
        self._thermal.increase(self._config.thermal.spread_heat)
        logger.info(
            "fire %d spread to %s (fire %d). Total fires: %d",
            parent.id, _fmt(child.position), child.id, self._limiter.active_count,
        )
        return True

    def _apply_extinguish(self, intent: ExtinguishIntent) -> bool:
        fire = self._burning.get(intent.fire_id)
        if fire is None:
            return False
        if fire.reduce(intent.amount, self._config.fire.extinguish_threshold):
            self._retire(fire)
        return True

    def _apply_heat(self, intent: HeatIntent) -> bool:
        self._thermal.apply(intent.delta)
        return True

    # -- Internals --

    def _occupied(self) -> list[Position]:
        return [f.position for f in self._burning.values()]

    def _create(self, position: Position, intensity: float, parent: FireId | None) -> FireAgent:
        fire = FireAgent(
            id=self._next_id,
            position=position,
            intensity=intensity,
            born_tick=self._clock.tick_number,
            parent=parent,
        )
        self._next_id += 1
        self._fires[fire.id] = fire
        self._burning[fire.id] = fire
        self._policy.record(position)
        self._bus.publish(
            signals.FIRE_SPAWNED,
            tick=self._clock.tick_number,
            fire_id=fire.id,
            position=position,
            intensity=intensity,
            parent=parent,
        )
        logger.debug("fire %d started at %s with intensity %.2f",
                     fire.id, _fmt(position), intensity)
        return fire

    def _retire(self, fire: FireAgent) -> None:
        del self._burning[fire.id]
        remaining = self._limiter.release()
        tc = self._config.thermal
        if tc.cool_on_extinguish:
            self._thermal.decrease(tc.extinguish_cooling)
        self._bus.publish(
            signals.FIRE_EXTINGUISHED,
            tick=self._clock.tick_number,
            fire_id=fire.id,
            position=fire.position,
            remaining=remaining,
        )
        logger.info("fire %d extinguished, %d remaining", fire.id, remaining)
        if remaining == 0 and not self._evacuation.triggered:
            self._finish(SessionOutcome.EXTINGUISHED)

    def _on_phase_change(self, old: EvacuationPhase, new: EvacuationPhase) -> None:
        tick = self._clock.tick_number
        temperature = self._thermal.temperature
        self._bus.publish(signals.PHASE_CHANGED, tick=tick, old=old, new=new,
                          temperature=temperature)
        if new in (EvacuationPhase.WARNING, EvacuationPhase.CRITICAL):
            self._bus.publish(signals.THERMAL_WARNING, tick=tick, tier=new,
                              temperature=temperature)
        elif new is EvacuationPhase.TRIGGERED:
            self._bus.publish(
                signals.EVACUATION_TRIGGERED,
                tick=tick,
                temperature=temperature,
                countdown_ticks=self._clock.ticks(self._config.evacuation.countdown),
            )
        elif new is EvacuationPhase.OVER:
            self._finish(SessionOutcome.EVACUATED)

    def _finish(self, outcome: SessionOutcome) -> None:
        if self._outcome is not None:
            return
        self._outcome = outcome
        self._intents.clear()
        self._bus.publish(signals.SESSION_OVER, tick=self._clock.tick_number,
                          reason=outcome)
        logger.info("session over at tick %d: %s", self._clock.tick_number, outcome.value)


def _fmt(position: Position) -> str:
    return f"({position[0]:.2f}, {position[1]:.2f})"
