"""System factories run by :class:`~roomfire.session.FireSession` each tick.

A system is ``system(session, ctx) -> None``. Systems read session state
freely but change it only by submitting intents, except for the per-fire
timers they own.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from roomfire.intents import HeatIntent, SpawnIntent
from roomfire.types import CapacityExceeded, FireState, InvalidSpawnPosition, Position

if TYPE_CHECKING:
    from roomfire.session import FireSession
    from roomfire.types import TickContext

logger = logging.getLogger(__name__)

System = Callable[["FireSession", "TickContext"], None]


def make_ignition_system() -> System:
    """Move freshly spawned fires from SPAWNING to ACTIVE and arm their timers."""

    def ignition_system(session: FireSession, ctx: TickContext) -> None:
        policy = session.policy
        for fire in session.fires():
            if fire.state is FireState.SPAWNING:
                fire.ignite(policy.next_delay(ctx.random))

    return ignition_system


def make_spread_system(growth_factor: float, intensity_cap: float) -> System:
    """Count down each active fire's spread timer and request a child when due.

    At the population cap the fire backs off for the longer delay without
    rolling. Otherwise it rolls the spread chance and, on success, submits a
    SpawnIntent for a candidate position. Placement is validated when the
    intent is applied.
    """

    def spread_system(session: FireSession, ctx: TickContext) -> None:
        policy = session.policy
        limiter = session.limiter
        for fire in session.fires():
            if not fire.can_spread:
                continue
            fire.spread_timer -= 1
            if fire.spread_timer > 0:
                continue
            if not limiter.has_headroom():
                fire.spread_timer = policy.backoff_ticks
                logger.debug("fire %d backing off: room is full", fire.id)
                continue
            fire.spread_timer = policy.next_delay(ctx.random)
            if not policy.roll(ctx.random):
                continue
            candidate = policy.draw_candidate(ctx.random)
            intensity = min(fire.intensity * growth_factor, intensity_cap)
            session.submit(SpawnIntent(fire.id, candidate, intensity))

    return spread_system


def make_intent_system() -> System:
    """Apply every submitted intent in arrival order."""

    def intent_system(session: FireSession, ctx: TickContext) -> None:
        session.intents.drain()

    return intent_system


def make_heating_system(
    per_fire: float,
    interval_ticks: int,
    crowded_interval_ticks: int,
    crowded_threshold: int,
) -> System:
    """Periodically raise the temperature in proportion to the fire count.

    Above ``crowded_threshold`` fires the next rise waits the longer interval,
    which keeps escalation roughly linear in the population.
    """
    remaining = [interval_ticks]

    def heating_system(session: FireSession, ctx: TickContext) -> None:
        remaining[0] -= 1
        if remaining[0] > 0:
            return
        count = session.active_fire_count()
        if count > 0 and per_fire > 0:
            session.submit(HeatIntent(per_fire * count, "fires"))
        remaining[0] = crowded_interval_ticks if count > crowded_threshold else interval_ticks

    return heating_system


def make_spawner_system(
    points: tuple[Position, ...],
    interval_ticks: int,
    intensity: float | None = None,
) -> System:
    """Ignite a fire at a random spawn point on the first tick and every
    ``interval_ticks`` after. Refused spawns are skipped."""
    if not points:
        raise ValueError("spawner needs at least one point")
    remaining = [1]

    def spawner_system(session: FireSession, ctx: TickContext) -> None:
        remaining[0] -= 1
        if remaining[0] > 0:
            return
        remaining[0] = interval_ticks
        point = points[ctx.random.randrange(len(points))]
        try:
            session.spawn_fire(point, intensity)
        except (CapacityExceeded, InvalidSpawnPosition) as exc:
            logger.debug("spawner skipped %s: %s", point, exc)

    return spawner_system


def make_evacuation_system(poll_ticks: int) -> System:
    """Run the final countdown every tick and poll the temperature every
    ``poll_ticks`` ticks."""
    last_poll = [0]

    def evacuation_system(session: FireSession, ctx: TickContext) -> None:
        controller = session.evacuation
        controller.tick()
        if ctx.tick_number - last_poll[0] < poll_ticks:
            return
        last_poll[0] = ctx.tick_number
        controller.poll(session.temperature())

    return evacuation_system
