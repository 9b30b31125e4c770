"""EvacuationController — one-way escalation driven by room temperature."""
from __future__ import annotations

import logging
from typing import Callable

from roomfire.types import EvacuationPhase

logger = logging.getLogger(__name__)

TransitionCallback = Callable[[EvacuationPhase, EvacuationPhase], None]


class EvacuationController:
    """Escalates NORMAL -> WARNING -> CRITICAL -> TRIGGERED -> FINAL_COUNTDOWN -> OVER.

    :meth:`poll` compares a temperature reading against the thresholds and
    only ever moves forward. Reaching the maximum sets a latch, so repeated
    polls at the maximum start exactly one countdown. Cooling never undoes a
    phase. :meth:`tick` runs the countdown, one tick per call.
    """

    def __init__(
        self,
        warning_threshold: float,
        critical_threshold: float,
        max_temperature: float,
        countdown_ticks: int,
        on_transition: TransitionCallback | None = None,
    ) -> None:
        if not warning_threshold <= critical_threshold <= max_temperature:
            raise ValueError("thresholds must satisfy warning <= critical <= max")
        if countdown_ticks < 1:
            raise ValueError("countdown_ticks must be at least 1")
        self._warning = warning_threshold
        self._critical = critical_threshold
        self._max = max_temperature
        self._countdown_ticks = countdown_ticks
        self._on_transition = on_transition
        self._phase = EvacuationPhase.NORMAL
        self._triggered = False
        self._countdown_remaining: int | None = None
        self._countdowns_started = 0

    @property
    def phase(self) -> EvacuationPhase:
        return self._phase

    @property
    def triggered(self) -> bool:
        return self._triggered

    @property
    def countdown_remaining(self) -> int | None:
        """Ticks left in the final countdown; None before it starts."""
        return self._countdown_remaining

    @property
    def countdowns_started(self) -> int:
        return self._countdowns_started

    @property
    def over(self) -> bool:
        return self._phase is EvacuationPhase.OVER

    def target_for(self, temperature: float) -> EvacuationPhase:
        """Highest phase a temperature reading calls for."""
        if temperature >= self._max:
            return EvacuationPhase.FINAL_COUNTDOWN
        if temperature >= self._critical:
            return EvacuationPhase.CRITICAL
        if temperature >= self._warning:
            return EvacuationPhase.WARNING
        return EvacuationPhase.NORMAL

    def poll(self, temperature: float) -> list[tuple[EvacuationPhase, EvacuationPhase]]:
        """Advance toward the phase *temperature* calls for.

        Returns the transitions taken, in order. Skipped tiers are walked
        through one by one.
        """
        transitions: list[tuple[EvacuationPhase, EvacuationPhase]] = []
        if self._phase >= EvacuationPhase.TRIGGERED:
            return transitions
        target = self.target_for(temperature)
        while self._phase < target and self._phase < EvacuationPhase.TRIGGERED:
            nxt = EvacuationPhase(self._phase + 1)
            if nxt is EvacuationPhase.TRIGGERED:
                if self._triggered:
                    break
                self._triggered = True
            transitions.append(self._move(nxt))
        if self._phase is EvacuationPhase.TRIGGERED:
            transitions.append(self._start_countdown())
        return transitions

    def tick(self) -> tuple[EvacuationPhase, EvacuationPhase] | None:
        """Count the final countdown down by one tick.

        Returns the FINAL_COUNTDOWN -> OVER transition on the tick it happens.
        """
        if self._phase is not EvacuationPhase.FINAL_COUNTDOWN:
            return None
        assert self._countdown_remaining is not None
        self._countdown_remaining -= 1
        if self._countdown_remaining <= 0:
            self._countdown_remaining = 0
            return self._move(EvacuationPhase.OVER)
        return None

    def _start_countdown(self) -> tuple[EvacuationPhase, EvacuationPhase]:
        self._countdown_remaining = self._countdown_ticks
        self._countdowns_started += 1
        logger.warning("evacuation triggered: %d tick countdown", self._countdown_ticks)
        return self._move(EvacuationPhase.FINAL_COUNTDOWN)

    def _move(self, new: EvacuationPhase) -> tuple[EvacuationPhase, EvacuationPhase]:
        old = self._phase
        if new <= old:
            raise RuntimeError(f"evacuation phase cannot regress: {old.name} -> {new.name}")
        self._phase = new
        logger.info("evacuation phase %s -> %s", old.name, new.name)
        if self._on_transition is not None:
            self._on_transition(old, new)
        return old, new
