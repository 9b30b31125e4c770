"""ThermalAccumulator — the room's single shared temperature."""
from __future__ import annotations

import logging

from roomfire.config import ThermalConfig

logger = logging.getLogger(__name__)


class ThermalAccumulator:
    """Clamped temperature value in ``[baseline, maximum]``.

    Only the session writes to it; everything else reads :attr:`temperature`.
    """

    def __init__(
        self,
        baseline: float = 20.0,
        maximum: float = 100.0,
        initial: float | None = None,
    ) -> None:
        if maximum <= baseline:
            raise ValueError("maximum must exceed baseline")
        self._baseline = baseline
        self._maximum = maximum
        start = baseline if initial is None else initial
        self._temperature = min(max(start, baseline), maximum)

    @classmethod
    def from_config(cls, config: ThermalConfig) -> ThermalAccumulator:
        return cls(config.room_baseline, config.max_temperature,
                   config.initial_temperature)

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def baseline(self) -> float:
        return self._baseline

    @property
    def maximum(self) -> float:
        return self._maximum

    @property
    def at_maximum(self) -> bool:
        return self._temperature >= self._maximum

    def increase(self, delta: float) -> float:
        """Raise the temperature by *delta*, capped at the maximum."""
        if delta < 0:
            raise ValueError("delta must not be negative")
        self._temperature = min(self._temperature + delta, self._maximum)
        logger.debug("room temperature %.2f (+%.2f)", self._temperature, delta)
        return self._temperature

    def decrease(self, delta: float) -> float:
        """Lower the temperature by *delta*, floored at the baseline."""
        if delta < 0:
            raise ValueError("delta must not be negative")
        self._temperature = max(self._temperature - delta, self._baseline)
        logger.debug("room temperature %.2f (-%.2f)", self._temperature, delta)
        return self._temperature

    def apply(self, delta: float) -> float:
        """Signed convenience wrapper over increase/decrease."""
        if delta >= 0:
            return self.increase(delta)
        return self.decrease(-delta)

    def heat_from_fires(self, active_count: int, per_fire: float) -> float:
        """Periodic rise proportional to the number of burning fires."""
        if active_count <= 0:
            return self._temperature
        return self.increase(per_fire * active_count)
