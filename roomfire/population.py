"""PopulationLimiter — global cap on simultaneously burning fires."""
from __future__ import annotations

import logging

from roomfire.types import CapacityExceeded

logger = logging.getLogger(__name__)


class PopulationLimiter:
    """Tracks the active fire count against ``max_fires``.

    :meth:`admit` checks headroom and increments in one call, so two spawn
    intents applied in the same tick can never both take the last slot.
    """

    def __init__(self, max_fires: int) -> None:
        if max_fires < 1:
            raise ValueError("max_fires must be at least 1")
        self._max = max_fires
        self._active = 0
        self._warned = False

    @property
    def max_fires(self) -> int:
        return self._max

    @property
    def active_count(self) -> int:
        return self._active

    def has_headroom(self) -> bool:
        return self._active < self._max

    def admit(self) -> int:
        """Reserve one slot. Raises CapacityExceeded when full."""
        if self._active >= self._max:
            raise CapacityExceeded(self._max)
        self._active += 1
        if self._active >= self._max and not self._warned:
            logger.warning("maximum fire limit reached (%d)", self._max)
            self._warned = True
        return self._active

    def release(self) -> int:
        if self._active <= 0:
            raise RuntimeError("release() without a matching admit()")
        self._active -= 1
        if self._active < self._max:
            self._warned = False
        return self._active
