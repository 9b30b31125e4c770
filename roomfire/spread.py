"""SpreadPolicy — where and when fires may spread."""
from __future__ import annotations

import logging
import random
from collections import deque
from typing import Iterable

from roomfire import vec
from roomfire.room import AnyRoom
from roomfire.types import InvalidSpawnPosition, Position

logger = logging.getLogger(__name__)


class SpreadPolicy:
    """Candidate placement, separation checks and spread timing.

    Candidates are drawn uniformly from the room, then pulled toward a recent
    spawn position by ``cluster_weight`` so fire crawls across the room rather
    than popping up anywhere. The recent positions live in a bounded buffer.

    Timing values are in ticks.
    """

    def __init__(
        self,
        room: AnyRoom,
        *,
        spread_range: float = 2.0,
        min_separation: float = 1.8,
        cluster_weight: float = 0.5,
        history_size: int = 16,
        spread_chance: float = 1.0,
        delay_ticks: int = 20,
        jitter_ticks: int = 0,
        backoff_ticks: int = 40,
    ) -> None:
        if room is None:
            raise ValueError("SpreadPolicy requires a room")
        if min_separation > spread_range:
            raise ValueError("min_separation must not exceed spread_range")
        self.room = room
        self.spread_range = spread_range
        self.min_separation = min_separation
        self.cluster_weight = cluster_weight
        self.spread_chance = spread_chance
        self.delay_ticks = delay_ticks
        self.jitter_ticks = jitter_ticks
        self.backoff_ticks = backoff_ticks
        self._history: deque[Position] = deque(maxlen=history_size)

    # -- Timing --

    def next_delay(self, rng: random.Random) -> int:
        if self.jitter_ticks <= 0:
            return self.delay_ticks
        return self.delay_ticks + rng.randint(0, self.jitter_ticks)

    def roll(self, rng: random.Random) -> bool:
        """Decide whether a due fire actually tries to spread."""
        if self.spread_chance >= 1.0:
            return True
        return rng.random() < self.spread_chance

    # -- Placement --

    @property
    def history(self) -> tuple[Position, ...]:
        return tuple(self._history)

    def record(self, position: Position) -> None:
        self._history.append(position)

    def draw_candidate(self, rng: random.Random) -> Position:
        candidate = self.room.sample(rng)
        if self._history and self.cluster_weight > 0.0:
            anchor = self._history[rng.randrange(len(self._history))]
            candidate = vec.lerp(candidate, anchor, self.cluster_weight)
        return candidate

    def check(self, position: Position, occupied: Iterable[Position]) -> None:
        """Raise InvalidSpawnPosition if *position* is not a legal spawn site.

        *occupied* are the positions of the currently burning fires. Only fires
        within ``spread_range`` are considered; the first one closer than
        ``min_separation`` rejects the candidate.
        """
        if not self.room.contains(position):
            raise InvalidSpawnPosition(position, f"{position} is outside the room")
        range_sq = self.spread_range * self.spread_range
        sep_sq = self.min_separation * self.min_separation
        for other in occupied:
            dsq = vec.distance_sq(position, other)
            if dsq > range_sq:
                continue
            if dsq < sep_sq:
                raise InvalidSpawnPosition(
                    position, f"{position} is too close to a fire at {other}"
                )

    def is_valid(self, position: Position, occupied: Iterable[Position]) -> bool:
        try:
            self.check(position, occupied)
        except InvalidSpawnPosition as exc:
            logger.debug("fire cannot spread: %s", exc)
            return False
        return True
