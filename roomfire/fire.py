"""FireAgent — one fire's lifecycle state machine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from roomfire.types import FireId, FireState, Position

if TYPE_CHECKING:
    from roomfire.session import FireSession

# Legal forward moves. EXTINGUISHED is terminal.
_TRANSITIONS: dict[FireState, frozenset[FireState]] = {
    FireState.SPAWNING: frozenset({FireState.ACTIVE, FireState.EXTINGUISHING,
                                   FireState.EXTINGUISHED}),
    FireState.ACTIVE: frozenset({FireState.EXTINGUISHING, FireState.EXTINGUISHED}),
    FireState.EXTINGUISHING: frozenset({FireState.EXTINGUISHED}),
    FireState.EXTINGUISHED: frozenset(),
}


@dataclass
class FireAgent:
    """A single fire.

    ``position`` never changes after creation. ``spread_timer`` counts ticks
    to the next spread attempt and is only meaningful while ACTIVE.
    """

    id: FireId
    position: Position
    intensity: float
    born_tick: int = 0
    parent: FireId | None = None
    state: FireState = FireState.SPAWNING
    spread_timer: int = 0

    @property
    def burning(self) -> bool:
        return self.state is not FireState.EXTINGUISHED

    @property
    def can_spread(self) -> bool:
        return self.state is FireState.ACTIVE

    def transition(self, target: FireState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise ValueError(f"Fire {self.id}: illegal transition {self.state.value} -> {target.value}")
        self.state = target

    def ignite(self, spread_timer: int) -> bool:
        """SPAWNING -> ACTIVE. Returns False if the fire already left SPAWNING."""
        if self.state is not FireState.SPAWNING:
            return False
        self.transition(FireState.ACTIVE)
        self.spread_timer = spread_timer
        return True

    def reduce(self, amount: float, threshold: float) -> bool:
        """Subtract *amount* from the intensity.

        Returns True exactly once: on the call that takes the fire to
        EXTINGUISHED. Already-extinguished fires are left untouched.
        """
        if self.state is FireState.EXTINGUISHED:
            return False
        self.intensity = max(0.0, self.intensity - amount)
        if self.intensity <= threshold:
            self.transition(FireState.EXTINGUISHED)
            return True
        if amount > 0 and self.state is not FireState.EXTINGUISHING:
            self.transition(FireState.EXTINGUISHING)
        return False

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "position": list(self.position),
            "intensity": self.intensity,
            "state": self.state.value,
            "parent": self.parent,
            "born_tick": self.born_tick,
        }


class FireHandle:
    """Read-mostly view of one fire handed to external callers."""

    __slots__ = ("_id", "_session")

    def __init__(self, fire_id: FireId, session: FireSession) -> None:
        self._id = fire_id
        self._session = session

    @property
    def id(self) -> FireId:
        return self._id

    @property
    def position(self) -> Position:
        return self._agent().position

    @property
    def intensity(self) -> float:
        return self._agent().intensity

    @property
    def state(self) -> FireState:
        return self._agent().state

    @property
    def burning(self) -> bool:
        return self._agent().burning

    def extinguish(self, amount: float) -> bool:
        return self._session.extinguish(self._id, amount)

    def _agent(self) -> FireAgent:
        agent = self._session.fire(self._id)
        if agent is None:
            raise KeyError(f"Fire {self._id} is no longer tracked")
        return agent

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FireHandle):
            return NotImplemented
        return self._id == other._id and self._session is other._session

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"FireHandle(id={self._id})"
