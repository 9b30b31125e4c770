"""Chronicle — bounded log of lifecycle signals for telemetry."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterator

from roomfire.signals import SignalBus


@dataclass
class Entry:
    tick: int
    type: str
    data: dict[str, Any]


class Chronicle:
    """What happened in a session, tick by tick.

    Entries are kept oldest first. With ``max_entries`` set, the oldest entries
    fall off once the log is full; ``0`` keeps the whole session.
    """

    def __init__(self, max_entries: int = 0) -> None:
        self._entries: deque[Entry] = deque(maxlen=max_entries or None)

    def attach(self, bus: SignalBus) -> None:
        """Record every lifecycle signal published on *bus*.

        Signals carry the tick they were raised on in their ``tick`` field.
        """

        def record(signal_name: str, data: dict[str, Any]) -> None:
            fields = dict(data)
            tick = fields.pop("tick", 0)
            self.emit(tick, signal_name, **fields)

        bus.subscribe_all(record)

    def emit(self, tick: int, type: str, **data: Any) -> None:
        self._entries.append(Entry(tick, type, data))

    def query(self, type: str | None = None, after: int | None = None,
              before: int | None = None) -> list[Entry]:
        """Entries of *type* (any type if None) with ``after < tick < before``."""
        return [
            e for e in self._entries
            if (type is None or e.type == type)
            and (after is None or e.tick > after)
            and (before is None or e.tick < before)
        ]

    def last(self, type: str) -> Entry | None:
        return next((e for e in reversed(self._entries) if e.type == type), None)

    def count(self, type: str) -> int:
        return sum(e.type == type for e in self._entries)

    def to_list(self) -> list[dict[str, Any]]:
        return [{"tick": e.tick, "type": e.type, "data": e.data} for e in self]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
