"""Lifecycle signal names and the in-process pub/sub bus."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

FIRE_SPAWNED = "fire_spawned"
FIRE_EXTINGUISHED = "fire_extinguished"
THERMAL_WARNING = "thermal_warning"
PHASE_CHANGED = "phase_changed"
EVACUATION_TRIGGERED = "evacuation_triggered"
SESSION_OVER = "session_over"

ALL_SIGNALS = (
    FIRE_SPAWNED,
    FIRE_EXTINGUISHED,
    THERMAL_WARNING,
    PHASE_CHANGED,
    EVACUATION_TRIGGERED,
    SESSION_OVER,
)

Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Queues published signals and delivers them on :meth:`flush`.

    The session flushes once at the end of every tick, so handlers always see
    the state as it stands after the tick. A handler may subscribe, unsubscribe
    or publish while being called; anything it publishes goes out on the next
    flush.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)
        self._pending: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._handlers[signal_name].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        for name in ALL_SIGNALS:
            self.subscribe(name, handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        """Remove one registration of *handler*. Unknown pairs are ignored."""
        handlers = self._handlers.get(signal_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, signal_name: str, **data: Any) -> None:
        self._pending.append((signal_name, data))

    def pending(self) -> int:
        return len(self._pending)

    def flush(self) -> int:
        """Deliver everything queued so far. Returns the number of signals sent."""
        batch, self._pending = self._pending, []
        for signal_name, data in batch:
            for handler in tuple(self._handlers.get(signal_name, ())):
                handler(signal_name, data)
        return len(batch)

    def clear(self) -> None:
        self._pending.clear()
