"""Intents submitted to the session and the FIFO queue that carries them."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

from roomfire.types import FireId, Position


@dataclass(frozen=True)
class SpawnIntent:
    """A fire asks for a child at *position*."""

    parent: FireId
    position: Position
    intensity: float


@dataclass(frozen=True)
class ExtinguishIntent:
    fire_id: FireId
    amount: float


@dataclass(frozen=True)
class HeatIntent:
    """Signed temperature change."""

    delta: float
    reason: str = ""


class IntentQueue:
    """Routes intents to one handler per intent type, in arrival order.

    ``handler(intent) -> bool``: True if applied, False if refused. Refusals
    are normal (a full room, a bad spot) and never raise.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Any], Callable[[Any], bool]] = {}
        self._pending: deque[Any] = deque()

    def handle(self, intent_type: type[Any], handler: Callable[[Any], bool]) -> None:
        self._handlers[intent_type] = handler

    def submit(self, intent: Any) -> None:
        if type(intent) not in self._handlers:
            raise TypeError(f"No handler registered for {type(intent).__qualname__}")
        self._pending.append(intent)

    def pending(self) -> int:
        return len(self._pending)

    def drain(self) -> list[tuple[Any, bool]]:
        """Apply every pending intent, including ones submitted while draining."""
        results: list[tuple[Any, bool]] = []
        while self._pending:
            intent = self._pending.popleft()
            applied = self._handlers[type(intent)](intent)
            results.append((intent, applied))
        return results

    def clear(self) -> None:
        self._pending.clear()
