"""Thread-safe battle event feed shared by the encounter runner and the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BattleEvent:
    """One line of the battle log."""

    turn: int
    category: str                          # combat | kill | altar | objective | end
    message: str
    combatant_ids: tuple[str, ...] = ()


class EventLog:
    """Append-only event log with an optional size cap.

    Writers append, readers get list copies. A single lock guards the deque;
    the API reads it from request threads while encounters write to it.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int | None = None) -> None:
        self._buffer: deque[BattleEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: BattleEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def extend(self, events: list[BattleEvent] | tuple[BattleEvent, ...]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_turn(self, turn: int) -> list[BattleEvent]:
        """Return all events with turn >= *turn*."""
        with self._lock:
            return [e for e in self._buffer if e.turn >= turn]

    def snapshot(self) -> tuple[BattleEvent, ...]:
        with self._lock:
            return tuple(self._buffer)
