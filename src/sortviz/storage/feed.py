from __future__ import annotations

from collections import deque
from threading import Lock
from typing import Any, Sequence

from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventHandler
from sortviz.core.events.sorting import SORT_EVENT_TYPES
from sortviz.core.events.system import SYSTEM_EVENT_TYPES
from sortviz.storage.jsonl import event_to_dict

ALL_EVENT_TYPES: tuple[str, ...] = SYSTEM_EVENT_TYPES + SORT_EVENT_TYPES


class EventFeed:
    """
    EventBus component: bounded in-memory buffer of serialised events.

    Polling renderers ask for everything after the last sequence they saw.
    Oldest events drop out once capacity is reached.
    """

    def __init__(self, *, capacity: int = 5000) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._events: deque[dict[str, Any]] = deque(maxlen=capacity)
        self._lock = Lock()

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [(et, self._on_event) for et in ALL_EVENT_TYPES]

    def _on_event(self, e: Event) -> None:
        item = event_to_dict(e)
        with self._lock:
            self._events.append(item)

    def since(self, sequence: int = 0, *, limit: int | None = None) -> list[dict[str, Any]]:
        with self._lock:
            out = [e for e in self._events if e["sequence"] > sequence]
        return out[:limit] if limit is not None else out

    def last_sequence(self) -> int:
        with self._lock:
            return self._events[-1]["sequence"] if self._events else 0
