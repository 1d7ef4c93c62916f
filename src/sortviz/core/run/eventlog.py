from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventHandler
from sortviz.storage.feed import ALL_EVENT_TYPES
from sortviz.storage.jsonl import JsonlEventStore


@dataclass(frozen=True, slots=True)
class EventLogWriter:
    """
    EventBus component: persists every session event to a JSONL trace.
    """

    store: JsonlEventStore
    event_types: tuple[str, ...] = ALL_EVENT_TYPES

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [(et, self._on_event) for et in self.event_types]

    def _on_event(self, e: Event) -> None:
        self.store.append(e)

    def close(self) -> None:
        self.store.close()
