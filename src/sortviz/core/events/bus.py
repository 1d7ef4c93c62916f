from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from itertools import count
from threading import Lock
from typing import Callable, DefaultDict, TypeAlias

import structlog

from sortviz.core.events.base import Event

log = structlog.get_logger()

EventHandler: TypeAlias = Callable[[Event], None]


@dataclass(frozen=True)
class Subscription:
    """
    Represents a subscription of a handler to a specific event_type.
    """

    event_type: str
    handler: EventHandler


class EventBus:
    """
    Deterministic synchronous event bus.

    - publish(event) dispatches to handlers subscribed to event.event_type
    - dispatch order is subscription order
    - failures are fail-fast (raises into the publisher)
    - next_sequence() hands out the session-wide event ordering
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, list[EventHandler]] = defaultdict(list)
        self._sequence = count(1)
        self._sequence_lock = Lock()

    def next_sequence(self) -> int:
        with self._sequence_lock:
            return next(self._sequence)

    def subscribe(self, *, event_type: str, handler: EventHandler) -> Subscription:
        if not event_type:
            raise ValueError("event_type must be non-empty")
        self._handlers[event_type].append(handler)
        log.debug("bus.subscribed", event_type=event_type, handler=getattr(handler, "__name__", "handler"))
        return Subscription(event_type=event_type, handler=handler)

    def emit(self, event_cls: type[Event], **payload) -> Event:
        """
        Allocate a sequence, build the event and publish it.
        """
        event = event_cls.create(sequence=self.next_sequence(), **payload)
        self.publish(event)
        return event

    def publish(self, event: Event) -> None:
        handlers = self._handlers.get(event.event_type, [])
        log.debug(
            "bus.publish",
            event_type=event.event_type,
            sequence=event.sequence,
            handlers=len(handlers),
        )
        for handler in handlers:
            handler(event)
