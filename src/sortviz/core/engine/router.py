from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from sortviz.core.events.bus import EventBus, EventHandler, Subscription


class EventComponent(Protocol):
    """
    A renderer, feed or recorder that listens to session events.
    """

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        """
        Return (event_type, handler) tuples.
        """
        ...


@dataclass(frozen=True, slots=True)
class WiredSubscription:
    component: str
    subscription: Subscription


@dataclass(frozen=True, slots=True)
class RouterWiring:
    """
    What got wired onto the bus, in wiring order.
    """

    subscriptions: tuple[WiredSubscription, ...]

    def components(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for w in self.subscriptions:
            seen.setdefault(w.component, None)
        return tuple(seen)


class EngineRouter:
    """
    Registers components onto an EventBus deterministically.

    Determinism rules:
      - components are wired in the order provided
      - each component's subscriptions() order is preserved
      - the same handler cannot be wired twice for one event type
    """

    def __init__(self, *, bus: EventBus) -> None:
        self._bus = bus
        self._seen: set[tuple[str, object]] = set()

    @staticmethod
    def _component_name(component: object) -> str:
        return type(component).__name__

    def register(self, components: Iterable[EventComponent]) -> RouterWiring:
        wired: list[WiredSubscription] = []

        for component in components:
            cname = self._component_name(component)

            subs = component.subscriptions()
            if not isinstance(subs, Sequence):
                raise TypeError(f"{cname}.subscriptions() must return a Sequence")

            for event_type, handler in subs:
                if not event_type:
                    raise ValueError(f"{cname} produced empty event_type")

                key = (event_type, _handler_key(handler))
                if key in self._seen:
                    raise RuntimeError(f"duplicate subscription detected: component={cname} event_type={event_type}")
                self._seen.add(key)

                s = self._bus.subscribe(event_type=event_type, handler=handler)
                wired.append(WiredSubscription(component=cname, subscription=s))

        return RouterWiring(subscriptions=tuple(wired))


def _handler_key(handler: EventHandler) -> object:
    # bound methods are re-created on every attribute access
    owner = getattr(handler, "__self__", None)
    func = getattr(handler, "__func__", None)
    if owner is not None and func is not None:
        return (id(owner), func)
    return id(handler)
