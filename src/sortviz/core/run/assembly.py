from __future__ import annotations

import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import structlog

from sortviz.algorithms.registry import get_algorithm
from sortviz.core.config.settings import AppSettings, settings
from sortviz.core.engine.channel import Pacing
from sortviz.core.engine.controller import ExecutionController
from sortviz.core.engine.driver import Sleeper
from sortviz.core.engine.router import EngineRouter, RouterWiring
from sortviz.core.engine.store import SequenceStore
from sortviz.core.events.bus import EventBus
from sortviz.core.run.eventlog import EventLogWriter
from sortviz.core.run.registry import RunRegistry
from sortviz.datasets.generator import DatasetBounds, DatasetSource
from sortviz.storage.feed import EventFeed
from sortviz.storage.jsonl import JsonlEventStore

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SessionHandle:
    """
    Canonical handle for a wired sorting session in this process.

    - feed backs the polling event endpoint
    - runs keeps the per-run summaries
    - eventlog is set only when a trace path was configured
    """

    controller: ExecutionController
    bus: EventBus
    wiring: RouterWiring
    feed: EventFeed
    runs: RunRegistry
    eventlog: EventLogWriter | None
    components: tuple[object, ...]

    def close(self) -> None:
        if self.eventlog is not None:
            self.eventlog.close()


def build_session(
    *,
    app_settings: AppSettings = settings,
    sleep: Sleeper = time.sleep,
    extra_components: Iterable[object] = (),
    trace_path: Path | None = None,
) -> SessionHandle:
    """
    Wire a bus, its components and a controller, then load the default
    dataset so the session is immediately startable.
    """
    bounds = DatasetBounds(
        min_size=app_settings.min_size,
        max_size=app_settings.max_size,
        min_value=app_settings.min_value,
        max_value=app_settings.max_value,
    )
    get_algorithm(app_settings.default_algorithm)

    bus = EventBus()
    feed = EventFeed(capacity=app_settings.event_feed_capacity)
    runs = RunRegistry()

    components: list[object] = [feed, runs]

    path = trace_path if trace_path is not None else app_settings.trace_path
    eventlog: EventLogWriter | None = None
    if path is not None:
        eventlog = EventLogWriter(store=JsonlEventStore(path=path))
        components.append(eventlog)

    for c in extra_components:
        components.append(c)

    wiring = EngineRouter(bus=bus).register(components)

    controller = ExecutionController(
        bus=bus,
        store=SequenceStore(order=app_settings.default_order),
        pacing=Pacing(delay_ms=app_settings.default_pacing_ms),
        algorithm=app_settings.default_algorithm,
        bounds=bounds,
        rng=random.Random(app_settings.default_seed),
        sleep=sleep,
    )
    controller.load_dataset(DatasetSource.generated(app_settings.default_pattern, app_settings.default_size))

    log.info(
        "session.assembled",
        algorithm=controller.algorithm,
        order=controller.order,
        components=list(wiring.components()),
        trace=str(path) if path is not None else None,
    )

    return SessionHandle(
        controller=controller,
        bus=bus,
        wiring=wiring,
        feed=feed,
        runs=runs,
        eventlog=eventlog,
        components=tuple(components),
    )
