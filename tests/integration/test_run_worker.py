from __future__ import annotations

import threading

import pytest

from sortviz.core.engine.channel import Pacing
from sortviz.core.engine.controller import ExecutionController
from sortviz.core.errors import InvalidTransition
from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import SORT_EVENT_TYPES
from sortviz.core.run.worker import RunWorker


def _controller(values: list[int], **kw) -> ExecutionController:  # type: ignore[no-untyped-def]
    kw.setdefault("pacing", Pacing(delay_ms=0))
    kw.setdefault("sleep", lambda s: None)
    c = ExecutionController(bus=EventBus(), algorithm="insertion", **kw)
    c.load(values)
    return c


def test_launch_returns_the_run_it_began() -> None:
    c = _controller([4, 1, 3, 2])
    worker = RunWorker(c)

    run_id = worker.launch()
    outcome = worker.join(timeout=10.0)

    assert run_id is not None
    assert outcome is not None
    assert outcome.run_id == run_id
    assert outcome.status == "completed"
    assert c.snapshot() == (1, 2, 3, 4)


def test_launch_from_paused_raises_on_the_caller() -> None:
    c = _controller([3, 2, 1])

    def pause_once(e: Event) -> None:
        if c.status == "running":
            c.pause()

    for et in SORT_EVENT_TYPES:
        c.bus.subscribe(event_type=et, handler=pause_once)
    assert c.start().status == "cancelled"

    worker = RunWorker(c)
    with pytest.raises(InvalidTransition):
        worker.launch()

    assert worker.join(timeout=0) is None
    assert c.status == "paused"


def test_launch_while_running_is_declined() -> None:
    suspended = threading.Event()
    release = threading.Event()

    def park(seconds: float) -> None:
        suspended.set()
        release.wait(10.0)

    c = _controller([2, 1], pacing=Pacing(delay_ms=1), sleep=park)
    worker = RunWorker(c)

    first = worker.launch()
    assert suspended.wait(5.0)
    assert worker.launch() is None

    release.set()
    outcome = worker.join(timeout=10.0)
    assert outcome is not None
    assert outcome.run_id == first
    assert outcome.status == "completed"
