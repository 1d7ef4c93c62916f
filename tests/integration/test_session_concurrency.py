from __future__ import annotations

import threading
from dataclasses import dataclass, field

import pytest

from sortviz.core.engine import controller as controller_module
from sortviz.core.engine.channel import Pacing
from sortviz.core.engine.controller import ExecutionController, RunOutcome
from sortviz.core.errors import InvalidTransition
from sortviz.core.events.bus import EventBus
from sortviz.datasets.generator import DatasetSource


@dataclass
class Gate:
    """
    Sleeper that parks the run thread at its first suspension until released.
    """

    suspended: threading.Event = field(default_factory=threading.Event)
    release: threading.Event = field(default_factory=threading.Event)

    def __call__(self, seconds: float) -> None:
        self.suspended.set()
        self.release.wait(10.0)


@dataclass
class Background:
    thread: threading.Thread
    outcomes: list[RunOutcome]

    def finish(self) -> RunOutcome:
        self.thread.join(10.0)
        assert not self.thread.is_alive()
        return self.outcomes[0]


def _controller(values: list[int], gate: Gate) -> ExecutionController:
    c = ExecutionController(bus=EventBus(), pacing=Pacing(delay_ms=1), algorithm="bubble", sleep=gate)
    c.load(values)
    return c


def _start_in_background(c: ExecutionController) -> Background:
    outcomes: list[RunOutcome] = []
    t = threading.Thread(target=lambda: outcomes.append(c.start()), daemon=True)
    t.start()
    return Background(thread=t, outcomes=outcomes)


def test_reset_rejected_when_a_run_begins_while_values_are_produced(monkeypatch: pytest.MonkeyPatch) -> None:
    gate = Gate()
    c = _controller([4, 3, 2, 1], gate)
    started: list[Background] = []

    def produce_while_a_run_starts(source: DatasetSource) -> list[int]:
        started.append(_start_in_background(c))
        assert gate.suspended.wait(5.0)
        return [9, 9, 9, 9]

    monkeypatch.setattr(c, "_produce", produce_while_a_run_starts)

    with pytest.raises(InvalidTransition):
        c.reset()

    assert c.status == "running"
    assert sorted(c.snapshot()) == [1, 2, 3, 4]

    gate.release.set()
    outcome = started[0].finish()

    assert outcome.status == "completed"
    assert c.snapshot() == (1, 2, 3, 4)


def test_load_rejected_when_a_run_begins_while_values_are_checked(monkeypatch: pytest.MonkeyPatch) -> None:
    gate = Gate()
    c = _controller([3, 1, 2], gate)
    started: list[Background] = []
    real_validate = controller_module.validate_values

    def validate_while_a_run_starts(values, **bounds):  # type: ignore[no-untyped-def]
        started.append(_start_in_background(c))
        assert gate.suspended.wait(5.0)
        return real_validate(values, **bounds)

    monkeypatch.setattr(controller_module, "validate_values", validate_while_a_run_starts)

    with pytest.raises(InvalidTransition):
        c.load([7, 7, 7])

    gate.release.set()
    assert started[0].finish().status == "completed"
    assert c.snapshot() == (1, 2, 3)
    assert c.source is not None and c.source.values == (3, 1, 2)


def test_reset_after_pause_waits_for_the_run_to_unwind() -> None:
    gate = Gate()
    values = [5, 4, 3, 2, 1]
    c = _controller(values, gate)
    run = _start_in_background(c)
    assert gate.suspended.wait(5.0)

    c.pause()
    resetter = threading.Thread(target=c.reset, daemon=True)
    resetter.start()
    resetter.join(0.1)

    # still parked in the sleeper; the store belongs to the run
    assert resetter.is_alive()
    assert c.status == "paused"

    gate.release.set()
    outcome = run.finish()
    resetter.join(10.0)

    assert outcome.status == "cancelled"
    assert not resetter.is_alive()
    assert c.status == "idle"
    assert c.snapshot() == tuple(values)
    assert c.statistics().comparisons == 0


def test_reset_from_inside_a_paused_run_is_rejected() -> None:
    errors: list[Exception] = []

    def pause_then_reset(seconds: float) -> None:
        c.pause()
        try:
            c.reset()
        except InvalidTransition as exc:
            errors.append(exc)

    c = ExecutionController(bus=EventBus(), pacing=Pacing(delay_ms=1), algorithm="bubble", sleep=pause_then_reset)
    c.load([2, 1])

    assert c.start().status == "cancelled"
    assert len(errors) == 1
    assert c.status == "paused"
    c.reset()
    assert c.status == "idle"
