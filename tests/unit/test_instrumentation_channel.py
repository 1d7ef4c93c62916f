from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generator

import pytest

from sortviz.core.engine.channel import InstrumentationChannel, Pacing, Suspend, delay_for_speed
from sortviz.core.engine.stats import StatisticsTracker
from sortviz.core.engine.store import SequenceStore
from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import SORT_EVENT_TYPES, Compare, RangeMarked, Swap, Write


@dataclass
class Recorder:
    events: list[Event] = field(default_factory=list)

    def attach(self, bus: EventBus) -> None:
        for et in SORT_EVENT_TYPES:
            bus.subscribe(event_type=et, handler=self.events.append)


def _channel(values: list[int], *, order: str = "ascending", delay_ms: float = 5) -> tuple[InstrumentationChannel, Recorder]:
    bus = EventBus()
    rec = Recorder()
    rec.attach(bus)
    ch = InstrumentationChannel(
        store=SequenceStore(values, order=order),  # type: ignore[arg-type]
        stats=StatisticsTracker(),
        bus=bus,
        pacing=Pacing(delay_ms=delay_ms),
    )
    return ch, rec


def _drain(gen: Generator[Suspend, None, Any]) -> tuple[Any, list[Suspend]]:
    steps: list[Suspend] = []
    try:
        while True:
            steps.append(next(gen))
    except StopIteration as stop:
        return stop.value, steps


def test_compare_counts_emits_and_suspends_once() -> None:
    ch, rec = _channel([5, 3])

    outcome, steps = _drain(ch.compare(0, 1))

    assert outcome is True
    assert [s.primitive for s in steps] == ["compare"]
    assert steps[0].delay_ms == 5
    assert ch.stats.comparisons == 1
    assert ch.stats.writes == 0
    assert len(rec.events) == 1
    e = rec.events[0]
    assert isinstance(e, Compare)
    assert (e.i, e.j, e.outcome) == (0, 1, True)


def test_compare_respects_descending_order() -> None:
    ch, _ = _channel([5, 3], order="descending")
    outcome, _ = _drain(ch.compare(0, 1))
    assert outcome is False


def test_compare_held_operand_order() -> None:
    ch, rec = _channel([5])

    outcome, _ = _drain(ch.compare_held(0, 3))
    assert outcome is True

    outcome, _ = _drain(ch.compare_held(0, 3, held_first=True))
    assert outcome is False

    assert ch.stats.comparisons == 2
    assert all(isinstance(e, Compare) and e.j is None for e in rec.events)


def test_swap_exchanges_and_counts_a_write() -> None:
    ch, rec = _channel([1, 2, 3])

    _, steps = _drain(ch.swap(0, 2))

    assert ch.store.snapshot() == (3, 2, 1)
    assert ch.stats.writes == 1
    assert len(steps) == 1
    assert isinstance(rec.events[0], Swap)


def test_swap_with_identical_indices_is_a_no_op() -> None:
    ch, rec = _channel([1, 2, 3])

    _, steps = _drain(ch.swap(1, 1))

    assert steps == []
    assert rec.events == []
    assert ch.stats.writes == 0
    assert ch.store.snapshot() == (1, 2, 3)


def test_swap_with_identical_indices_still_checks_bounds() -> None:
    ch, _ = _channel([1, 2, 3])
    with pytest.raises(IndexError):
        _drain(ch.swap(3, 3))


def test_write_sets_one_slot() -> None:
    ch, rec = _channel([1, 2, 3])

    _drain(ch.write(1, 9))

    assert ch.store.snapshot() == (1, 9, 3)
    assert ch.stats.writes == 1
    e = rec.events[0]
    assert isinstance(e, Write)
    assert (e.index, e.value) == (1, 9)


def test_visit_charges_only_when_asked() -> None:
    ch, rec = _channel([4, 5])

    _drain(ch.visit(0))
    assert ch.stats.comparisons == 0

    _drain(ch.visit(1, charge=True))
    assert ch.stats.comparisons == 1

    assert [e.tag for e in rec.events if isinstance(e, RangeMarked)] == ["visit", "visit"]


def test_mark_does_not_suspend_or_count() -> None:
    ch, rec = _channel([1, 2, 3])

    ch.mark(range(3), "sorted")
    ch.mark([], "sorted")

    assert len(rec.events) == 1
    e = rec.events[0]
    assert isinstance(e, RangeMarked)
    assert e.indices == (0, 1, 2)
    assert (ch.stats.comparisons, ch.stats.writes) == (0, 0)


def test_pacing_is_read_at_each_suspension() -> None:
    pacing = Pacing(delay_ms=100)
    ch = InstrumentationChannel(
        store=SequenceStore([2, 1]),
        stats=StatisticsTracker(),
        bus=EventBus(),
        pacing=pacing,
    )
    first = next(ch.compare(0, 1))

    pacing.set_delay_ms(0)
    _, later = _drain(ch.compare(0, 1))

    assert first.delay_ms == 100
    assert later[0].delay_ms == 0


def test_speed_maps_to_delay() -> None:
    assert delay_for_speed(1) == 275
    assert delay_for_speed(10) == 50

    pacing = Pacing()
    pacing.set_speed(4)
    assert pacing.delay_ms == 200

    with pytest.raises(ValueError):
        pacing.set_speed(0)
    with pytest.raises(ValueError):
        pacing.set_delay_ms(-1)


def test_events_carry_increasing_sequence_numbers() -> None:
    ch, rec = _channel([3, 2, 1])

    _drain(ch.compare(0, 1))
    _drain(ch.swap(0, 1))
    _drain(ch.write(2, 7))

    seqs = [e.sequence for e in rec.events]
    assert seqs == sorted(seqs)
    assert len(set(seqs)) == 3
