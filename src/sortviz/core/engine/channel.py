from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Generator, Iterable, TypeVar

from sortviz.core.engine.stats import StatisticsTracker
from sortviz.core.engine.store import SequenceStore
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import Compare, MarkTag, RangeMarked, Swap, Write

T = TypeVar("T")

MIN_SPEED = 1
MAX_SPEED = 10


@dataclass(frozen=True, slots=True)
class Suspend:
    """
    Yielded by every instrumented primitive: "wait delay_ms, then resume me".

    The delay is captured when the primitive suspends, so pacing changes only
    affect later suspensions.
    """

    delay_ms: float
    primitive: str


# A resumable computation: yields Suspend requests, returns T when done.
Step = Generator[Suspend, None, T]
SortRoutine = Generator[Suspend, None, None]


class Pacing:
    """
    Shared, mutable pacing configuration read at every suspension.
    """

    def __init__(self, delay_ms: float = 200) -> None:
        self._lock = Lock()
        self._delay_ms = 0.0
        self.set_delay_ms(delay_ms)

    @property
    def delay_ms(self) -> float:
        with self._lock:
            return self._delay_ms

    def set_delay_ms(self, delay_ms: float) -> None:
        if delay_ms < 0:
            raise ValueError("pacing delay must be >= 0")
        with self._lock:
            self._delay_ms = float(delay_ms)

    def set_speed(self, speed: int) -> None:
        """
        Speed slider 1..10 -> delay 275..50 ms.
        """
        self.set_delay_ms(delay_for_speed(speed))


def delay_for_speed(speed: int) -> int:
    if not MIN_SPEED <= speed <= MAX_SPEED:
        raise ValueError(f"speed must be in [{MIN_SPEED}, {MAX_SPEED}]")
    return 300 - speed * 25


class InstrumentationChannel:
    """
    The only door algorithms have onto the sequence.

    Contract of every primitive (compare*, swap, write, visit):
      (a) read or mutate the SequenceStore
      (b) update exactly its counter
      (c) publish exactly one event
      (d) yield one Suspend

    Primitives are generators; algorithms call them with `yield from` and
    receive their result. (d) is the only place a run can be cancelled: the
    driver throws SortCancelled in at that yield, after (a)-(c) committed.
    """

    def __init__(
        self,
        *,
        store: SequenceStore,
        stats: StatisticsTracker,
        bus: EventBus,
        pacing: Pacing,
    ) -> None:
        self._store = store
        self._stats = stats
        self._bus = bus
        self._pacing = pacing

    @property
    def store(self) -> SequenceStore:
        return self._store

    @property
    def stats(self) -> StatisticsTracker:
        return self._stats

    # ---------------- Comparisons ----------------

    def compare(self, i: int, j: int) -> Step[bool]:
        """
        True when value[i] must come after value[j].
        """
        store = self._store
        outcome = store.out_of_order(store.value(i), store.value(j))
        self._stats.count_comparisons()
        self._bus.emit(Compare, i=i, j=j, outcome=outcome)
        yield from self._suspend("compare")
        return outcome

    def compare_held(self, i: int, held: int, *, held_first: bool = False) -> Step[bool]:
        """
        True when value[i] must come after a value held outside the sequence.

        held_first flips the operands: True when the held value must come
        after value[i].
        """
        value = self._store.value(i)
        if held_first:
            outcome = self._store.out_of_order(held, value)
        else:
            outcome = self._store.out_of_order(value, held)
        self._stats.count_comparisons()
        self._bus.emit(Compare, i=i, j=None, outcome=outcome)
        yield from self._suspend("compare")
        return outcome

    def compare_scratch(self, a: int, b: int, *, at: int) -> Step[bool]:
        """
        Compare two scratch-buffer values on behalf of slot `at`.
        """
        outcome = self._store.out_of_order(a, b)
        self._stats.count_comparisons()
        self._bus.emit(Compare, i=at, j=None, outcome=outcome)
        yield from self._suspend("compare")
        return outcome

    # ---------------- Mutations ----------------

    def swap(self, i: int, j: int) -> Step[None]:
        if i == j:
            # bounds still enforced; no write, no event, no suspension
            self._store.value(i)
            return
        self._store.exchange(i, j)
        self._stats.count_write()
        self._bus.emit(Swap, i=i, j=j)
        yield from self._suspend("swap")

    def write(self, index: int, value: int) -> Step[None]:
        self._store.put(index, value)
        self._stats.count_write()
        self._bus.emit(Write, index=index, value=value)
        yield from self._suspend("write")

    # ---------------- Scans ----------------

    def visit(self, index: int, *, tag: MarkTag = "visit", charge: bool = False) -> Step[None]:
        """
        Paced look at one slot (histogram / distribution passes).

        charge=True counts it as a comparison for algorithms whose reporting
        policy does so.
        """
        self._store.value(index)
        if charge:
            self._stats.count_comparisons()
        self._bus.emit(RangeMarked, indices=(index,), tag=tag)
        yield from self._suspend("visit")

    # ---------------- Markers (not primitives) ----------------

    def mark(self, indices: Iterable[int], tag: MarkTag) -> None:
        """
        Publish a marker immediately; no counter, no suspension.
        """
        idx = tuple(indices)
        if idx:
            self._bus.emit(RangeMarked, indices=idx, tag=tag)

    # ---------------- Internals ----------------

    def _suspend(self, primitive: str) -> Step[None]:
        yield Suspend(delay_ms=self._pacing.delay_ms, primitive=primitive)
