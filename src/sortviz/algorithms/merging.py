from __future__ import annotations

from sortviz.algorithms.insertion import insertion_range
from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine
from sortviz.core.errors import SortCancelled

TIM_RUN = 32


class _Merger:
    """
    Writes merged scratch values back into [low, high] slot by slot.

    Scratch slices are copies of the range, so while a merge is in flight the
    unwritten slots hold stale values. On cancellation everything still in
    scratch settles into the slots from `next_slot` on.
    """

    def __init__(self, ch: InstrumentationChannel, low: int, parts: list[list[int]]) -> None:
        self.ch = ch
        self.parts = parts
        self.heads = [0] * len(parts)
        self.next_slot = low

    def live(self, p: int) -> bool:
        return self.heads[p] < len(self.parts[p])

    def head(self, p: int) -> int:
        return self.parts[p][self.heads[p]]

    def take(self, p: int) -> SortRoutine:
        value = self.head(p)
        self.heads[p] += 1
        self.next_slot += 1
        yield from self.ch.write(self.next_slot - 1, value)

    def remaining(self) -> list[int]:
        out: list[int] = []
        for part, h in zip(self.parts, self.heads):
            out.extend(part[h:])
        return out

    def settle(self) -> None:
        self.ch.store.settle_range(self.next_slot, self.remaining())


def merge_range(ch: InstrumentationChannel, low: int, mid: int, high: int) -> SortRoutine:
    """
    Linear 2-way merge of [low, mid] and [mid+1, high].

    One comparison per step while both sides are non-empty; ties take the
    left side (stable).
    """
    store = ch.store
    m = _Merger(ch, low, [store.slice(low, mid + 1), store.slice(mid + 1, high + 1)])
    try:
        while m.live(0) and m.live(1):
            k = m.next_slot
            if (yield from ch.compare_scratch(m.head(0), m.head(1), at=k)):
                yield from m.take(1)
            else:
                yield from m.take(0)

        while m.live(0):
            yield from m.take(0)
        while m.live(1):
            yield from m.take(1)
    except SortCancelled:
        m.settle()
        raise


def _merge_sort(ch: InstrumentationChannel, low: int, high: int) -> SortRoutine:
    if low < high:
        mid = (low + high) // 2
        yield from _merge_sort(ch, low, mid)
        yield from _merge_sort(ch, mid + 1, high)
        yield from merge_range(ch, low, mid, high)
    elif low == high:
        ch.mark([low], "sorted")


def merge(ch: InstrumentationChannel) -> SortRoutine:
    yield from _merge_sort(ch, 0, len(ch.store) - 1)


# ---------------- 3-way ----------------


def _merge3(ch: InstrumentationChannel, low: int, mid1: int, mid2: int, high: int) -> SortRoutine:
    store = ch.store
    m = _Merger(
        ch,
        low,
        [store.slice(low, mid1 + 1), store.slice(mid1 + 1, mid2 + 1), store.slice(mid2 + 1, high + 1)],
    )
    try:
        # two charged comparisons per step while all three are live
        while m.live(0) and m.live(1) and m.live(2):
            k = m.next_slot
            if (yield from ch.compare_scratch(m.head(0), m.head(1), at=k)):
                a = 1
            else:
                a = 0
            if (yield from ch.compare_scratch(m.head(a), m.head(2), at=k)):
                yield from m.take(2)
            else:
                yield from m.take(a)

        # pairwise fallback, comparisons not charged
        out_of_order = store.out_of_order
        for a, b in ((0, 1), (1, 2), (0, 2)):
            while m.live(a) and m.live(b):
                yield from m.take(b if out_of_order(m.head(a), m.head(b)) else a)

        for p in range(3):
            while m.live(p):
                yield from m.take(p)
    except SortCancelled:
        m.settle()
        raise


def _merge3_sort(ch: InstrumentationChannel, low: int, high: int) -> SortRoutine:
    if low < high:
        third = (high - low) // 3
        mid1 = low + third
        mid2 = low + 2 * third + 1

        yield from _merge3_sort(ch, low, mid1)
        yield from _merge3_sort(ch, mid1 + 1, mid2)
        yield from _merge3_sort(ch, mid2 + 1, high)

        yield from _merge3(ch, low, mid1, mid2, high)


def merge3way(ch: InstrumentationChannel) -> SortRoutine:
    yield from _merge3_sort(ch, 0, len(ch.store) - 1)


# ---------------- Tim ----------------


def tim(ch: InstrumentationChannel) -> SortRoutine:
    """
    Insertion-sort fixed runs of 32, then merge run pairs of doubling width.
    """
    n = len(ch.store)

    for start in range(0, n, TIM_RUN):
        yield from insertion_range(ch, start, min(start + TIM_RUN - 1, n - 1))

    size = TIM_RUN
    while size < n:
        for start in range(0, n, size * 2):
            mid = start + size - 1
            end = min(start + size * 2 - 1, n - 1)
            if mid < end:
                yield from merge_range(ch, start, mid, end)
        size *= 2
