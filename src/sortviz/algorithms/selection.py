from __future__ import annotations

from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine, Step
from sortviz.core.engine.store import SequenceStore
from sortviz.core.errors import InternalSortError, SortCancelled


def selection(ch: InstrumentationChannel) -> SortRoutine:
    """
    Scan the unsorted tail for its extremal value, then swap it in once.
    """
    n = len(ch.store)
    for i in range(n - 1):
        extremal = i
        for j in range(i + 1, n):
            if (yield from ch.compare(extremal, j)):
                extremal = j

        if extremal != i:
            yield from ch.swap(i, extremal)
        ch.mark([i], "sorted")


# ---------------- Heap ----------------


def sift_down(ch: InstrumentationChannel, low: int, high: int, root: int) -> SortRoutine:
    """
    Restore the heap property below `root` for the heap stored in [low, high].

    Max-heap under ascending order, min-heap under descending; one comparison
    per child examined.
    """
    while True:
        top = root
        left = low + 2 * (root - low) + 1
        right = left + 1

        if left <= high and (yield from ch.compare(left, top)):
            top = left
        if right <= high and (yield from ch.compare(right, top)):
            top = right

        if top == root:
            return

        yield from ch.swap(root, top)
        root = top


def heap_range(ch: InstrumentationChannel, low: int, high: int, *, mark_settled: bool = False) -> SortRoutine:
    n = high - low + 1
    for offset in range(n // 2 - 1, -1, -1):
        yield from sift_down(ch, low, high, low + offset)

    for end in range(high, low, -1):
        yield from ch.swap(low, end)
        if mark_settled:
            ch.mark([end], "sorted")
        yield from sift_down(ch, low, end - 1, low)


def heap(ch: InstrumentationChannel) -> SortRoutine:
    yield from heap_range(ch, 0, len(ch.store) - 1, mark_settled=True)


# ---------------- Cycle ----------------


def _rank(ch: InstrumentationChannel, start: int, item: int) -> Step[int]:
    """
    Final slot of `item`: start + number of later values that precede it.
    """
    pos = start
    for i in range(start + 1, len(ch.store)):
        if (yield from ch.compare_held(i, item, held_first=True)):
            pos += 1
    return pos


def _skip_equal(store: SequenceStore, pos: int, item: int) -> int:
    n = len(store)
    while pos < n and store.value(pos) == item:
        pos += 1
    if pos >= n:
        raise InternalSortError(f"cycle sort ran past the end looking for a slot for {item}")
    return pos


def cycle(ch: InstrumentationChannel) -> SortRoutine:
    """
    Place every value straight into its final slot, rotating each cycle.

    Writes equal the number of misplaced values. While a cycle rotates, one
    value is held outside the sequence and the cycle start holds a stale
    copy; on cancellation the held value settles into the cycle start.
    """
    store = ch.store
    n = len(store)

    for start in range(n - 1):
        item = store.value(start)
        pos = yield from _rank(ch, start, item)
        if pos == start:
            continue

        holding = True
        try:
            pos = _skip_equal(store, pos, item)
            placing, item = item, store.value(pos)
            yield from ch.write(pos, placing)

            while pos != start:
                pos = yield from _rank(ch, start, item)

                if pos == start:
                    # closes the cycle: the start slot holds a stale copy
                    holding = False
                    if store.value(start) != item:
                        yield from ch.write(start, item)
                    break

                pos = _skip_equal(store, pos, item)
                placing, item = item, store.value(pos)
                yield from ch.write(pos, placing)
        except SortCancelled:
            if holding:
                store.settle(start, item)
            raise
