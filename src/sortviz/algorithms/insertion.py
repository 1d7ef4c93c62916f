from __future__ import annotations

from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine
from sortviz.core.errors import SortCancelled


def insertion_range(ch: InstrumentationChannel, low: int, high: int) -> SortRoutine:
    """
    Insertion sort over [low, high] by shifting with writes.

    The key is held outside the sequence while elements shift right, so
    `hole` always names the slot whose value is a stale duplicate. On
    cancellation the key goes back into that hole.
    """
    store = ch.store
    for i in range(low + 1, high + 1):
        key = store.value(i)
        hole = i
        try:
            while hole > low and (yield from ch.compare_held(hole - 1, key)):
                hole -= 1
                yield from ch.write(hole + 1, store.value(hole))
            yield from ch.write(hole, key)
        except SortCancelled:
            store.settle(hole, key)
            raise


def insertion(ch: InstrumentationChannel) -> SortRoutine:
    n = len(ch.store)
    if n:
        ch.mark([0], "sorted")
    yield from insertion_range(ch, 0, n - 1)
