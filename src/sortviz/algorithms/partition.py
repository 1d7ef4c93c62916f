from __future__ import annotations

import math

from sortviz.algorithms.insertion import insertion_range
from sortviz.algorithms.selection import heap_range
from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine, Step

INTRO_INSERTION_THRESHOLD = 16


def lomuto_partition(ch: InstrumentationChannel, low: int, high: int) -> Step[int]:
    """
    Partition [low, high] around value[high]; return the pivot's final slot.

    One comparison per element against the pivot.
    """
    ch.mark([high], "pivot")

    boundary = low - 1
    for j in range(low, high):
        if not (yield from ch.compare(j, high)):
            boundary += 1
            yield from ch.swap(boundary, j)

    pivot = boundary + 1
    yield from ch.swap(pivot, high)
    ch.mark([pivot], "sorted")
    return pivot


def _quick(ch: InstrumentationChannel, low: int, high: int) -> SortRoutine:
    if low < high:
        pivot = yield from lomuto_partition(ch, low, high)
        yield from _quick(ch, low, pivot - 1)
        yield from _quick(ch, pivot + 1, high)
    elif low == high:
        ch.mark([low], "sorted")


def quick(ch: InstrumentationChannel) -> SortRoutine:
    yield from _quick(ch, 0, len(ch.store) - 1)


def _intro(ch: InstrumentationChannel, low: int, high: int, depth: int) -> SortRoutine:
    while high > low:
        if high - low + 1 < INTRO_INSERTION_THRESHOLD:
            yield from insertion_range(ch, low, high)
            return

        if depth == 0:
            yield from heap_range(ch, low, high)
            return

        pivot = yield from lomuto_partition(ch, low, high)

        # recurse into the smaller side, keep looping on the larger one
        if pivot - low < high - pivot:
            yield from _intro(ch, low, pivot - 1, depth - 1)
            low = pivot + 1
        else:
            yield from _intro(ch, pivot + 1, high, depth - 1)
            high = pivot - 1
        depth -= 1


def intro_depth_budget(n: int) -> int:
    return 2 * int(math.log2(n)) if n > 0 else 0


def intro(ch: InstrumentationChannel) -> SortRoutine:
    n = len(ch.store)
    yield from _intro(ch, 0, n - 1, intro_depth_budget(n))
