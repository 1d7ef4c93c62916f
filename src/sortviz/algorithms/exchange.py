from __future__ import annotations

import math

from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine

COMB_SHRINK = 1.3


def bubble(ch: InstrumentationChannel) -> SortRoutine:
    """
    Adjacent passes, each one shorter; stops after a pass with no swap.
    """
    n = len(ch.store)
    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            if (yield from ch.compare(j, j + 1)):
                yield from ch.swap(j, j + 1)
                swapped = True

        # the largest remaining value has bubbled into place
        ch.mark([n - i - 1], "sorted")

        if not swapped:
            break


def comb(ch: InstrumentationChannel) -> SortRoutine:
    """
    Bubble sort over a gap that shrinks by 1.3 each pass down to 1.
    """
    n = len(ch.store)
    gap = n
    swapped = True

    while gap != 1 or swapped:
        gap = max(1, math.floor(gap / COMB_SHRINK))
        swapped = False

        for i in range(n - gap):
            if (yield from ch.compare(i, i + gap)):
                yield from ch.swap(i, i + gap)
                swapped = True
