from __future__ import annotations

from typing import Callable, Sequence

from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine
from sortviz.core.errors import InternalSortError, SortCancelled

RADIX_BASE = 10
MAX_BUCKETS = 10


def _copy_back(ch: InstrumentationChannel, output: Sequence[int]) -> SortRoutine:
    """
    Write a fully built output buffer over the sequence, slot by slot.

    `output` is a permutation of the sequence, so on cancellation the
    unwritten tail settles from it directly.
    """
    k = 0
    try:
        while k < len(output):
            k += 1
            yield from ch.write(k - 1, output[k - 1])
    except SortCancelled:
        ch.store.settle_range(k, output[k:])
        raise


def _stable_place(
    ch: InstrumentationChannel,
    key: Callable[[int], int],
    buckets: int,
    *,
    charge: bool,
) -> SortRoutine:
    """
    Stable counting sort of the whole sequence on key(value) in [0, buckets).

    Histogram pass (one paced visit per element, optionally charged as a
    comparison), prefix sums forward for ascending / backward for
    descending, right-to-left placement into an output buffer, copy back.
    """
    store = ch.store
    n = len(store)
    count = [0] * buckets

    for i in range(n):
        count[key(store.value(i))] += 1
        yield from ch.visit(i, tag="visit", charge=charge)

    if store.descending:
        for b in range(buckets - 2, -1, -1):
            count[b] += count[b + 1]
    else:
        for b in range(1, buckets):
            count[b] += count[b - 1]

    output = [0] * n
    for i in range(n - 1, -1, -1):
        value = store.value(i)
        b = key(value)
        output[count[b] - 1] = value
        count[b] -= 1
        yield from ch.visit(i, tag="gather")

    yield from _copy_back(ch, output)


def counting(ch: InstrumentationChannel) -> SortRoutine:
    """
    Counting sort over [min, max]; each histogram step counts as a comparison.
    """
    if not len(ch.store):
        return
    low, high = ch.store.bounds()
    yield from _stable_place(ch, lambda v: v - low, high - low + 1, charge=True)


def radix(ch: InstrumentationChannel) -> SortRoutine:
    """
    LSD radix sort, base 10: one stable digit pass per decimal weight.
    """
    if not len(ch.store):
        return
    low, high = ch.store.bounds()
    if low < 0:
        raise InternalSortError("radix sort requires non-negative values")

    weight = 1
    while high // weight > 0:
        w = weight
        yield from _stable_place(ch, lambda v: (v // w) % RADIX_BASE, RADIX_BASE, charge=False)
        weight *= RADIX_BASE


def bucket(ch: InstrumentationChannel) -> SortRoutine:
    """
    Spread values over min(10, n) equal-width buckets, sort each, concatenate.
    """
    store = ch.store
    n = len(store)
    if not n:
        return

    low, high = store.bounds()
    span = high - low + 1
    count = min(MAX_BUCKETS, n)
    buckets: list[list[int]] = [[] for _ in range(count)]

    for i in range(n):
        value = store.value(i)
        index = min(int((value - low) / span * count), count - 1)
        buckets[index].append(value)
        yield from ch.visit(i)

    output: list[int] = []
    ordered = reversed(buckets) if store.descending else iter(buckets)
    for b in ordered:
        output.extend(sorted(b, reverse=store.descending))

    yield from _copy_back(ch, output)


def pigeonhole(ch: InstrumentationChannel) -> SortRoutine:
    """
    One hole per value in [min, max]; drain the holes in order.
    """
    store = ch.store
    n = len(store)
    if not n:
        return

    low, high = store.bounds()
    holes: list[list[int]] = [[] for _ in range(high - low + 1)]

    for i in range(n):
        value = store.value(i)
        holes[value - low].append(value)
        yield from ch.visit(i)

    order = range(len(holes) - 1, -1, -1) if store.descending else range(len(holes))
    output = [v for h in order for v in holes[h]]

    yield from _copy_back(ch, output)
