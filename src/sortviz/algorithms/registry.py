from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, get_args

from sortviz.algorithms.distribution import bucket, counting, pigeonhole, radix
from sortviz.algorithms.exchange import bubble, comb
from sortviz.algorithms.insertion import insertion
from sortviz.algorithms.merging import merge, merge3way, tim
from sortviz.algorithms.partition import intro, quick
from sortviz.algorithms.selection import cycle, heap, selection
from sortviz.core.engine.channel import InstrumentationChannel, SortRoutine
from sortviz.core.errors import InvalidInput

AlgorithmKey = Literal[
    "bubble",
    "selection",
    "insertion",
    "quick",
    "merge",
    "merge3way",
    "heap",
    "cycle",
    "counting",
    "radix",
    "bucket",
    "pigeonhole",
    "intro",
    "tim",
    "comb",
]

ALGORITHM_KEYS: tuple[str, ...] = get_args(AlgorithmKey)


@dataclass(frozen=True, slots=True)
class Algorithm:
    key: str
    name: str
    routine: Callable[[InstrumentationChannel], SortRoutine]


ALGORITHMS: dict[str, Algorithm] = {
    a.key: a
    for a in (
        Algorithm("bubble", "Bubble Sort", bubble),
        Algorithm("selection", "Selection Sort", selection),
        Algorithm("insertion", "Insertion Sort", insertion),
        Algorithm("quick", "Quick Sort", quick),
        Algorithm("merge", "Merge Sort", merge),
        Algorithm("merge3way", "3-way Merge Sort", merge3way),
        Algorithm("heap", "Heap Sort", heap),
        Algorithm("cycle", "Cycle Sort", cycle),
        Algorithm("counting", "Counting Sort", counting),
        Algorithm("radix", "Radix Sort", radix),
        Algorithm("bucket", "Bucket Sort", bucket),
        Algorithm("pigeonhole", "Pigeonhole Sort", pigeonhole),
        Algorithm("intro", "IntroSort", intro),
        Algorithm("tim", "TimSort", tim),
        Algorithm("comb", "Comb Sort", comb),
    )
}


def get_algorithm(key: str) -> Algorithm:
    try:
        return ALGORITHMS[key]
    except KeyError:
        raise InvalidInput(f"unknown algorithm: {key!r}") from None


def run_algorithm(key: str, ch: InstrumentationChannel) -> SortRoutine:
    """
    The selected algorithm followed by the full-range "sorted" marker.
    """
    algorithm = get_algorithm(key)
    yield from algorithm.routine(ch)
    ch.mark(range(len(ch.store)), "sorted")
