from __future__ import annotations

import random

import pytest

from sortviz.algorithms.registry import ALGORITHM_KEYS
from sortviz.core.engine.channel import Pacing
from sortviz.core.engine.controller import ExecutionController
from sortviz.core.engine.store import SequenceStore
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import Compare, RangeMarked, Swap, Write

LENGTHS = (0, 1, 2, 3, 5, 16, 17, 33, 64, 100)


def _controller(values: list[int], *, algorithm: str, order: str = "ascending") -> ExecutionController:
    c = ExecutionController(
        bus=EventBus(),
        store=SequenceStore(order=order),  # type: ignore[arg-type]
        pacing=Pacing(delay_ms=0),
        algorithm=algorithm,
        sleep=lambda s: None,
    )
    c.load(values)
    return c


def _dataset(n: int, seed: int) -> list[int]:
    rng = random.Random(seed)
    # duplicates on purpose
    return [rng.randint(1, 60) for _ in range(n)]


@pytest.mark.parametrize("algorithm", ALGORITHM_KEYS)
@pytest.mark.parametrize("order", ["ascending", "descending"])
@pytest.mark.parametrize("n", LENGTHS)
def test_every_algorithm_yields_an_ordered_permutation(algorithm: str, order: str, n: int) -> None:
    values = _dataset(n, seed=n * 31 + len(algorithm))
    c = _controller(values, algorithm=algorithm, order=order)

    outcome = c.start()

    assert outcome.status == "completed"
    assert c.status == "completed"
    assert list(c.snapshot()) == sorted(values, reverse=(order == "descending"))
    assert outcome.statistics.comparisons >= 0
    assert outcome.statistics.writes >= 0


@pytest.mark.parametrize("algorithm", ALGORITHM_KEYS)
@pytest.mark.parametrize("pattern", ["reversed", "sorted", "equal"])
def test_structured_inputs(algorithm: str, pattern: str) -> None:
    if pattern == "reversed":
        values = list(range(80, 0, -1))
    elif pattern == "sorted":
        values = list(range(1, 81))
    else:
        values = [42] * 40

    for order in ("ascending", "descending"):
        c = _controller(values, algorithm=algorithm, order=order)
        c.start().raise_for_failure()
        assert list(c.snapshot()) == sorted(values, reverse=(order == "descending"))


def test_bubble_sorts_the_classic_example() -> None:
    c = _controller([5, 3, 8, 1], algorithm="bubble")

    outcome = c.start()

    assert c.snapshot() == (1, 3, 5, 8)
    assert outcome.statistics.comparisons == 6
    assert outcome.statistics.writes == 4


@pytest.mark.parametrize("algorithm", ALGORITHM_KEYS)
def test_all_equal_input_is_untouched(algorithm: str) -> None:
    c = _controller([1, 1, 1], algorithm=algorithm)
    c.start().raise_for_failure()
    assert c.snapshot() == (1, 1, 1)


def test_selection_on_equal_values_never_writes() -> None:
    c = _controller([1, 1, 1], algorithm="selection")
    outcome = c.start()
    assert outcome.statistics.writes == 0
    assert outcome.statistics.comparisons == 3


def test_radix_on_custom_input() -> None:
    c = _controller([], algorithm="radix")
    c.load_custom("500,1,250")

    c.start().raise_for_failure()

    assert c.snapshot() == (1, 250, 500)
    assert c.statistics().comparisons == 0


@pytest.mark.parametrize("algorithm", ALGORITHM_KEYS)
def test_empty_input_completes_without_work(algorithm: str) -> None:
    c = _controller([], algorithm=algorithm)

    outcome = c.start()

    assert outcome.status == "completed"
    assert outcome.statistics.comparisons == 0
    assert outcome.statistics.writes == 0
    assert c.snapshot() == ()


@pytest.mark.parametrize("order", ["ascending", "descending"])
def test_cycle_sort_on_sorted_input_never_writes(order: str) -> None:
    values = sorted(_dataset(40, seed=5), reverse=(order == "descending"))
    c = _controller(values, algorithm="cycle", order=order)

    outcome = c.start()

    assert outcome.statistics.writes == 0
    assert list(c.snapshot()) == values


def test_cycle_sort_writes_once_per_misplaced_value() -> None:
    # 3 and 1 trade places; 2 is already home
    c = _controller([3, 2, 1], algorithm="cycle")
    outcome = c.start()
    assert c.snapshot() == (1, 2, 3)
    assert outcome.statistics.writes == 2


def test_insertion_always_writes_the_key() -> None:
    c = _controller([1, 2, 3, 4], algorithm="insertion")
    outcome = c.start()
    assert outcome.statistics.writes == 3
    assert outcome.statistics.comparisons == 3


def test_counting_charges_one_comparison_per_element() -> None:
    values = [4, 1, 3, 9, 9, 2]
    c = _controller(values, algorithm="counting")
    outcome = c.start()
    assert outcome.statistics.comparisons == len(values)
    assert outcome.statistics.writes == len(values)


@pytest.mark.parametrize("algorithm", ["bucket", "pigeonhole"])
def test_distribution_sorts_do_not_charge_comparisons(algorithm: str) -> None:
    c = _controller([9, 4, 7, 1], algorithm=algorithm)
    outcome = c.start()
    assert outcome.statistics.comparisons == 0
    assert outcome.statistics.writes == 4


def test_merge_charges_one_comparison_per_two_way_step() -> None:
    # halves [1, 3] and [2, 4]: three steps with both sides live
    c = _controller([1, 3, 2, 4], algorithm="merge")
    outcome = c.start()
    # [1],[3] -> 1 step; [2],[4] -> 1 step; final merge -> 3 steps
    assert outcome.statistics.comparisons == 5
    assert outcome.statistics.writes == 8


def test_quick_compares_each_element_against_the_pivot() -> None:
    # pivot 3 splits cleanly; each side is a singleton
    c = _controller([1, 5, 3], algorithm="quick")
    outcome = c.start()
    assert c.snapshot() == (1, 3, 5)
    assert outcome.statistics.comparisons == 2


def test_run_ends_with_full_range_sorted_then_celebrate() -> None:
    bus = EventBus()
    marks: list[RangeMarked] = []
    bus.subscribe(event_type=RangeMarked.event_type, handler=lambda e: marks.append(e))  # type: ignore[arg-type]

    c = ExecutionController(bus=bus, pacing=Pacing(0), algorithm="bubble", sleep=lambda s: None)
    c.load([3, 1, 2])
    c.start()

    assert marks[-2].tag == "sorted"
    assert marks[-2].indices == (0, 1, 2)
    assert marks[-1].tag == "celebrate"
    assert marks[-1].indices == (0, 1, 2)


def test_primitive_events_match_counters() -> None:
    bus = EventBus()
    counts = {"compare": 0, "mutate": 0}

    def on_compare(e: object) -> None:
        counts["compare"] += 1

    def on_mutate(e: object) -> None:
        counts["mutate"] += 1

    bus.subscribe(event_type=Compare.event_type, handler=on_compare)
    bus.subscribe(event_type=Swap.event_type, handler=on_mutate)
    bus.subscribe(event_type=Write.event_type, handler=on_mutate)

    c = ExecutionController(bus=bus, pacing=Pacing(0), algorithm="heap", sleep=lambda s: None)
    c.load(_dataset(50, seed=1))
    outcome = c.start()

    assert counts["compare"] == outcome.statistics.comparisons
    assert counts["mutate"] == outcome.statistics.writes
