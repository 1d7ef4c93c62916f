from __future__ import annotations

import random

import pytest

from sortviz.core.errors import InvalidInput
from sortviz.datasets.custom import parse_custom, validate_values
from sortviz.datasets.generator import FEW_UNIQUE_VALUES, DatasetBounds, DatasetSource, check_size, generate


def test_parse_custom_accepts_whitespace() -> None:
    assert parse_custom(" 500, 1 ,250 ") == [500, 1, 250]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "5",
        "5,x,3",
        "5,,3",
        "0,4",
        "501,4",
        "2.5,4",
        ",".join(["7"] * 101),
    ],
)
def test_parse_custom_rejects_bad_input(text: str) -> None:
    with pytest.raises(InvalidInput):
        parse_custom(text)


def test_parse_custom_uses_configured_bounds() -> None:
    bounds = DatasetBounds(min_size=1, max_size=3, min_value=10, max_value=20)
    assert parse_custom("15", bounds) == [15]
    with pytest.raises(InvalidInput):
        parse_custom("15,9", bounds)
    with pytest.raises(InvalidInput):
        parse_custom("10,11,12,13", bounds)


def test_invalid_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_values([1, "2"])


def test_validate_values_rejects_bools() -> None:
    with pytest.raises(InvalidInput):
        validate_values([1, True])


def test_random_pattern_range() -> None:
    values = generate("random", 100, random.Random(3))
    assert len(values) == 100
    assert all(10 <= v <= 309 for v in values)


def test_reversed_pattern() -> None:
    assert generate("reversed", 4, random.Random(0)) == [22, 19, 16, 13]


def test_nearly_sorted_is_a_permutation_of_the_ramp() -> None:
    values = generate("nearly-sorted", 50, random.Random(9))
    assert sorted(values) == [i * 3 + 10 for i in range(1, 51)]


def test_few_unique_pattern() -> None:
    values = generate("few-unique", 60, random.Random(1))
    assert set(values) <= set(FEW_UNIQUE_VALUES)


def test_unknown_pattern() -> None:
    with pytest.raises(InvalidInput):
        generate("zigzag", 5, random.Random(0))  # type: ignore[arg-type]


def test_size_bounds() -> None:
    bounds = DatasetBounds()
    check_size(2, bounds)
    check_size(100, bounds)
    with pytest.raises(InvalidInput):
        check_size(1, bounds)
    with pytest.raises(InvalidInput):
        check_size(101, bounds)


def test_source_reproduces_its_dataset() -> None:
    custom = DatasetSource.custom([4, 2, 9])
    assert custom.label == "custom"
    assert custom.produce(random.Random(0)) == [4, 2, 9]

    generated = DatasetSource.generated("reversed", 3)
    assert generated.label == "reversed:3"
    assert generated.produce(random.Random(0)) == [19, 16, 13]
