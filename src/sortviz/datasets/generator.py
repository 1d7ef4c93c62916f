from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Literal, Sequence

from sortviz.core.errors import InvalidInput

Pattern = Literal["random", "reversed", "nearly-sorted", "few-unique"]

PATTERNS: tuple[str, ...] = ("random", "reversed", "nearly-sorted", "few-unique")

FEW_UNIQUE_VALUES: tuple[int, ...] = (50, 100, 150, 200, 250)


@dataclass(frozen=True, slots=True)
class DatasetBounds:
    """
    Accepted dataset shape: length and per-value range, inclusive.
    """

    min_size: int = 2
    max_size: int = 100
    min_value: int = 1
    max_value: int = 500


@dataclass(frozen=True, slots=True)
class DatasetSource:
    """
    How the current dataset was produced, so reset() can produce it again.

    Either a generated pattern of some size, or a fixed list of values.
    """

    pattern: Pattern | None = None
    size: int = 0
    values: tuple[int, ...] | None = None

    @classmethod
    def generated(cls, pattern: Pattern, size: int) -> "DatasetSource":
        return cls(pattern=pattern, size=size)

    @classmethod
    def custom(cls, values: Sequence[int]) -> "DatasetSource":
        return cls(values=tuple(values))

    @property
    def label(self) -> str:
        return "custom" if self.values is not None else f"{self.pattern}:{self.size}"

    def produce(self, rng: random.Random) -> list[int]:
        if self.values is not None:
            return list(self.values)
        if self.pattern is None:
            raise InvalidInput("dataset source has neither a pattern nor values")
        return generate(self.pattern, self.size, rng)


def generate(pattern: Pattern, size: int, rng: random.Random) -> list[int]:
    """
    Build a dataset of `size` values following `pattern`.

    - random:        uniform in [10, 309]
    - reversed:      i*3+10 for i = size..1
    - nearly-sorted: i*3+10 ascending, then size//10 random transpositions
    - few-unique:    drawn from 50/100/150/200/250
    """
    if size < 0:
        raise InvalidInput("size must be >= 0")

    if pattern == "random":
        return [rng.randrange(300) + 10 for _ in range(size)]

    if pattern == "reversed":
        return [i * 3 + 10 for i in range(size, 0, -1)]

    if pattern == "nearly-sorted":
        values = [i * 3 + 10 for i in range(1, size + 1)]
        for _ in range(size // 10):
            a = rng.randrange(size)
            b = rng.randrange(size)
            values[a], values[b] = values[b], values[a]
        return values

    if pattern == "few-unique":
        return [rng.choice(FEW_UNIQUE_VALUES) for _ in range(size)]

    raise InvalidInput(f"unknown dataset pattern: {pattern!r}")


def check_size(size: int, bounds: DatasetBounds) -> None:
    if not bounds.min_size <= size <= bounds.max_size:
        raise InvalidInput(f"size must be between {bounds.min_size} and {bounds.max_size}, got {size}")
