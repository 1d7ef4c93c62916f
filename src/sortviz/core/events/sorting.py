from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal

from sortviz.core.events.base import Event

MarkTag = Literal["sorted", "pivot", "visit", "gather", "celebrate"]


@dataclass(frozen=True, slots=True)
class Compare(Event):
    """
    One charged comparison.

    j is None when the right-hand side is a value held outside the
    sequence (insertion key, cycle item, merge scratch slices).
    """

    event_type: ClassVar[str] = "sort.compare"

    i: int
    j: int | None
    outcome: bool


@dataclass(frozen=True, slots=True)
class Swap(Event):
    """
    Two slots exchanged their values.
    """

    event_type: ClassVar[str] = "sort.swap"

    i: int
    j: int


@dataclass(frozen=True, slots=True)
class Write(Event):
    """
    One slot overwritten with a value.
    """

    event_type: ClassVar[str] = "sort.write"

    index: int
    value: int


@dataclass(frozen=True, slots=True)
class RangeMarked(Event):
    """
    Presentation marker over a set of indices (sorted / pivot / visit ...).
    """

    event_type: ClassVar[str] = "sort.range_marked"

    indices: tuple[int, ...]
    tag: MarkTag


SORT_EVENT_TYPES: tuple[str, ...] = (
    Compare.event_type,
    Swap.event_type,
    Write.event_type,
    RangeMarked.event_type,
)
