from __future__ import annotations

from threading import RLock
from typing import Iterable, Literal, Sequence

SortOrder = Literal["ascending", "descending"]

SORT_ORDERS: tuple[SortOrder, ...] = ("ascending", "descending")


class SequenceStore:
    """
    The mutable value sequence plus the direction every comparator uses.

    Raw, uninstrumented access only. Algorithms mutate it exclusively through
    InstrumentationChannel primitives; settle()/settle_range() exist for the
    cancellation unwind path, which must not count, emit or suspend.

    Mutations and snapshots are serialised by a lock so request threads can
    take snapshots while the run thread sorts.
    """

    def __init__(self, values: Iterable[int] = (), *, order: SortOrder = "ascending") -> None:
        self._values: list[int] = list(values)
        self._order: SortOrder = _check_order(order)
        self._lock = RLock()

    # ---------------- Order ----------------

    @property
    def order(self) -> SortOrder:
        return self._order

    @order.setter
    def order(self, order: SortOrder) -> None:
        self._order = _check_order(order)

    @property
    def descending(self) -> bool:
        return self._order == "descending"

    def out_of_order(self, a: int, b: int) -> bool:
        """
        True when value `a` must come after value `b` under the current order.
        """
        return a < b if self.descending else a > b

    # ---------------- Reads ----------------

    def __len__(self) -> int:
        return len(self._values)

    def value(self, index: int) -> int:
        self._check(index)
        return self._values[index]

    def slice(self, start: int, stop: int) -> list[int]:
        with self._lock:
            return self._values[start:stop]

    def snapshot(self) -> tuple[int, ...]:
        with self._lock:
            return tuple(self._values)

    def bounds(self) -> tuple[int, int]:
        with self._lock:
            if not self._values:
                raise ValueError("empty sequence has no bounds")
            return min(self._values), max(self._values)

    def is_ordered(self) -> bool:
        with self._lock:
            vals = self._values
            return not any(self.out_of_order(vals[k], vals[k + 1]) for k in range(len(vals) - 1))

    # ---------------- Writes ----------------

    def load(self, values: Sequence[int]) -> None:
        with self._lock:
            self._values = list(values)

    def exchange(self, i: int, j: int) -> None:
        self._check(i)
        self._check(j)
        with self._lock:
            self._values[i], self._values[j] = self._values[j], self._values[i]

    def put(self, index: int, value: int) -> None:
        self._check(index)
        with self._lock:
            self._values[index] = value

    def settle(self, index: int, value: int) -> None:
        """
        Return a held value to the slot it vacated (cancellation unwind only).
        """
        self.put(index, value)

    def settle_range(self, start: int, values: Sequence[int]) -> None:
        """
        Return a run of held values to consecutive slots starting at `start`.
        """
        if not values:
            return
        self._check(start)
        self._check(start + len(values) - 1)
        with self._lock:
            self._values[start:start + len(values)] = values

    # ---------------- Internals ----------------

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._values):
            raise IndexError(f"index {index} out of range for length {len(self._values)}")


def _check_order(order: str) -> SortOrder:
    if order not in SORT_ORDERS:
        raise ValueError(f"unknown sort order: {order!r}")
    return order  # type: ignore[return-value]
