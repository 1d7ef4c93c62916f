from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Callable


@dataclass(frozen=True, slots=True)
class Statistics:
    """
    Immutable view of the live counters.
    """

    comparisons: int
    writes: int
    started_at_utc: datetime | None
    elapsed_ms: float


class StatisticsTracker:
    """
    Comparison / write counters and run timing.

    Elapsed time is (finished or now) - started, measured on a monotonic
    clock; zero when nothing started since the last reset().
    """

    def __init__(self, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._lock = Lock()
        self._comparisons = 0
        self._writes = 0
        self._started: float | None = None
        self._finished: float | None = None
        self._started_at_utc: datetime | None = None

    @property
    def comparisons(self) -> int:
        return self._comparisons

    @property
    def writes(self) -> int:
        return self._writes

    def reset(self) -> None:
        with self._lock:
            self._comparisons = 0
            self._writes = 0
            self._started = None
            self._finished = None
            self._started_at_utc = None

    def begin(self) -> None:
        """
        Zero the counters and stamp the run start.
        """
        with self._lock:
            self._comparisons = 0
            self._writes = 0
            self._started = self._clock()
            self._finished = None
            self._started_at_utc = datetime.now(timezone.utc)

    def finish(self) -> None:
        with self._lock:
            if self._started is not None and self._finished is None:
                self._finished = self._clock()

    def count_comparisons(self, n: int = 1) -> None:
        if n < 0:
            raise ValueError("comparison charge must be >= 0")
        with self._lock:
            self._comparisons += n

    def count_write(self) -> None:
        with self._lock:
            self._writes += 1

    def elapsed_ms(self) -> float:
        with self._lock:
            if self._started is None:
                return 0.0
            end = self._finished if self._finished is not None else self._clock()
            return (end - self._started) * 1000.0

    def snapshot(self) -> Statistics:
        elapsed = self.elapsed_ms()
        with self._lock:
            return Statistics(
                comparisons=self._comparisons,
                writes=self._writes,
                started_at_utc=self._started_at_utc,
                elapsed_ms=elapsed,
            )
