from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Literal

import structlog

from sortviz.core.engine.channel import SortRoutine
from sortviz.core.errors import InternalSortError, SortCancelled

log = structlog.get_logger()

Sleeper = Callable[[float], None]
DriveStatus = Literal["completed", "cancelled"]


@dataclass(frozen=True, slots=True)
class DriveResult:
    status: DriveStatus
    steps: int


class RunDriver:
    """
    Pumps one sort routine to the end.

    Each Suspend the routine yields is honoured by sleeping its delay. The
    cancellation predicate is checked when the suspension begins (skipping
    the sleep) and again when it resumes; either hit throws SortCancelled
    into the routine at the suspended primitive.

    Exceptions raised by the routine propagate to the caller unchanged.
    """

    def __init__(
        self,
        *,
        should_cancel: Callable[[], bool],
        sleep: Sleeper = time.sleep,
    ) -> None:
        self._should_cancel = should_cancel
        self._sleep = sleep

    def drive(self, routine: SortRoutine) -> DriveResult:
        steps = 0
        try:
            step = next(routine)
        except StopIteration:
            return DriveResult(status="completed", steps=steps)

        while True:
            steps += 1

            if self._should_cancel():
                return self._cancel(routine, steps)

            if step.delay_ms > 0:
                self._sleep(step.delay_ms / 1000.0)

            if self._should_cancel():
                return self._cancel(routine, steps)

            try:
                step = routine.send(None)
            except StopIteration:
                return DriveResult(status="completed", steps=steps)

    def _cancel(self, routine: SortRoutine, steps: int) -> DriveResult:
        try:
            routine.throw(SortCancelled())
        except SortCancelled:
            log.debug("driver.cancelled", steps=steps)
            return DriveResult(status="cancelled", steps=steps)
        except StopIteration:
            pass

        routine.close()
        raise InternalSortError("sort routine swallowed cancellation")
