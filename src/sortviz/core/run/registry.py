from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from threading import Lock
from typing import Literal, Sequence

from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventHandler
from sortviz.core.events.system import RunCompleted, RunFailed, RunPaused, RunStarted

RunStatus = Literal["running", "completed", "paused", "failed"]


@dataclass(frozen=True, slots=True)
class RunRecord:
    """
    In-memory view of one run for API / ops visibility.
    """

    run_id: str
    algorithm: str
    order: str
    length: int

    status: RunStatus
    started_at_utc: datetime
    updated_at_utc: datetime

    comparisons: int | None = None
    writes: int | None = None
    elapsed_ms: float | None = None

    error_type: str | None = None
    error_message: str | None = None


class RunRegistry:
    """
    EventBus component: thread-safe history of the runs of a session,
    built purely from system events.
    """

    def __init__(self, *, max_runs: int = 100) -> None:
        self._lock = Lock()
        self._runs: dict[str, RunRecord] = {}
        self._max_runs = max_runs

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [
            (RunStarted.event_type, self._on_started),
            (RunCompleted.event_type, self._on_completed),
            (RunPaused.event_type, self._on_paused),
            (RunFailed.event_type, self._on_failed),
        ]

    def _on_started(self, e: Event) -> None:
        assert isinstance(e, RunStarted)
        rec = RunRecord(
            run_id=e.run_id,
            algorithm=e.algorithm,
            order=e.order,
            length=e.length,
            status="running",
            started_at_utc=e.timestamp_utc,
            updated_at_utc=e.timestamp_utc,
        )
        with self._lock:
            self._runs[e.run_id] = rec
            while len(self._runs) > self._max_runs:
                self._runs.pop(next(iter(self._runs)))

    def _on_completed(self, e: Event) -> None:
        assert isinstance(e, RunCompleted)
        self._update(
            e.run_id,
            status="completed",
            updated_at_utc=e.timestamp_utc,
            comparisons=e.comparisons,
            writes=e.writes,
            elapsed_ms=e.elapsed_ms,
        )

    def _on_paused(self, e: Event) -> None:
        assert isinstance(e, RunPaused)
        self._update(e.run_id, status="paused", updated_at_utc=e.timestamp_utc)

    def _on_failed(self, e: Event) -> None:
        assert isinstance(e, RunFailed)
        self._update(
            e.run_id,
            status="failed",
            updated_at_utc=e.timestamp_utc,
            error_type=e.error_type,
            error_message=e.error_message,
        )

    def get(self, *, run_id: str) -> RunRecord | None:
        with self._lock:
            return self._runs.get(run_id)

    def list(self) -> list[RunRecord]:
        with self._lock:
            items = list(self._runs.values())
        items.sort(key=lambda r: r.updated_at_utc, reverse=True)
        return items

    def _update(self, run_id: str, **changes: object) -> None:
        with self._lock:
            cur = self._runs.get(run_id)
            if cur is None:
                # RunStarted was not seen (registry wired late); nothing to update
                return
            self._runs[run_id] = replace(cur, **changes)
