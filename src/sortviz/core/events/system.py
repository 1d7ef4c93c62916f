from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sortviz.core.events.base import Event


@dataclass(frozen=True, slots=True)
class RunStarted(Event):
    """
    Emitted when a run begins.
    """

    event_type: ClassVar[str] = "system.run_started"

    run_id: str
    algorithm: str
    order: str
    length: int


@dataclass(frozen=True, slots=True)
class RunCompleted(Event):
    """
    Emitted when an algorithm finishes without being cancelled.
    """

    event_type: ClassVar[str] = "system.run_completed"

    run_id: str
    comparisons: int
    writes: int
    elapsed_ms: float


@dataclass(frozen=True, slots=True)
class RunPaused(Event):
    """
    Emitted when a run unwinds after pause().

    values is the sequence after held values were settled back, so
    renderers can resynchronise.
    """

    event_type: ClassVar[str] = "system.run_paused"

    run_id: str
    values: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class RunFailed(Event):
    """
    Emitted when an algorithm raises unexpectedly.
    """

    event_type: ClassVar[str] = "system.run_failed"

    run_id: str

    error_type: str
    error_message: str


@dataclass(frozen=True, slots=True)
class SessionReset(Event):
    """
    Emitted on reset(): renderers drop every marker and redraw from values.
    """

    event_type: ClassVar[str] = "system.session_reset"

    values: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class DatasetLoaded(Event):
    """
    Emitted whenever a new dataset replaces the sequence.
    """

    event_type: ClassVar[str] = "system.dataset_loaded"

    source: str
    values: tuple[int, ...]


SYSTEM_EVENT_TYPES: tuple[str, ...] = (
    RunStarted.event_type,
    RunCompleted.event_type,
    RunPaused.event_type,
    RunFailed.event_type,
    SessionReset.event_type,
    DatasetLoaded.event_type,
)
