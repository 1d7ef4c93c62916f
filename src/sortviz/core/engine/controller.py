from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Literal, Sequence

import structlog

from sortviz.algorithms.registry import get_algorithm, run_algorithm
from sortviz.core.engine.channel import InstrumentationChannel, Pacing
from sortviz.core.engine.driver import RunDriver, Sleeper
from sortviz.core.engine.lifecycle import RunLifecycle
from sortviz.core.engine.state import EngineState, RunState
from sortviz.core.engine.stats import Statistics, StatisticsTracker
from sortviz.core.engine.store import SequenceStore, SortOrder
from sortviz.core.errors import InternalSortError, InvalidInput, InvalidTransition
from sortviz.core.events.bus import EventBus
from sortviz.core.events.system import DatasetLoaded
from sortviz.datasets.custom import parse_custom, validate_values
from sortviz.datasets.generator import DatasetBounds, DatasetSource, check_size

log = structlog.get_logger()

OutcomeStatus = Literal["completed", "cancelled", "failed", "noop"]


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """
    How a start() call ended.

    noop: a run was already active, nothing happened.
    """

    status: OutcomeStatus
    run_id: str | None
    statistics: Statistics
    error_type: str | None = None
    error_message: str | None = None

    def raise_for_failure(self) -> None:
        if self.status == "failed":
            raise InternalSortError(f"{self.error_type}: {self.error_message}")


class ExecutionController:
    """
    One sorting session: the dataset, the algorithm choice and the run
    lifecycle.

    start() runs the selected algorithm to completion or cancellation on the
    calling thread. pause() may be called from an event handler, a sleeper
    or another thread; it is observed at the next suspension.
    """

    def __init__(
        self,
        *,
        bus: EventBus,
        store: SequenceStore | None = None,
        stats: StatisticsTracker | None = None,
        pacing: Pacing | None = None,
        algorithm: str = "bubble",
        bounds: DatasetBounds = DatasetBounds(),
        rng: random.Random | None = None,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self._bus = bus
        self._store = store if store is not None else SequenceStore()
        self._stats = stats if stats is not None else StatisticsTracker()
        self._pacing = pacing if pacing is not None else Pacing()
        self._bounds = bounds
        self._rng = rng if rng is not None else random.Random()

        self._state = EngineState()
        self._channel = InstrumentationChannel(
            store=self._store,
            stats=self._stats,
            bus=bus,
            pacing=self._pacing,
        )
        self._lifecycle = RunLifecycle(bus=bus, state=self._state, stats=self._stats, store=self._store)
        self._driver = RunDriver(should_cancel=lambda: self._state.is_paused, sleep=sleep)

        self._algorithm = get_algorithm(algorithm).key
        self._running_algorithm = self._algorithm
        self._source: DatasetSource | None = None

    # ---------------- Read side ----------------

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def status(self) -> RunState:
        return self._state.status

    @property
    def run_id(self) -> str | None:
        return self._state.run_id

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def order(self) -> SortOrder:
        return self._store.order

    @property
    def pacing(self) -> Pacing:
        return self._pacing

    @property
    def bounds(self) -> DatasetBounds:
        return self._bounds

    @property
    def source(self) -> DatasetSource | None:
        return self._source

    def statistics(self) -> Statistics:
        return self._stats.snapshot()

    def snapshot(self) -> tuple[int, ...]:
        return self._store.snapshot()

    # ---------------- Configuration ----------------

    def select_algorithm(self, key: str) -> None:
        """
        Choose the algorithm for the next run (an active run is unaffected).
        """
        self._algorithm = get_algorithm(key).key

    def set_order(self, order: SortOrder) -> None:
        with self._state.idle_section("change the sort order"):
            try:
                self._store.order = order
            except ValueError as exc:
                raise InvalidInput(str(exc)) from None

    def set_pacing_ms(self, delay_ms: float) -> None:
        try:
            self._pacing.set_delay_ms(delay_ms)
        except ValueError as exc:
            raise InvalidInput(str(exc)) from None

    def set_speed(self, speed: int) -> None:
        try:
            self._pacing.set_speed(speed)
        except ValueError as exc:
            raise InvalidInput(str(exc)) from None

    # ---------------- Datasets ----------------

    def load(self, values: Sequence[int], *, source: DatasetSource | None = None) -> None:
        """
        Replace the sequence. Invalid values raise InvalidInput and leave the
        store untouched. Counters reset; the session returns to idle.
        """
        checked = validate_values(values, min_value=self._bounds.min_value, max_value=self._bounds.max_value)

        with self._state.idle_section("load a dataset"):
            self._source = source if source is not None else DatasetSource.custom(checked)
            self._store.load(checked)
            self._stats.reset()
            self._state.transition("idle")

            self._bus.emit(DatasetLoaded, source=self._source.label, values=tuple(checked))
        log.info("dataset.loaded", source=self._source.label, length=len(checked))

    def load_dataset(self, source: DatasetSource) -> None:
        self.load(self._produce(source), source=source)

    def load_custom(self, text: str) -> None:
        values = parse_custom(text, self._bounds)
        self.load(values, source=DatasetSource.custom(values))

    # ---------------- Lifecycle ----------------

    def start(self) -> RunOutcome:
        """
        Run the selected algorithm over the current sequence.

        Valid from idle or completed; a no-op while running.
        """
        run_id = self.begin()
        if run_id is None:
            return RunOutcome(status="noop", run_id=self._state.run_id, statistics=self.statistics())
        return self.drive(run_id)

    def begin(self) -> str | None:
        """
        Enter running without sorting yet; drive() does the work.

        Returns the new run_id, or None when a run is already active. Raises
        InvalidTransition from paused.
        """
        run_id = self._lifecycle.begin(algorithm=self._algorithm)
        if run_id is not None:
            self._running_algorithm = self._algorithm
        return run_id

    def drive(self, run_id: str) -> RunOutcome:
        """
        Sort the begun run to completion, cancellation or failure.

        A pause that landed after begin() is honoured at the first suspension.
        """
        if self._state.run_id != run_id or self._state.status not in ("running", "paused"):
            raise InvalidTransition(f"run {run_id!r} is not the active run")

        self._state.claim()
        try:
            outcome = self._sort(run_id)
        finally:
            self._state.settle()
        if outcome.status != "completed":
            return outcome

        # non-blocking notification; renderers stagger it themselves
        self._channel.mark(range(len(self._store)), "celebrate")
        return outcome

    def pause(self) -> None:
        self._lifecycle.pause()

    def reset(self) -> None:
        """
        Regenerate (or reload) the dataset, clear counters, return to idle.
        """
        values = self._produce(self._source) if self._source is not None else None

        # the new values land only if no run began while they were produced
        with self._state.idle_section("reset"):
            if values is not None:
                self._store.load(values)
            self._lifecycle.reset()

    # ---------------- Internals ----------------

    def _sort(self, run_id: str) -> RunOutcome:
        routine = run_algorithm(self._running_algorithm, self._channel)
        try:
            result = self._driver.drive(routine)
            if result.status == "completed" and not self._store.is_ordered():
                raise InternalSortError(f"{self._running_algorithm} finished with the sequence out of order")
        except Exception as exc:
            self._lifecycle.failed(exc)
            return RunOutcome(
                status="failed",
                run_id=run_id,
                statistics=self.statistics(),
                error_type=type(exc).__name__,
                error_message=str(exc),
            )

        if result.status == "cancelled":
            self._lifecycle.cancelled()
            return RunOutcome(status="cancelled", run_id=run_id, statistics=self.statistics())

        if not self._lifecycle.complete():
            return RunOutcome(status="cancelled", run_id=run_id, statistics=self.statistics())
        return RunOutcome(status="completed", run_id=run_id, statistics=self.statistics())

    def _produce(self, source: DatasetSource) -> list[int]:
        if source.values is None:
            check_size(source.size, self._bounds)
        return validate_values(
            source.produce(self._rng),
            min_value=self._bounds.min_value,
            max_value=self._bounds.max_value,
        )
