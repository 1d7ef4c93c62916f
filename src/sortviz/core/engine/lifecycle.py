from __future__ import annotations

import structlog

from sortviz.core.engine.state import EngineState
from sortviz.core.engine.stats import StatisticsTracker
from sortviz.core.engine.store import SequenceStore
from sortviz.core.errors import InvalidTransition
from sortviz.core.events.bus import EventBus
from sortviz.core.events.system import RunCompleted, RunFailed, RunPaused, RunStarted, SessionReset
from sortviz.core.logging.setup import bind_context, clear_context
from sortviz.core.run.ids import new_run_id

log = structlog.get_logger()


class RunLifecycle:
    """
    Explicit run lifecycle controller.

    Ensures idle/running/paused/completed transitions are correct and
    audited via events. Statistics timing follows the transitions.
    """

    def __init__(
        self,
        *,
        bus: EventBus,
        state: EngineState,
        stats: StatisticsTracker,
        store: SequenceStore,
    ) -> None:
        self._bus = bus
        self._state = state
        self._stats = stats
        self._store = store

    @property
    def state(self) -> EngineState:
        return self._state

    def begin(self, *, algorithm: str) -> str | None:
        """
        Enter running. Returns the new run_id, or None if a run is active.
        """
        run_id = new_run_id()
        if not self._state.begin_run(run_id):
            log.info("run.start_ignored", reason="already_running", run_id=self._state.run_id)
            return None

        # Reset counters, not the sequence
        self._stats.begin()

        bind_context(run_id=run_id, algorithm=algorithm, order=self._store.order)

        try:
            self._bus.emit(
                RunStarted,
                run_id=run_id,
                algorithm=algorithm,
                order=self._store.order,
                length=len(self._store),
            )
        except Exception:
            # a failing subscriber must not leave the session stuck running
            self._state.transition("idle")
            clear_context("run_id", "algorithm", "order")
            raise

        log.info("run.started", length=len(self._store))
        return run_id

    def pause(self) -> None:
        if not self._state.is_running:
            raise InvalidTransition(f"cannot pause from {self._state.status!r}")
        self._state.transition("paused")
        log.info("run.pause_requested", run_id=self._state.run_id)

    def complete(self) -> bool:
        """
        Enter completed. False when a pause landed after the last suspension;
        the run then ends paused instead.
        """
        self._stats.finish()
        try:
            self._state.transition("completed")
        except InvalidTransition:
            self.cancelled()
            return False

        snap = self._stats.snapshot()
        self._bus.emit(
            RunCompleted,
            run_id=self._state.run_id,
            comparisons=snap.comparisons,
            writes=snap.writes,
            elapsed_ms=snap.elapsed_ms,
        )

        log.info(
            "run.completed",
            comparisons=snap.comparisons,
            writes=snap.writes,
            elapsed_ms=round(snap.elapsed_ms, 3),
        )
        clear_context("run_id", "algorithm", "order")
        return True

    def cancelled(self) -> None:
        self._stats.finish()
        self._bus.emit(RunPaused, run_id=self._state.run_id, values=self._store.snapshot())
        log.info("run.paused", comparisons=self._stats.comparisons, writes=self._stats.writes)
        clear_context("run_id", "algorithm", "order")

    def failed(self, exc: BaseException) -> None:
        self._stats.finish()

        # back to a start-enabled state whatever happened
        self._state.transition("idle")

        self._bus.emit(
            RunFailed,
            run_id=self._state.run_id,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
        log.error("run.failed", exc_info=exc)
        clear_context("run_id", "algorithm", "order")

    def reset(self) -> None:
        if self._state.is_running:
            raise InvalidTransition("cannot reset while a run is active; pause first")
        self._state.transition("idle")
        self._stats.reset()
        self._bus.emit(SessionReset, values=self._store.snapshot())
        log.info("session.reset", length=len(self._store))
