from __future__ import annotations

import threading

import structlog

from sortviz.core.engine.controller import ExecutionController, RunOutcome

log = structlog.get_logger()


class RunWorker:
    """
    Sorts on a background thread so request threads stay free to pause,
    poll events and take snapshots.

    The run is begun on the caller's thread: a rejected start surfaces to
    the caller instead of dying on the worker. At most one run thread
    exists at a time.
    """

    def __init__(self, controller: ExecutionController) -> None:
        self._controller = controller
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._last_outcome: RunOutcome | None = None

    def launch(self) -> str | None:
        """
        Begin a run and sort it in the background.

        Returns the run_id, or None when a run is already active. Raises
        InvalidTransition when the session is paused.
        """
        with self._lock:
            if self._controller.status == "running":
                return None

            # the previous run thread is past its last transition; let it exit
            if self._thread is not None:
                self._thread.join()

            run_id = self._controller.begin()
            if run_id is None:
                return None

            self._thread = threading.Thread(target=self._run, args=(run_id,), name="sortviz-run", daemon=True)
            self._thread.start()

        log.info("worker.launched", run_id=run_id)
        return run_id

    def join(self, timeout: float | None = None) -> RunOutcome | None:
        with self._lock:
            t = self._thread
        if t is not None:
            t.join(timeout)
        return self._last_outcome

    def _run(self, run_id: str) -> None:
        self._last_outcome = self._controller.drive(run_id)
