from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Condition, RLock, get_ident
from typing import Iterator, Literal

from sortviz.core.errors import InvalidTransition

RunState = Literal["idle", "running", "paused", "completed"]

_ALLOWED: dict[RunState, frozenset[RunState]] = {
    "idle": frozenset({"running", "idle"}),
    "running": frozenset({"paused", "completed", "idle"}),
    "paused": frozenset({"idle"}),
    "completed": frozenset({"running", "idle"}),
}


@dataclass(slots=True)
class EngineState:
    """
    Run state owned by one ExecutionController.

    - status: idle / running / paused / completed
    - run_id: identity of the current (or last) run

    Guardrails:
      - every transition goes through transition()/begin_run() under a lock,
        so pause() from a request thread never races the run thread
      - illegal transitions raise InvalidTransition
      - idle_section() holds the lock across a check and the mutation it
        guards, so no run can begin in between
      - a begun run stays in flight, paused or not, until its driver calls
        settle(); idle_section() waits for that before mutating
    """

    status: RunState = "idle"
    run_id: str | None = None
    _lock: RLock = field(default_factory=RLock, repr=False, compare=False)
    _settled: Condition = field(init=False, repr=False, compare=False)
    _in_flight: bool = field(default=False, repr=False, compare=False)
    _driver: int | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._settled = Condition(self._lock)

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def is_paused(self) -> bool:
        return self.status == "paused"

    def transition(self, to: RunState) -> RunState:
        """
        Move to `to`; return the previous status.
        """
        with self._lock:
            prev = self.status
            if to not in _ALLOWED[prev]:
                raise InvalidTransition(f"cannot go from {prev!r} to {to!r}")
            self.status = to
            return prev

    def begin_run(self, run_id: str) -> bool:
        """
        Enter running for a new run.

        Returns False (and changes nothing) when a run is already active.
        """
        with self._lock:
            if self.status == "running":
                return False
            if "running" not in _ALLOWED[self.status]:
                raise InvalidTransition(f"cannot start a run from {self.status!r}; reset first")
            self.status = "running"
            self.run_id = run_id
            self._in_flight = True
            self._driver = None
            return True

    def claim(self) -> None:
        """
        Mark the calling thread as the one driving the current run.
        """
        with self._lock:
            self._driver = get_ident()

    def settle(self) -> None:
        """
        The driver has unwound; wake any idle_section() waiting on it.
        """
        with self._lock:
            self._in_flight = False
            self._driver = None
            self._settled.notify_all()

    @contextmanager
    def idle_section(self, action: str) -> Iterator[None]:
        """
        Hold the state lock for a block that must not overlap a run.

        Raises InvalidTransition up front when a run is active; begin_run()
        from another thread waits until the block exits. A paused run whose
        driver has not unwound yet is waited for, unless the caller is that
        driver.
        """
        with self._lock:
            if self.status == "running":
                raise InvalidTransition(f"cannot {action} while a run is active")
            if self._driver == get_ident():
                raise InvalidTransition(f"cannot {action} from inside the run it would replace")
            while self._in_flight:
                self._settled.wait()
                if self.status == "running":
                    raise InvalidTransition(f"cannot {action} while a run is active")
            yield
