"""
Upload completion watcher.

After an upload is registered the client writes the bytes straight to the
object store, so nothing tells the service when the document has arrived.
A watcher polls the store until the object is visible and then triggers the
analysis exactly once. It gives up after a wall-clock timeout or a maximum
number of polls, whichever comes first.

The loop is an explicit state machine::

    WAITING --present--> FOUND                  (analysis triggered)
    WAITING --absent/error--> WAITING
    WAITING --deadline passed--> TIMED_OUT
    WAITING --polls exhausted--> MAX_RETRIES_EXCEEDED
    WAITING --cancel token set--> CANCELLED

Time is read through a ``Clock`` so tests can drive the loop without sleeping.
"""

import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)


class WatchState(enum.Enum):
    WAITING = "waiting"
    FOUND = "found"
    TIMED_OUT = "timed_out"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not WatchState.WAITING


class PollOutcome(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    ERROR = "error"
    DEADLINE_PASSED = "deadline_passed"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    CANCELLED = "cancelled"


TRANSITIONS = {
    (WatchState.WAITING, PollOutcome.PRESENT): WatchState.FOUND,
    (WatchState.WAITING, PollOutcome.ABSENT): WatchState.WAITING,
    (WatchState.WAITING, PollOutcome.ERROR): WatchState.WAITING,
    (WatchState.WAITING, PollOutcome.DEADLINE_PASSED): WatchState.TIMED_OUT,
    (WatchState.WAITING, PollOutcome.ATTEMPTS_EXHAUSTED): WatchState.MAX_RETRIES_EXCEEDED,
    (WatchState.WAITING, PollOutcome.CANCELLED): WatchState.CANCELLED,
}


def next_state(state: WatchState, outcome: PollOutcome) -> WatchState:
    try:
        return TRANSITIONS[(state, outcome)]
    except KeyError:
        raise ValueError(f"no transition from {state.name} on {outcome.name}")


class Clock(Protocol):
    def monotonic(self) -> float: ...

    def sleep(self, seconds: float, interrupt: Optional[threading.Event] = None) -> None: ...


class SystemClock:
    """Real time. Sleeping returns early when the interrupt event is set."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float, interrupt: Optional[threading.Event] = None) -> None:
        if interrupt is not None:
            interrupt.wait(seconds)
        else:
            time.sleep(seconds)


@dataclass(frozen=True)
class WatchPolicy:
    poll_interval: float = 2.0
    timeout: float = 300.0
    max_attempts: int = 30

    @classmethod
    def from_settings(cls, settings) -> "WatchPolicy":
        return cls(
            poll_interval=settings.watcher_poll_interval,
            timeout=settings.watcher_timeout,
            max_attempts=settings.watcher_max_attempts,
        )


@dataclass
class WatchResult:
    task_id: str
    object_key: str
    state: WatchState
    attempts: int
    analysis_triggered: bool = False
    analysis_status: Optional[bool] = None
    error: Optional[str] = None


class UploadWatcher:
    """
    Waits for one uploaded object and triggers its analysis.

    Args:
        task_id: Task the upload belongs to
        object_key: Key the client uploads to
        object_exists: Existence check against the object store
        analyse: Remote analysis trigger, called at most once
        policy: Poll interval, timeout and attempt cap
        clock: Time source
        cancel_event: Cancellation token owned by the watcher pool
    """

    def __init__(
        self,
        task_id: str,
        object_key: str,
        object_exists: Callable[[str], bool],
        analyse: Callable[[str, str], bool],
        policy: WatchPolicy = WatchPolicy(),
        clock: Optional[Clock] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.task_id = task_id
        self.object_key = object_key
        self._object_exists = object_exists
        self._analyse = analyse
        self.policy = policy
        self.clock = clock or SystemClock()
        self.cancel_event = cancel_event or threading.Event()
        self.state = WatchState.WAITING
        self.attempts = 0

    def _poll(self, deadline: float) -> PollOutcome:
        if self.cancel_event.is_set():
            return PollOutcome.CANCELLED
        if self.clock.monotonic() >= deadline:
            return PollOutcome.DEADLINE_PASSED
        if self.attempts >= self.policy.max_attempts:
            return PollOutcome.ATTEMPTS_EXHAUSTED

        self.attempts += 1
        try:
            exists = self._object_exists(self.object_key)
        except Exception as e:
            log.warning(
                f"[Task {self.task_id}] Failed to check {self.object_key} "
                f"(attempt {self.attempts}/{self.policy.max_attempts}): {e}"
            )
            return PollOutcome.ERROR
        return PollOutcome.PRESENT if exists else PollOutcome.ABSENT

    def run(self) -> WatchResult:
        log.info(f"[Task {self.task_id}] Waiting for upload of {self.object_key}")
        deadline = self.clock.monotonic() + self.policy.timeout

        while not self.state.is_terminal:
            outcome = self._poll(deadline)
            self.state = next_state(self.state, outcome)
            if not self.state.is_terminal:
                self.clock.sleep(self.policy.poll_interval, self.cancel_event)

        result = WatchResult(
            task_id=self.task_id,
            object_key=self.object_key,
            state=self.state,
            attempts=self.attempts,
        )

        if self.state is WatchState.FOUND:
            self._trigger_analysis(result)
        elif self.state is WatchState.TIMED_OUT:
            log.warning(
                f"[Task {self.task_id}] Timed out after {self.policy.timeout:.0f}s waiting for "
                f"{self.object_key}, skipping analysis"
            )
        elif self.state is WatchState.MAX_RETRIES_EXCEEDED:
            log.warning(
                f"[Task {self.task_id}] {self.object_key} not found after {self.attempts} attempts, "
                f"skipping analysis"
            )
        else:
            log.info(f"[Task {self.task_id}] Watcher cancelled")
        return result

    def _trigger_analysis(self, result: WatchResult) -> None:
        log.info(f"[Task {self.task_id}] {self.object_key} uploaded, starting analysis")
        result.analysis_triggered = True
        try:
            status = self._analyse(self.task_id, self.object_key)
        except Exception as e:
            result.error = str(e)
            log.error(f"[Task {self.task_id}] Analysis call failed: {e}")
            return

        result.analysis_status = status
        if status:
            log.info(f"[Task {self.task_id}] Analysis completed successfully")
        else:
            log.warning(f"[Task {self.task_id}] Analysis returned false status")
