import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Optional

from antiplag.worker.watcher import Clock, UploadWatcher, WatchPolicy

DEFAULT_LOG_FORMAT = "%(module)s:%(lineno)d %(levelname)-6s - %(message)s"

log = logging.getLogger(__name__)


def configure_logging(
    level: int = logging.INFO,
    http_log_level: int = logging.WARNING,
) -> None:
    logging.basicConfig(
        level=level,
        datefmt="%Y-%m-%d %H:%M:%S",
        format=DEFAULT_LOG_FORMAT,
    )
    logging.getLogger("httpx").setLevel(http_log_level)
    logging.getLogger("httpcore").setLevel(http_log_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class UploadWatcherPool:
    """
    Runs upload watchers in the background on a bounded thread pool.

    Every watcher is a future keyed by its task id with its own cancellation
    token. The tokens belong to the pool, never to the request that started
    the watch, so a finished or aborted request leaves its watcher running.
    Only ``shutdown`` cancels watchers.
    """

    def __init__(
        self,
        object_exists: Callable[[str], bool],
        analyse: Callable[[str, str], bool],
        policy: WatchPolicy = WatchPolicy(),
        max_workers: int = 8,
        clock: Optional[Clock] = None,
    ):
        self._object_exists = object_exists
        self._analyse = analyse
        self.policy = policy
        self.clock = clock
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="upload-watcher")
        self._lock = threading.Lock()
        self._futures: Dict[str, Future] = {}
        self._cancel_events: Dict[str, threading.Event] = {}
        self._closed = False
        log.info(f"Upload watcher pool started with {max_workers} workers")

    def watch(self, task_id: str, object_key: str) -> Future:
        """Start watching an upload. A task that is already being watched keeps its watcher."""
        with self._lock:
            if self._closed:
                raise RuntimeError("upload watcher pool is shut down")

            existing = self._futures.get(task_id)
            if existing is not None and not existing.done():
                log.info(f"[Task {task_id}] Already being watched")
                return existing

            cancel_event = threading.Event()
            watcher = UploadWatcher(
                task_id=task_id,
                object_key=object_key,
                object_exists=self._object_exists,
                analyse=self._analyse,
                policy=self.policy,
                clock=self.clock,
                cancel_event=cancel_event,
            )
            future = self._executor.submit(watcher.run)
            self._futures[task_id] = future
            self._cancel_events[task_id] = cancel_event

        future.add_done_callback(lambda f: self._forget(task_id, f))
        return future

    def _forget(self, task_id: str, future: Future) -> None:
        with self._lock:
            if self._futures.get(task_id) is future:
                del self._futures[task_id]
                del self._cancel_events[task_id]

        if future.cancelled():
            log.info(f"[Task {task_id}] Watcher cancelled before it started")
        elif future.exception() is not None:
            log.error(f"[Task {task_id}] Watcher crashed: {future.exception()}")

    def get(self, task_id: str) -> Optional[Future]:
        with self._lock:
            return self._futures.get(task_id)

    def cancel(self, task_id: str) -> bool:
        with self._lock:
            event = self._cancel_events.get(task_id)
        if event is None:
            return False
        event.set()
        return True

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
            events = list(self._cancel_events.values())
        for event in events:
            event.set()
        self._executor.shutdown(wait=wait, cancel_futures=True)
        log.info("Upload watcher pool stopped")
