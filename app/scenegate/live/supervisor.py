"""Supervision of parse tasks.

Runs parse tasks on a thread pool, collects every TaskResult, logs it,
and keeps per-status counts. A task only ends RETRYABLE when shutdown
interrupts it; its file is picked up again by the next startup scan.
"""

import logging
import threading
from collections import Counter, deque
from concurrent.futures import Future, ThreadPoolExecutor

from scenegate.live.tasks import ParseTask, TaskResult, TaskStatus

logger = logging.getLogger(__name__)

# Most recent results kept for inspection.
RECENT_RESULTS = 100


class TaskSupervisor:
    """Thread pool with result collection for ParseTask instances.

    At most one task per data file is in flight; a duplicate discovery
    event for a file that is still being processed is dropped.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="parse")
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._counts: Counter[TaskStatus] = Counter()
        self._recent: deque[TaskResult] = deque(maxlen=RECENT_RESULTS)
        self._closed = False

    def submit(self, task: ParseTask) -> Future[TaskResult] | None:
        """Schedule a task.

        Args:
            task: The task to run.

        Returns:
            The task's future, or None if it was dropped as a duplicate or
            the supervisor is shut down.
        """
        key = str(task.path)
        with self._lock:
            if self._closed:
                return None
            if key in self._in_flight:
                logger.debug("Task for %s already running, ignoring duplicate", key)
                return None
            self._in_flight.add(key)
            future = self._executor.submit(task)

        future.add_done_callback(lambda f: self._on_done(task, f))
        return future

    def counts(self) -> dict[TaskStatus, int]:
        """Number of finished tasks per status."""
        with self._lock:
            return dict(self._counts)

    def recent(self) -> list[TaskResult]:
        """The most recent results, oldest first."""
        with self._lock:
            return list(self._recent)

    def close(self) -> None:
        """Stop accepting tasks; running ones are left to finish."""
        with self._lock:
            self._closed = True

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and cancel those not yet started."""
        self.close()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _on_done(self, task: ParseTask, future: Future[TaskResult]) -> None:
        with self._lock:
            self._in_flight.discard(str(task.path))
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            logger.error("Parse task for %s raised", task.path, exc_info=error)
            result = TaskResult(path=str(task.path), status=TaskStatus.FAILED, detail=str(error))
        else:
            result = future.result()

        with self._lock:
            self._counts[result.status] += 1
            self._recent.append(result)

        if result.status is TaskStatus.FAILED:
            logger.error("Failed %s: %s", result.path, result.detail)
        elif result.status is TaskStatus.RETRYABLE:
            logger.info("Interrupted %s (%s), left for the next scan", result.path, result.detail)
        else:
            logger.debug("%s %s (%s)", result.status.value.capitalize(), result.path, result.detail)
