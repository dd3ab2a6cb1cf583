"""Periodic flushing of the content index.

This module provides the PeriodicPersister, a background thread that
writes the content index to disk on a fixed interval and once more when
it is stopped.
"""

import logging
import threading

from scenegate.core.index import ContentIndex, ContentIndexError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0


class PeriodicPersister:
    """Flushes a ContentIndex every ``interval`` seconds.

    A flush that is still running when the next one is due causes the
    next one to be skipped rather than run alongside it.
    """

    def __init__(self, index: ContentIndex, interval: float = DEFAULT_INTERVAL_SECONDS) -> None:
        self._index = index
        self._interval = interval
        self._stop = threading.Event()
        self._busy = threading.Lock()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the timer thread. Calling start twice is a no-op."""
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="index-persister", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the timer thread and flush one last time."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self.flush()

    def flush(self) -> bool:
        """Write the index now unless a flush is already in progress.

        Returns:
            True if this call wrote the index.
        """
        if not self._busy.acquire(blocking=False):
            logger.debug("Index flush already running, skipping")
            return False
        try:
            self._index.save()
            logger.debug("Flushed content index (%d records)", len(self._index))
            return True
        except ContentIndexError as e:
            logger.error("Failed to persist content index: %s", e)
            return False
        finally:
            self._busy.release()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.flush()
