"""Patch gate shared by the load-state tracker and parse tasks.

The client's asset loader reads world files without holding a lock, so
a write during a load can truncate the file under it. The gate is a
best-effort timing signal, not a lock: the tracker closes it when the
client starts loading a world and opens it when the load finishes.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class PatchGate:
    """Level-triggered open/closed signal.

    Any number of waiters proceed the moment the gate opens. Opening an
    open gate or closing a closed gate does nothing.
    """

    def __init__(self, is_open: bool = True) -> None:
        """Initialize the gate.

        Args:
            is_open: Initial state. The client is assumed idle at startup.
        """
        self._cond = threading.Condition()
        self._open = is_open

    @property
    def is_open(self) -> bool:
        """Current state of the gate."""
        with self._cond:
            return self._open

    def open(self) -> None:
        """Open the gate and release every waiter."""
        with self._cond:
            if self._open:
                return
            self._open = True
            self._cond.notify_all()
        logger.debug("Patch gate opened")

    def close(self) -> None:
        """Close the gate; later waiters block until it reopens."""
        with self._cond:
            if not self._open:
                return
            self._open = False
        logger.debug("Patch gate closed")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the gate is open.

        Args:
            timeout: Longest time to wait in seconds. None waits forever.

        Returns:
            True if the gate is open, False if the timeout expired first.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._open, timeout=timeout)
