"""Load-state tracking from the client's log.

The client writes a line when it starts preparing a world's assets and
another when it enters the world. The tracker tails the newest log file
and keeps the patch gate closed in between.
"""

import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import TextIO

from scenegate.core.gate import PatchGate

logger = logging.getLogger(__name__)

LOAD_START_MARKER = "[Behaviour] Preparing assets..."
LOAD_STOP_MARKER = "Entering world"
LOG_PATTERN = "*.txt"

DEFAULT_POLL_INTERVAL = 0.1


class LoadState(str, Enum):
    """Whether the client is loading a world.

    Attributes:
        IDLE: No load in progress; the gate is open.
        LOADING: A world is loading; the gate is closed.
    """

    IDLE = "idle"
    LOADING = "loading"


def _creation_time(path: Path) -> float:
    return _stat_creation_time(path.stat())


def _stat_creation_time(stat: os.stat_result) -> float:
    # No birth time on Linux: the last write stands in for it, so writing
    # to any other *.txt file there makes that file the newest log.
    birth = getattr(stat, "st_birthtime", None)
    return birth if birth is not None else stat.st_mtime


def find_newest_log(log_dir: Path) -> Path | None:
    """Find the most recently created log file.

    Args:
        log_dir: Directory the client writes its logs to.

    Returns:
        Path of the newest ``*.txt`` file, or None if there is none.
    """
    newest: Path | None = None
    newest_time = float("-inf")
    try:
        candidates = list(log_dir.glob(LOG_PATTERN))
    except OSError as e:
        logger.warning("Cannot list log directory %s: %s", log_dir, e)
        return None
    for candidate in candidates:
        try:
            created = _creation_time(candidate)
        except OSError:
            continue
        if created > newest_time:
            newest, newest_time = candidate, created
    return newest


class LoadStateTracker:
    """Tails the client log and drives the patch gate.

    A newer log file means the client restarted, and a freshly started
    client is not mid-load, so switching files forces the tracker back
    to IDLE. There is no timeout on LOADING.
    """

    def __init__(
        self,
        log_dir: Path,
        gate: PatchGate,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the tracker.

        Args:
            log_dir: Directory containing the client's log files.
            gate: Gate to open and close.
            poll_interval: Sleep between reads once the log is caught up.
        """
        self._log_dir = log_dir
        self._gate = gate
        self._poll_interval = poll_interval
        self._state = LoadState.IDLE
        self._current: Path | None = None
        self._stream: TextIO | None = None
        self._partial = ""
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def current_log(self) -> Path | None:
        """Log file currently being tailed."""
        return self._current

    def handle_line(self, line: str) -> None:
        """Apply one complete log line to the state machine."""
        if LOAD_START_MARKER in line:
            logger.debug("Expecting world load: %s", line.rstrip())
            self._state = LoadState.LOADING
            self._gate.close()
        elif LOAD_STOP_MARKER in line:
            logger.debug("Expecting world load finish: %s", line.rstrip())
            self._state = LoadState.IDLE
            self._gate.open()

    def poll(self) -> int:
        """Process everything available right now.

        Switches to a newer log file if one exists, then reads the lines
        appended since the last call.

        Returns:
            Number of complete lines processed.
        """
        newest = find_newest_log(self._log_dir)
        if newest is not None and newest != self._current:
            self._switch_to(newest)
            return 0
        if self._stream is None:
            return 0

        processed = 0
        while True:
            chunk = self._stream.readline()
            if not chunk:
                return processed
            if not chunk.endswith("\n"):
                # The writer is mid-line; keep the fragment for the next poll.
                self._partial += chunk
                return processed
            line, self._partial = self._partial + chunk, ""
            self.handle_line(line)
            processed += 1

    def run(self) -> None:
        """Tail the log until stop() is called."""
        try:
            while not self._stop.is_set():
                if self.poll() == 0:
                    self._stop.wait(self._poll_interval)
        finally:
            self._close_stream()

    def start(self) -> None:
        """Run the tracker on a background thread."""
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="load-state-tracker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop tailing and wait for the thread to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        else:
            self._close_stream()

    def _switch_to(self, path: Path) -> None:
        first_attach = self._current is None
        self._close_stream()
        try:
            self._stream = open(path, encoding="utf-8", errors="replace")  # noqa: SIM115
        except OSError as e:
            logger.warning("Cannot open log file %s: %s", path, e)
            return
        # History written before we attached is irrelevant.
        self._stream.seek(0, 2)
        self._current = path
        self._partial = ""

        if first_attach:
            logger.info("Tailing client log %s", path)
            return
        logger.debug("Switching file, new log file exists: %s", path)
        self._state = LoadState.IDLE
        self._gate.open()

    def _close_stream(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
