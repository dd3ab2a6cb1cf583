"""Per-file parse tasks.

A parse task resolves one discovered data file into a content record,
indexes it, and for worlds waits for the patch gate before applying the
blocklist. Every run ends in an explicit TaskResult.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from scenegate.assets.store import IncompleteAssetError
from scenegate.core.gate import PatchGate
from scenegate.live.indexer import Indexer
from scenegate.models.content import ContentType

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 0.5

# Granularity of gate waits, so a stop request is noticed promptly.
_GATE_POLL_SECONDS = 0.5


class TaskStatus(str, Enum):
    """Outcome of a parse task.

    Attributes:
        PATCHED: The world file was rewritten with objects disabled.
        INDEXED: The record was indexed; nothing was written.
        SKIPPED: Not content, already patched, or the gate never opened.
        RETRYABLE: Interrupted by shutdown; the next startup scan redoes it.
        FAILED: An unexpected error ended the task.
    """

    PATCHED = "patched"
    INDEXED = "indexed"
    SKIPPED = "skipped"
    RETRYABLE = "retryable"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Result of one parse task.

    Attributes:
        path: Data file the task was scheduled for.
        status: Outcome of the task.
        content_id: Identity of the parsed content, if it got that far.
        detail: Human-readable explanation.
    """

    path: str
    status: TaskStatus
    content_id: str | None = None
    detail: str | None = None


class ParseTask:
    """Callable unit of work for one discovered data file."""

    def __init__(
        self,
        path: Path,
        indexer: Indexer,
        gate: PatchGate,
        *,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        gate_timeout: float | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Initialize the task.

        Args:
            path: Data file to parse.
            indexer: Coordinator owning the index and blocklist.
            gate: Gate to wait on before patching a world.
            retry_delay: Back-off between reads of an incomplete file.
            gate_timeout: Longest wait for the gate (None waits forever).
            stop_event: Set when the service shuts down.
        """
        self.path = path
        self._indexer = indexer
        self._gate = gate
        self._retry_delay = retry_delay
        self._gate_timeout = gate_timeout
        self._stop = stop_event if stop_event is not None else threading.Event()

    def __call__(self) -> TaskResult:
        try:
            return self._run()
        except Exception as e:
            logger.exception("Parse task for %s failed", self.path)
            return TaskResult(path=str(self.path), status=TaskStatus.FAILED, detail=str(e))

    def _run(self) -> TaskResult:
        logger.debug("File creation: %s", self.path)

        while True:
            try:
                record = self._indexer.parse_file(self.path)
                break
            except IncompleteAssetError:
                logger.debug("%s is still being written, retrying", self.path)
                if self._stop.wait(self._retry_delay):
                    return self._result(TaskStatus.RETRYABLE, detail="stopped during download")

        if record is None:
            logger.debug("%s is not indexable content", self.path)
            return self._result(TaskStatus.SKIPPED, detail="not content")

        self._indexer.add(record)
        logger.info("Adding to index: %s (%s)", record.id, record.type.value)

        if record.type is not ContentType.WORLD:
            return self._result(TaskStatus.INDEXED, record.id)

        logger.debug("Live patching world after load finishes (%s)", record.id)
        if not self._wait_for_gate():
            if self._stop.is_set():
                return self._result(TaskStatus.RETRYABLE, record.id, "stopped while loading")
            logger.warning(
                "World load did not finish within %ss, leaving %s unpatched",
                self._gate_timeout,
                record.id,
            )
            return self._result(TaskStatus.SKIPPED, record.id, "gate timeout")

        patch = self._indexer.patch_content(record)
        if patch is None:
            return self._result(TaskStatus.INDEXED, record.id, "no blocklist entry")
        if patch.skipped:
            return self._result(TaskStatus.SKIPPED, record.id, "already patched")
        if patch.written:
            return self._result(
                TaskStatus.PATCHED, record.id, f"disabled {len(patch.disabled)} objects"
            )
        if patch.dry_run:
            return self._result(
                TaskStatus.INDEXED, record.id, f"dry-run, {len(patch.disabled)} matches"
            )
        return self._result(TaskStatus.INDEXED, record.id, "no matching objects")

    def _wait_for_gate(self) -> bool:
        """Wait for the gate in short slices, giving up on timeout or stop."""
        remaining = self._gate_timeout
        while not self._stop.is_set():
            step = _GATE_POLL_SECONDS if remaining is None else min(remaining, _GATE_POLL_SECONDS)
            if self._gate.wait(step):
                return True
            if remaining is not None:
                remaining -= step
                if remaining <= 0:
                    return False
        return False

    def _result(
        self, status: TaskStatus, content_id: str | None = None, detail: str | None = None
    ) -> TaskResult:
        return TaskResult(path=str(self.path), status=status, content_id=content_id, detail=detail)
