"""Filesystem watching for new content and blocklist edits.

The client's change notifications are unreliable for a content unit's
data file on at least one platform, but the marker file written next to
it is always reported. The watcher therefore listens for marker files
and hands the derived data file path to a callback.
"""

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from scenegate.blocklist.compiler import BLOCKLIST_SUFFIX, BlocklistRegistry
from scenegate.live.indexer import MARKER_FILENAME, data_path_for

logger = logging.getLogger(__name__)

# Seconds between checks that the observer thread is still alive.
HEALTH_CHECK_INTERVAL = 5.0

_BLOCKLIST_EVENTS = frozenset({"created", "modified", "moved", "deleted"})


def _event_path(path: bytes | str) -> str:
    return os.fsdecode(path)


class _LoggingHandler(FileSystemEventHandler):
    """Event handler whose callback errors are logged, not raised.

    An exception escaping a handler would kill the observer thread.
    """

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            super().dispatch(event)
        except Exception:
            logger.exception("Error handling %s event for %s", event.event_type, event.src_path)


class MarkerEventHandler(_LoggingHandler):
    """Reports the data file of every newly created marker file."""

    def __init__(self, on_content: Callable[[Path], None]) -> None:
        self._on_content = on_content

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._report(_event_path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._report(_event_path(event.dest_path))

    def _report(self, path: str) -> None:
        if Path(path).name != MARKER_FILENAME:
            return
        self._on_content(Path(data_path_for(path)))


class BlocklistReloadHandler(_LoggingHandler):
    """Recompiles the blocklist when a definition file changes."""

    def __init__(self, registry: BlocklistRegistry) -> None:
        self._registry = registry

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _BLOCKLIST_EVENTS:
            return
        paths = [_event_path(event.src_path)]
        if event.dest_path:
            paths.append(_event_path(event.dest_path))
        if any(path.endswith(BLOCKLIST_SUFFIX) for path in paths):
            logger.info("Blocklist changed, reloading")
            self._registry.reload()


@dataclass(frozen=True, slots=True)
class WatchSpec:
    """One directory to watch.

    Attributes:
        path: Directory to observe.
        handler: Handler receiving its events.
        recursive: Whether subdirectories are observed too.
    """

    path: Path
    handler: FileSystemEventHandler
    recursive: bool


class ContentWatcher:
    """Owns a watchdog observer and keeps it running.

    If the observer thread dies (for example because a watched directory
    was removed), the failure is logged and a fresh observer is started
    on the next health check.
    """

    def __init__(
        self,
        content_root: Path,
        on_content: Callable[[Path], None],
        observer_factory: Callable[[], BaseObserver] = Observer,
        health_check_interval: float = HEALTH_CHECK_INTERVAL,
    ) -> None:
        """Initialize the watcher.

        Args:
            content_root: Root of the content cache, watched recursively.
            on_content: Called with each discovered data file path.
            observer_factory: Builds watchdog observers.
            health_check_interval: Seconds between observer liveness checks.
        """
        self._specs = [WatchSpec(content_root, MarkerEventHandler(on_content), recursive=True)]
        self._observer_factory = observer_factory
        self._health_check_interval = health_check_interval
        self._observer: BaseObserver | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def watch_blocklists(self, registry: BlocklistRegistry) -> None:
        """Also reload ``registry`` whenever its directory changes.

        Must be called before start().
        """
        self._specs.append(
            WatchSpec(registry.directory, BlocklistReloadHandler(registry), recursive=False)
        )

    def start(self) -> None:
        """Start observing and the health-check thread."""
        if self._thread is not None:
            return
        self._stop.clear()
        self._start_observer()
        self._thread = threading.Thread(target=self._supervise, name="content-watcher", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop observing."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._stop_observer()

    def _start_observer(self) -> bool:
        observer = self._observer_factory()
        try:
            for watch in self._specs:
                watch.path.mkdir(parents=True, exist_ok=True)
                observer.schedule(watch.handler, str(watch.path), recursive=watch.recursive)
            observer.start()
        except OSError as e:
            logger.error("Cannot watch for new content: %s", e)
            return False
        self._observer = observer
        logger.info("Watching %s for new content", self._specs[0].path)
        return True

    def _stop_observer(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        if self._observer.is_alive():
            self._observer.join()
        self._observer = None

    def _supervise(self) -> None:
        while not self._stop.wait(self._health_check_interval):
            if self._observer is not None and self._observer.is_alive():
                continue
            if self._observer is not None:
                logger.error("Content watcher stopped unexpectedly, restarting")
                self._observer = None
            self._start_observer()
