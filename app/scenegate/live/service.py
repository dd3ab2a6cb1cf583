"""Wiring of the background patcher.

The Service builds every component from Settings, runs the startup
scan, and starts and stops the background threads together.
"""

import logging
import threading
from pathlib import Path

from scenegate.assets.store import AssetStore
from scenegate.blocklist.compiler import BlocklistRegistry
from scenegate.blocklist.patcher import BlocklistPatcher
from scenegate.core.config import Settings
from scenegate.core.gate import PatchGate
from scenegate.core.index import ContentIndex, ContentIndexError
from scenegate.core.persister import PeriodicPersister
from scenegate.live.indexer import Indexer
from scenegate.live.supervisor import TaskSupervisor
from scenegate.live.tasks import ParseTask
from scenegate.live.tracker import LoadStateTracker
from scenegate.live.watcher import ContentWatcher

logger = logging.getLogger(__name__)


class Service:
    """The running patcher: watcher, tracker, tasks and persister."""

    def __init__(self, settings: Settings, store: AssetStore) -> None:
        self.settings = settings
        self.gate = PatchGate()
        self.index = ContentIndex(settings.index_path)
        self.registry = BlocklistRegistry(settings.blocklist_dir)
        self.indexer = Indexer(
            store,
            self.index,
            self.registry,
            BlocklistPatcher(store, dry_run=settings.dry_run),
        )
        self.supervisor = TaskSupervisor(max_workers=settings.max_workers)
        self.tracker = LoadStateTracker(settings.effective_log_dir, self.gate)
        self.persister = PeriodicPersister(self.index, settings.persist_interval_seconds)
        self.watcher = ContentWatcher(settings.effective_content_root, self.schedule)
        self.watcher.watch_blocklists(self.registry)
        self._stop = threading.Event()

    def schedule(self, data_path: Path) -> None:
        """Queue a parse task for a newly discovered data file."""
        self.supervisor.submit(
            ParseTask(
                data_path,
                self.indexer,
                self.gate,
                retry_delay=self.settings.retry_delay_seconds,
                gate_timeout=self.settings.gate_timeout_seconds,
                stop_event=self._stop,
            )
        )

    def start(self, scan: bool = True) -> None:
        """Load state, optionally scan existing content, start threads."""
        if self.settings.dry_run:
            logger.warning("Dry-run enabled: no asset files will be modified")
        try:
            loaded = self.index.load()
            logger.info("Loaded %d indexed records", loaded)
        except ContentIndexError as e:
            logger.warning("Starting with an empty index: %s", e)

        self.registry.reload()
        if scan:
            self.indexer.scan(self.settings.effective_content_root)

        self.persister.start()
        self.tracker.start()
        self.watcher.start()

    def stop(self) -> None:
        """Stop every thread and flush the index."""
        self.supervisor.close()
        self._stop.set()
        self.watcher.stop()
        self.tracker.stop()
        self.supervisor.shutdown()
        self.persister.stop()
        logger.info("Stopped; task outcomes: %s", self._format_counts())

    def wait(self) -> None:
        """Block until stop() is called from another thread."""
        # Short waits keep Ctrl-C responsive on every platform.
        while not self._stop.wait(1.0):
            pass

    def _format_counts(self) -> str:
        counts = self.supervisor.counts()
        if not counts:
            return "none"
        return ", ".join(f"{status.value}={count}" for status, count in sorted(counts.items()))
