"""Live pipeline: discovery, load-state gating and task supervision."""

from scenegate.live.indexer import DATA_FILENAME, MARKER_FILENAME, Indexer, data_path_for
from scenegate.live.service import Service
from scenegate.live.supervisor import TaskSupervisor
from scenegate.live.tasks import ParseTask, TaskResult, TaskStatus
from scenegate.live.tracker import LoadState, LoadStateTracker, find_newest_log
from scenegate.live.watcher import BlocklistReloadHandler, ContentWatcher, MarkerEventHandler

__all__ = [
    "DATA_FILENAME",
    "MARKER_FILENAME",
    "BlocklistReloadHandler",
    "ContentWatcher",
    "Indexer",
    "LoadState",
    "LoadStateTracker",
    "MarkerEventHandler",
    "ParseTask",
    "Service",
    "TaskResult",
    "TaskStatus",
    "TaskSupervisor",
    "data_path_for",
    "find_newest_log",
]
