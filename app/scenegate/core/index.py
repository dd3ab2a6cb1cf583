"""In-memory content index with JSON persistence.

This module provides the ContentIndex class, the single owner of all
content records. Every accessor takes the index lock, so the watcher's
tasks, the persister and the CLI can share one instance.
"""

import json
import logging
import os
import threading
from collections.abc import Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile

from scenegate.core.paths import get_index_path
from scenegate.models.content import ContentRecord, ContentType

logger = logging.getLogger(__name__)


class ContentIndexError(Exception):
    """Raised when the index cannot be read or written."""


class ContentIndex:
    """Thread-safe collection of content records keyed by content id.

    Storage location: ~/.local/state/scenegate/index.json

    A record added for an id that is already indexed replaces the old
    record, since a re-download of the same content lands at a new path.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize an empty index.

        Args:
            path: Optional override for the index file location.
        """
        self._path = path if path is not None else get_index_path()
        self._records: dict[str, ContentRecord] = {}
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        """Location of the persisted index."""
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, content_id: object) -> bool:
        with self._lock:
            return content_id in self._records

    def add(self, record: ContentRecord) -> bool:
        """Add or replace a record.

        Args:
            record: The record to index.

        Returns:
            True if the id was new, False if an existing record was replaced.
        """
        with self._lock:
            is_new = record.id not in self._records
            self._records[record.id] = record
        if not is_new:
            logger.debug("Replacing indexed record for %s", record.id)
        return is_new

    def get(self, content_id: str) -> ContentRecord | None:
        """Look up a record by id."""
        with self._lock:
            return self._records.get(content_id)

    def records(self) -> list[ContentRecord]:
        """Snapshot of all records."""
        with self._lock:
            return list(self._records.values())

    def worlds(self) -> Iterator[ContentRecord]:
        """Iterate over a snapshot of the World records."""
        return (record for record in self.records() if record.type is ContentType.WORLD)

    def mark_patched(self, content_id: str, disabled_objects: list[str]) -> None:
        """Flag a record as patched, if it is indexed."""
        with self._lock:
            record = self._records.get(content_id)
            if record is not None:
                record.mark_patched(disabled_objects)

    def save(self) -> Path:
        """Write the index to disk atomically.

        Returns:
            Path where the index was written.

        Raises:
            ContentIndexError: If the file cannot be written.
        """
        with self._lock:
            payload = [record.to_dict() for record in self._records.values()]

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(payload, f, indent=2)
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ContentIndexError(f"Failed to write index: {e}") from e

        logger.debug("Wrote %d records to %s", len(payload), self._path)
        return self._path

    def load(self) -> int:
        """Replace the in-memory records with the persisted ones.

        Corrupt records are skipped with a warning. A missing file leaves
        the index empty.

        Returns:
            Number of records loaded.

        Raises:
            ContentIndexError: If the file exists but is not a JSON list.
        """
        if not self._path.exists():
            return 0

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ContentIndexError(f"Failed to read index {self._path}: {e}") from e
        if not isinstance(data, list):
            raise ContentIndexError(f"Index {self._path} is not a list of records")

        records: dict[str, ContentRecord] = {}
        for position, item in enumerate(data):
            try:
                record = ContentRecord.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping corrupt index record %d: %s", position, str(e))
                continue
            records[record.id] = record

        with self._lock:
            self._records = records
        return len(records)
