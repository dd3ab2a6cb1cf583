"""Coordinator for the content index and the blocklist.

The Indexer is the one component that owns the shared state: the
content index, the compiled blocklist registry, and the patcher. Parse
tasks, the startup scan and the CLI all go through it.
"""

import logging
from pathlib import Path

from scenegate.assets.store import AssetStore, AssetStoreError, IncompleteAssetError
from scenegate.blocklist.compiler import BlocklistRegistry
from scenegate.blocklist.patcher import BlocklistPatcher, PatchError, PatchResult
from scenegate.core.index import ContentIndex
from scenegate.models.content import ContentRecord, ContentType

logger = logging.getLogger(__name__)

MARKER_FILENAME = "__info"
DATA_FILENAME = "__data"


def data_path_for(marker_path: str) -> str:
    """Derive a content unit's data file from its marker file.

    Every occurrence of the marker name in the path is substituted, not
    just the final component.
    """
    return marker_path.replace(MARKER_FILENAME, DATA_FILENAME)


class Indexer:
    """Parses content files, indexes them, and patches worlds."""

    def __init__(
        self,
        store: AssetStore,
        index: ContentIndex,
        registry: BlocklistRegistry,
        patcher: BlocklistPatcher,
    ) -> None:
        self._store = store
        self._index = index
        self._registry = registry
        self._patcher = patcher

    @property
    def index(self) -> ContentIndex:
        return self._index

    @property
    def registry(self) -> BlocklistRegistry:
        return self._registry

    def parse_file(self, path: Path) -> ContentRecord | None:
        """Resolve a data file into a content record.

        Args:
            path: Data file of a content unit.

        Returns:
            ContentRecord, or None if the bundle is not a world or avatar.

        Raises:
            IncompleteAssetError: If the file is still being written.
            AssetStoreError: If the file is not a readable bundle.
        """
        with self._store.load_bundle(path) as bundle:
            content_id = bundle.content_id
            content_type = bundle.content_type
        if not content_id or content_type is None:
            return None
        return ContentRecord(id=content_id, type=content_type, path=str(path))

    def add(self, record: ContentRecord) -> bool:
        """Add a record to the index."""
        return self._index.add(record)

    def patch_content(self, record: ContentRecord) -> PatchResult | None:
        """Apply the blocklist to a world record.

        Args:
            record: Indexed content record.

        Returns:
            PatchResult, or None if the record is not a world or the
            world has no blocklist entry.

        Raises:
            AssetStoreError: If the codec fails.
            PatchError: If the patched file cannot be published.
        """
        if record.type is not ContentType.WORLD:
            return None

        targets = self._registry.targets_for(record.id)
        if not targets:
            logger.debug("No blocklist entry for %s", record.id)
            return None

        result = self._patcher.patch(Path(record.path), targets)
        if result.written:
            self._index.mark_patched(record.id, list(result.disabled))
            logger.info("Patched %s: disabled %d objects", record.id, len(result.disabled))
        return result

    def scan(self, content_root: Path) -> list[ContentRecord]:
        """Index and patch everything already present under a content root.

        Files that fail to load are logged and skipped.

        Args:
            content_root: Root of the client's content cache.

        Returns:
            Records that were indexed.
        """
        if not content_root.is_dir():
            logger.warning("Content root %s does not exist, nothing to scan", content_root)
            return []

        indexed: list[ContentRecord] = []
        for marker in sorted(content_root.rglob(MARKER_FILENAME)):
            data_path = Path(data_path_for(str(marker)))
            if not data_path.is_file():
                continue
            try:
                record = self.parse_file(data_path)
            except IncompleteAssetError:
                logger.info("Skipping %s, still being written", data_path)
                continue
            except AssetStoreError as e:
                logger.warning("Cannot read %s: %s", data_path, e)
                continue
            if record is None:
                continue
            self._index.add(record)
            indexed.append(record)
            self._patch_logged(record)

        logger.info("Startup scan indexed %d items under %s", len(indexed), content_root)
        return indexed

    def patch_all(self) -> list[PatchResult]:
        """Apply the current blocklist to every indexed world.

        Patched worlds are skipped by their backup file. Worlds without a
        matching object are loaded again each time.

        Returns:
            One PatchResult per world that has a blocklist entry.
        """
        results: list[PatchResult] = []
        for record in self._index.worlds():
            result = self._patch_logged(record)
            if result is not None:
                results.append(result)
        return results

    def _patch_logged(self, record: ContentRecord) -> PatchResult | None:
        if not Path(record.path).is_file():
            logger.debug("Indexed file %s no longer exists", record.path)
            return None
        try:
            return self.patch_content(record)
        except (AssetStoreError, PatchError) as e:
            logger.error("Failed to patch %s: %s", record.id, e)
            return None
