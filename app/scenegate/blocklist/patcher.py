"""Applying a world's blocklist to its asset file.

Handles deactivation of matched scene objects and the file swap that
publishes the result, with dry-run support. A sibling ``.bak`` file
marks an asset as already patched.
"""

import logging
import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from scenegate.assets.store import AssetBundle, AssetStore
from scenegate.blocklist.matcher import object_matches
from scenegate.models.blocklist import GameObjectInstance

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"
CLEAN_SUFFIX = ".clean"


class PatchError(Exception):
    """Raised when a patched asset cannot be published."""


def backup_path_for(asset_path: Path) -> Path:
    """Backup location of an asset file."""
    return asset_path.with_name(asset_path.name + BACKUP_SUFFIX)


def is_patched(asset_path: Path) -> bool:
    """True if the asset has a backup, meaning it was already patched."""
    return backup_path_for(asset_path).exists()


@dataclass(frozen=True, slots=True)
class PatchResult:
    """Result of patching a single asset file.

    Attributes:
        path: Asset file that was operated on.
        disabled: Names of the objects that were deactivated.
        skipped: True if the file was already patched and left alone.
        dry_run: True if matches were found but nothing was written.
        backup_path: Location of the original file after a real write.
    """

    path: str
    disabled: tuple[str, ...] = field(default_factory=tuple)
    skipped: bool = False
    dry_run: bool = False
    backup_path: str | None = None

    @property
    def written(self) -> bool:
        """Whether the asset file on disk was replaced."""
        return self.backup_path is not None


class BlocklistPatcher:
    """Deactivates blocklisted objects in asset files.

    Attributes:
        _store: Codec used to open and write bundles.
        _dry_run: If True, match and log without writing anything.
    """

    def __init__(self, store: AssetStore, dry_run: bool = False) -> None:
        """Initialize the patcher.

        Args:
            store: Asset codec.
            dry_run: If True, report what would be disabled without writing.
        """
        self._store = store
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def patch(self, asset_path: Path, targets: Iterable[GameObjectInstance]) -> PatchResult:
        """Deactivate every active object matching one of ``targets``.

        A world with no matching object is not rewritten and gets no
        backup, so it is loaded and matched again on every later scan.

        Args:
            asset_path: The world's data file.
            targets: Compiled blocklist entries for the world.

        Returns:
            PatchResult describing what happened.

        Raises:
            AssetStoreError: If the codec cannot load or write the bundle.
            PatchError: If the patched file cannot replace the original.
        """
        if is_patched(asset_path):
            logger.debug("Skipping %s, backup file indicates it is already patched", asset_path)
            return PatchResult(path=str(asset_path), skipped=True)

        targets = tuple(targets)
        clean_path = asset_path.with_name(asset_path.name + CLEAN_SUFFIX)

        with self._store.load_bundle(asset_path) as bundle:
            disabled = self._disable_matches(bundle, targets)

            if self._dry_run:
                logger.info("Dry-run: would disable %d objects in %s", len(disabled), asset_path)
                return PatchResult(path=str(asset_path), disabled=disabled, dry_run=True)

            if not disabled:
                logger.debug("Nothing to disable in %s", asset_path)
                return PatchResult(path=str(asset_path))

            logger.info("Done, writing changes as bundle: %s", asset_path)
            try:
                bundle.write(clean_path)
            except Exception:
                clean_path.unlink(missing_ok=True)
                raise

        # The bundle handle is closed here; the original can now be moved.
        backup_path = self._publish(asset_path, clean_path)
        return PatchResult(
            path=str(asset_path),
            disabled=disabled,
            backup_path=str(backup_path),
        )

    def _disable_matches(
        self, bundle: AssetBundle, targets: tuple[GameObjectInstance, ...]
    ) -> tuple[str, ...]:
        """Deactivate matching objects in the bundle's pending data.

        Args:
            bundle: Opened bundle.
            targets: Blocklist entries.

        Returns:
            Names of the deactivated objects, in scene order.
        """
        disabled: list[str] = []
        for obj in bundle.game_objects():
            for target in targets:
                if not object_matches(obj, target):
                    continue
                logger.debug("Found %s, disabling", target.name)
                bundle.set_active(obj, False)
                disabled.append(obj.name)
                break
        return tuple(disabled)

    def _publish(self, asset_path: Path, clean_path: Path) -> Path:
        """Swap the patched file in, keeping the original as the backup.

        The backup is created first as a hard link (or a copy where links
        are unsupported), then the patched file is renamed over the
        original. A concurrent reader of ``asset_path`` sees either the
        complete old file or the complete new one.

        Args:
            asset_path: Original asset path.
            clean_path: Freshly written patched file.

        Returns:
            Path of the backup.

        Raises:
            PatchError: If either step fails; temporary files are removed.
        """
        backup_path = backup_path_for(asset_path)
        try:
            try:
                os.link(asset_path, backup_path)
            except OSError:
                shutil.copy2(asset_path, backup_path)
        except OSError as e:
            clean_path.unlink(missing_ok=True)
            raise PatchError(f"Failed to back up {asset_path}: {e}") from e

        try:
            os.replace(clean_path, asset_path)
        except OSError as e:
            clean_path.unlink(missing_ok=True)
            backup_path.unlink(missing_ok=True)
            raise PatchError(f"Failed to replace {asset_path}: {e}") from e

        return backup_path
