"""Blocklist loading and compilation.

This module reads every blocklist definition file in a directory and
merges them into one deduplicated mapping of world id to the scene
objects to deactivate. Several maintainers may publish entries for the
same world; their objects are unioned, and structurally identical
objects collapse into one.
"""

import logging
import threading
import tomllib
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from scenegate.core.paths import ensure_dir
from scenegate.models.blocklist import BlocklistModel, GameObjectInstance

logger = logging.getLogger(__name__)

BLOCKLIST_SUFFIX = ".toml"

CompiledBlocklist = dict[str, set[GameObjectInstance]]


class BlocklistError(Exception):
    """Base exception for blocklist errors."""


class BlocklistParseError(BlocklistError):
    """Raised when a blocklist file is not valid TOML."""


class BlocklistValidationError(BlocklistError):
    """Raised when a blocklist file does not match the schema."""


def load_blocklist(path: Path) -> BlocklistModel:
    """Load and validate a single blocklist file.

    Args:
        path: Path to the TOML definition file.

    Returns:
        Validated BlocklistModel.

    Raises:
        BlocklistParseError: If the TOML syntax is invalid.
        BlocklistValidationError: If the content doesn't match the schema.
        BlocklistError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise BlocklistParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise BlocklistError(f"Failed to read blocklist {path}: {e}") from e

    try:
        return BlocklistModel.model_validate(data)
    except ValidationError as e:
        raise BlocklistValidationError(f"Invalid blocklist {path}: {e}") from e


def load_blocklists(directory: Path) -> list[BlocklistModel]:
    """Load every blocklist file in a directory.

    The directory is created if it does not exist. A file that fails to
    load is logged and skipped; it never aborts the batch.

    Args:
        directory: Directory containing ``*.toml`` definition files.

    Returns:
        The blocklists that loaded successfully, in file name order.
    """
    ensure_dir(directory, "blocklist")

    blocklists: list[BlocklistModel] = []
    for path in sorted(directory.iterdir()):
        if path.suffix != BLOCKLIST_SUFFIX or not path.is_file():
            continue
        try:
            blocklist = load_blocklist(path)
        except BlocklistError as e:
            logger.error("Failed to parse blocklist %s: %s", path.name, e)
            continue
        logger.info("Read blocklist: %s (%s)", blocklist.title, blocklist.maintainer)
        blocklists.append(blocklist)
    return blocklists


def compile_blocklists(blocklists: Iterable[BlocklistModel]) -> CompiledBlocklist:
    """Merge blocklists into a deduplicated per-world mapping.

    Args:
        blocklists: Loaded blocklist definitions.

    Returns:
        Mapping of world id to the set of objects to deactivate.
    """
    compiled: CompiledBlocklist = {}
    for blocklist in blocklists:
        for block in blocklist.blocks:
            compiled.setdefault(block.world_id, set()).update(block.game_objects)
    return compiled


class BlocklistRegistry:
    """Owner of the compiled blocklist currently in effect.

    Readers get immutable snapshots; reload() builds a new mapping off
    to the side and swaps it in under the lock, so a reader never sees
    a half-built blocklist.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._lock = threading.Lock()
        self._compiled: dict[str, frozenset[GameObjectInstance]] = {}

    @property
    def directory(self) -> Path:
        """Directory the blocklist is compiled from."""
        return self._directory

    def reload(self) -> int:
        """Recompile from the directory and replace the current mapping.

        Returns:
            Number of worlds in the new mapping.
        """
        compiled = compile_blocklists(load_blocklists(self._directory))
        frozen = {world_id: frozenset(targets) for world_id, targets in compiled.items()}
        with self._lock:
            self._compiled = frozen
        logger.info("Blocklist compiled: %d worlds", len(frozen))
        return len(frozen)

    def targets_for(self, world_id: str) -> frozenset[GameObjectInstance]:
        """Objects to deactivate in a world (empty if it has no entry)."""
        with self._lock:
            return self._compiled.get(world_id, frozenset())

    def snapshot(self) -> dict[str, frozenset[GameObjectInstance]]:
        """Copy of the whole mapping."""
        with self._lock:
            return dict(self._compiled)

    def __len__(self) -> int:
        with self._lock:
            return len(self._compiled)
