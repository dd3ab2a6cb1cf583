"""Blocklist compilation, matching and patching.

This package turns maintainer-authored blocklist files into a per-world
set of scene objects, decides which live objects match, and writes the
deactivated result back to the asset file.
"""

from scenegate.blocklist.compiler import (
    BlocklistError,
    BlocklistParseError,
    BlocklistRegistry,
    BlocklistValidationError,
    CompiledBlocklist,
    compile_blocklists,
    load_blocklist,
    load_blocklists,
)
from scenegate.blocklist.matcher import object_matches, parent_matches, position_matches
from scenegate.blocklist.patcher import (
    BlocklistPatcher,
    PatchError,
    PatchResult,
    backup_path_for,
    is_patched,
)

__all__ = [
    "BlocklistError",
    "BlocklistParseError",
    "BlocklistPatcher",
    "BlocklistRegistry",
    "BlocklistValidationError",
    "CompiledBlocklist",
    "PatchError",
    "PatchResult",
    "backup_path_for",
    "compile_blocklists",
    "is_patched",
    "load_blocklist",
    "load_blocklists",
    "object_matches",
    "parent_matches",
    "position_matches",
]
