"""Content records tracked by the index.

A content record is created once per discovered data file and later
updated in place when a patch succeeds.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ContentType(str, Enum):
    """Kind of downloaded content.

    Attributes:
        WORLD: A world; eligible for blocklist patching.
        AVATAR: An avatar; indexed only.
    """

    WORLD = "world"
    AVATAR = "avatar"


@dataclass(slots=True)
class ContentRecord:
    """A piece of downloaded content found in the cache.

    Attributes:
        id: Content identity (e.g. ``wrld_...``).
        type: Kind of content.
        path: Path of the data file.
        patched: Whether the blocklist has been written into the file.
        patched_at: When the last successful patch happened (ISO 8601).
        disabled_objects: Names deactivated by the last patch.
    """

    id: str
    type: ContentType
    path: str
    patched: bool = False
    patched_at: str | None = None
    disabled_objects: list[str] | None = None

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            msg = "Content id cannot be empty"
            raise ValueError(msg)
        if not self.path:
            msg = "Content path cannot be empty"
            raise ValueError(msg)

    def mark_patched(self, disabled_objects: list[str]) -> None:
        """Record a successful patch."""
        self.patched = True
        self.patched_at = datetime.now(UTC).isoformat()
        self.disabled_objects = list(disabled_objects)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the record.
        """
        result: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "path": self.path,
            "patched": self.patched,
        }
        if self.patched_at is not None:
            result["patched_at"] = self.patched_at
        if self.disabled_objects is not None:
            result["disabled_objects"] = self.disabled_objects
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentRecord":
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing record data.

        Returns:
            ContentRecord instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If the type is invalid.
        """
        return cls(
            id=data["id"],
            type=ContentType(data["type"]),
            path=data["path"],
            patched=data.get("patched", False),
            patched_at=data.get("patched_at"),
            disabled_objects=data.get("disabled_objects"),
        )
