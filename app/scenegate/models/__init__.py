"""Data models for scenegate.

This package contains the blocklist definition models and the runtime
content records tracked by the index.
"""

from scenegate.models.blocklist import (
    BlockEntry,
    BlocklistModel,
    GameObjectInstance,
    GameObjectPosition,
)
from scenegate.models.content import ContentRecord, ContentType

__all__ = [
    "BlockEntry",
    "BlocklistModel",
    "ContentRecord",
    "ContentType",
    "GameObjectInstance",
    "GameObjectPosition",
]
