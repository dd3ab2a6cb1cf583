"""Asset codec boundary.

scenegate does not read or write the client's binary bundle format
itself; a codec plugin implementing these protocols does.
"""

from scenegate.assets.store import (
    AssetBundle,
    AssetStore,
    AssetStoreError,
    IncompleteAssetError,
    SceneObject,
    SceneTransform,
)

__all__ = [
    "AssetBundle",
    "AssetStore",
    "AssetStoreError",
    "IncompleteAssetError",
    "SceneObject",
    "SceneTransform",
]
