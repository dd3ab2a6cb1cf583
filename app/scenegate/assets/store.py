"""Protocols for the asset codec plugin.

The codec is configured through the ``asset_store`` setting and must
provide an object satisfying AssetStore. Bundles it returns are used as
context managers and must release their file handle on close, because
the patched file replaces the original while the handle would still be
open otherwise.
"""

from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import Protocol, runtime_checkable

from scenegate.models.content import ContentType


class AssetStoreError(Exception):
    """Base exception for asset codec errors."""


class IncompleteAssetError(AssetStoreError):
    """Raised when a read runs past the end of a file still being written.

    This is the only retryable codec failure.
    """


class SceneTransform(Protocol):
    """Transform (or RectTransform) component of a scene object."""

    @property
    def local_position(self) -> tuple[float, float, float]:
        """Local position as stored in the asset (single precision)."""
        ...

    def father(self) -> "SceneTransform | None":
        """Parent transform, or None for a root object."""
        ...

    def game_object(self) -> "SceneObject":
        """Scene object owning this transform."""
        ...


class SceneObject(Protocol):
    """A named object in a world's scene."""

    @property
    def name(self) -> str: ...

    @property
    def active(self) -> bool: ...

    def transforms(self) -> Iterable[SceneTransform]:
        """Transform components attached to the object."""
        ...


class AssetBundle(Protocol):
    """An opened asset bundle."""

    @property
    def content_id(self) -> str | None:
        """Identity of the content, None if the bundle carries none."""
        ...

    @property
    def content_type(self) -> ContentType | None:
        """Kind of content, None if it is neither a world nor an avatar."""
        ...

    def game_objects(self) -> Iterable[SceneObject]: ...

    def set_active(self, obj: SceneObject, active: bool) -> None:
        """Change an object's active flag in the bundle's pending data."""
        ...

    def write(self, path: Path) -> None:
        """Serialize the bundle, including pending changes, to ``path``."""
        ...

    def close(self) -> None: ...

    def __enter__(self) -> "AssetBundle": ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class AssetStore(Protocol):
    """Entry point of an asset codec plugin."""

    def load_bundle(self, path: Path) -> AssetBundle:
        """Open the bundle at ``path``.

        Raises:
            IncompleteAssetError: If the file is still being written.
            AssetStoreError: If the file is not a readable bundle.
        """
        ...
