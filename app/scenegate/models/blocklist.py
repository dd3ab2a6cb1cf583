"""Blocklist definition models.

This module defines the Pydantic models representing a maintainer's
blocklist TOML file. Game object models are frozen so that instances
are hashable and compare structurally, which is what deduplication
across blocklist files relies on.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class GameObjectPosition(BaseModel):
    """Local position of a scene object.

    Stored at double precision because TOML floats are doubles; the
    matcher narrows each component to single precision before comparing
    it with live asset values.

    Attributes:
        x: Local X coordinate.
        y: Local Y coordinate.
        z: Local Z coordinate.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    z: float


class GameObjectInstance(BaseModel):
    """A scene object to deactivate.

    Attributes:
        name: Exact object name.
        position: Optional local position the object must have.
        parent: Optional description of the object's direct parent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Annotated[str, Field(min_length=1, description="Scene object name")]
    position: Annotated[
        GameObjectPosition | None,
        Field(description="Required local position"),
    ] = None
    parent: Annotated[
        GameObjectInstance | None,
        Field(description="Required parent object"),
    ] = None

    @property
    def is_name_only(self) -> bool:
        """True when the name alone decides a match."""
        return self.position is None and self.parent is None


class BlockEntry(BaseModel):
    """Objects to block for a single world.

    Attributes:
        friendly_name: Human-readable world name, informational only.
        world_id: World identity the entry applies to.
        game_objects: Objects to deactivate in that world.
    """

    model_config = ConfigDict(extra="forbid")

    friendly_name: Annotated[str | None, Field(description="World display name")] = None
    world_id: Annotated[str, Field(min_length=1, description="World identity")]
    game_objects: Annotated[
        list[GameObjectInstance],
        Field(default_factory=list, description="Objects to deactivate"),
    ]


class BlocklistModel(BaseModel):
    """A complete blocklist definition file.

    Attributes:
        title: Blocklist title.
        description: What the blocklist targets.
        maintainer: Who maintains the file.
        blocks: Per-world entries, written as ``[[block]]`` tables.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str | None = None
    description: str | None = None
    maintainer: str | None = None
    blocks: Annotated[
        list[BlockEntry],
        Field(default_factory=list, alias="block", description="Per-world entries"),
    ]
