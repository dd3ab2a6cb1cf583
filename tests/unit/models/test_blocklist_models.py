"""Unit tests for the blocklist definition models."""

import pytest
from pydantic import ValidationError
from scenegate.models.blocklist import (
    BlocklistModel,
    GameObjectInstance,
    GameObjectPosition,
)


class TestGameObjectInstance:
    """Tests for structural equality and hashing."""

    def test_equal_instances_hash_equal(self) -> None:
        """Identical name, position and parent compare and hash equal."""
        a = GameObjectInstance(
            name="Sign",
            position=GameObjectPosition(x=1, y=2, z=3),
            parent=GameObjectInstance(name="Lobby"),
        )
        b = GameObjectInstance(
            name="Sign",
            position=GameObjectPosition(x=1.0, y=2.0, z=3.0),
            parent=GameObjectInstance(name="Lobby"),
        )

        assert a == b
        assert len({a, b}) == 1

    def test_different_parent_is_distinct(self) -> None:
        """Objects differing only in parent are different entries."""
        a = GameObjectInstance(name="Sign", parent=GameObjectInstance(name="Lobby"))
        b = GameObjectInstance(name="Sign", parent=GameObjectInstance(name="Hall"))

        assert a != b
        assert len({a, b}) == 2

    def test_name_only(self) -> None:
        """is_name_only holds only without position and parent."""
        assert GameObjectInstance(name="Sign").is_name_only is True
        assert GameObjectInstance(
            name="Sign", position=GameObjectPosition(x=0, y=0, z=0)
        ).is_name_only is False

    def test_frozen(self) -> None:
        """Instances are immutable so their hash cannot change."""
        obj = GameObjectInstance(name="Sign")

        with pytest.raises(ValidationError):
            obj.name = "Other"  # type: ignore[misc]

    def test_empty_name_rejected(self) -> None:
        """A name is required and may not be empty."""
        with pytest.raises(ValidationError):
            GameObjectInstance(name="")


class TestBlocklistModel:
    """Tests for parsing a whole definition file."""

    def test_parses_block_tables(self) -> None:
        """[[block]] tables populate blocks, nested parents included."""
        data = {
            "title": "Ads",
            "maintainer": "someone",
            "block": [
                {
                    "friendly_name": "Plaza",
                    "world_id": "wrld_1",
                    "game_objects": [
                        {"name": "Board"},
                        {
                            "name": "Sign",
                            "position": {"x": 0.1, "y": 0, "z": -2},
                            "parent": {"name": "Lobby", "parent": {"name": "Root"}},
                        },
                    ],
                }
            ],
        }

        model = BlocklistModel.model_validate(data)

        assert model.title == "Ads"
        assert len(model.blocks) == 1
        sign = model.blocks[0].game_objects[1]
        assert sign.position == GameObjectPosition(x=0.1, y=0.0, z=-2.0)
        assert sign.parent is not None
        assert sign.parent.parent == GameObjectInstance(name="Root")

    def test_empty_file_is_valid(self) -> None:
        """A file with no blocks is valid."""
        assert BlocklistModel.model_validate({}).blocks == []

    def test_world_id_required(self) -> None:
        """A block without world_id is invalid."""
        with pytest.raises(ValidationError):
            BlocklistModel.model_validate({"block": [{"game_objects": [{"name": "A"}]}]})

    def test_position_requires_all_axes(self) -> None:
        """x, y and z are all required."""
        with pytest.raises(ValidationError):
            GameObjectPosition.model_validate({"x": 1, "y": 2})
