"""Pytest configuration and shared fixtures.

The asset codec is an external plugin, so tests use a small fake whose
"bundles" are JSON scene files. Positions are narrowed to single
precision on load, as they would be in a real asset.
"""

import json
import struct
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest
from scenegate.assets.store import AssetStoreError, IncompleteAssetError
from scenegate.models.content import ContentType


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class FakeTransform:
    """Transform component of a FakeObject."""

    def __init__(self, owner: "FakeObject", position: tuple[float, float, float]) -> None:
        self._owner = owner
        self._position = (_f32(position[0]), _f32(position[1]), _f32(position[2]))
        self._father: FakeTransform | None = None

    @property
    def local_position(self) -> tuple[float, float, float]:
        return self._position

    def father(self) -> "FakeTransform | None":
        return self._father

    def game_object(self) -> "FakeObject":
        return self._owner


class FakeObject:
    """Scene object; scene files give it one transform, tests may add more."""

    def __init__(
        self, name: str, active: bool = True, position: tuple[float, float, float] | None = None
    ) -> None:
        self.name = name
        self.active = active
        self._transforms: list[FakeTransform] = []
        if position is not None:
            self.add_transform(position)

    @property
    def transform(self) -> FakeTransform:
        return self._transforms[0]

    def add_transform(
        self, position: tuple[float, float, float], father: FakeTransform | None = None
    ) -> FakeTransform:
        transform = FakeTransform(self, position)
        transform._father = father
        self._transforms.append(transform)
        return transform

    def transforms(self) -> Iterable[FakeTransform]:
        return list(self._transforms)


class FakeBundle:
    """Bundle loaded from a JSON scene file."""

    def __init__(self, data: dict[str, Any], fail_write: bool = False) -> None:
        self._data = data
        self._fail_write = fail_write
        self.content_id: str | None = data.get("id")
        type_value = data.get("type")
        self.content_type = ContentType(type_value) if type_value in ("world", "avatar") else None
        self.objects: list[FakeObject] = []
        for entry in data.get("objects", []):
            self.objects.append(
                FakeObject(entry["name"], entry.get("active", True), tuple(entry["position"]))
            )
        for obj, entry in zip(self.objects, data.get("objects", []), strict=True):
            parent = entry.get("parent")
            if parent is not None:
                obj.transform._father = self.objects[parent].transform
        self.closed = False

    def game_objects(self) -> list[FakeObject]:
        return list(self.objects)

    def set_active(self, obj: FakeObject, active: bool) -> None:
        obj.active = active

    def write(self, path: Path) -> None:
        data = dict(self._data)
        data["objects"] = [
            {**entry, "active": obj.active}
            for entry, obj in zip(self._data.get("objects", []), self.objects, strict=True)
        ]
        payload = json.dumps(data, sort_keys=True)
        if self._fail_write:
            path.write_text(payload[: len(payload) // 2], encoding="utf-8")
            raise AssetStoreError(f"disk full while writing {path}")
        path.write_text(payload, encoding="utf-8")

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeBundle":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class FakeStore:
    """AssetStore over JSON scene files.

    Attributes:
        incomplete_reads: Number of upcoming loads that fail as incomplete.
        loads: Paths passed to load_bundle, in order.
        fail_writes: Bundles write half a file, then raise AssetStoreError.
    """

    def __init__(self) -> None:
        self.incomplete_reads = 0
        self.loads: list[Path] = []
        self.opened: list[FakeBundle] = []
        self.fail_writes = False

    def load_bundle(self, path: Path) -> FakeBundle:
        self.loads.append(Path(path))
        if self.incomplete_reads > 0:
            self.incomplete_reads -= 1
            raise IncompleteAssetError(f"unexpected end of stream in {path}")
        bundle = FakeBundle(
            json.loads(Path(path).read_text(encoding="utf-8")), fail_write=self.fail_writes
        )
        self.opened.append(bundle)
        return bundle


@pytest.fixture
def store() -> FakeStore:
    """A fresh fake asset store."""
    return FakeStore()


SceneWriter = Callable[..., Path]


@pytest.fixture
def write_scene() -> SceneWriter:
    """Factory writing a JSON scene file.

    Objects are ``(name, position)``, ``(name, position, parent_index)`` or
    ``(name, position, parent_index, active)`` tuples.
    """

    def _write(
        path: Path,
        objects: list[tuple[Any, ...]],
        content_id: str | None = "wrld_test",
        content_type: str = "world",
    ) -> Path:
        entries = []
        for entry in objects:
            name, position = entry[0], entry[1]
            entries.append(
                {
                    "name": name,
                    "position": list(position),
                    "parent": entry[2] if len(entry) > 2 else None,
                    "active": entry[3] if len(entry) > 3 else True,
                }
            )
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {"id": content_id, "type": content_type, "objects": entries}
        path.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def blocklist_dir(tmp_path: Path) -> Path:
    """An empty blocklist directory."""
    path = tmp_path / "blocklists"
    path.mkdir()
    return path


@pytest.fixture
def scene_object() -> type[FakeObject]:
    """Scene object class, for objects built without a scene file."""
    return FakeObject
