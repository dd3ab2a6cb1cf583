"""Unit tests for ContentIndex."""

import json
import logging
import threading
from pathlib import Path

import pytest
from scenegate.core.index import ContentIndex, ContentIndexError
from scenegate.models.content import ContentRecord, ContentType


def _world(content_id: str = "wrld_a", path: str = "/cache/a/__data") -> ContentRecord:
    return ContentRecord(id=content_id, type=ContentType.WORLD, path=path)


class TestContentIndex:
    """Tests for adding and querying records."""

    def test_add_new_record(self, tmp_path: Path) -> None:
        """add() reports a new id."""
        index = ContentIndex(tmp_path / "index.json")

        assert index.add(_world()) is True
        assert len(index) == 1
        assert "wrld_a" in index

    def test_add_same_id_replaces(self, tmp_path: Path) -> None:
        """A re-discovered id replaces the earlier record."""
        index = ContentIndex(tmp_path / "index.json")
        index.add(_world(path="/cache/old/__data"))

        assert index.add(_world(path="/cache/new/__data")) is False
        assert len(index) == 1
        record = index.get("wrld_a")
        assert record is not None
        assert record.path == "/cache/new/__data"

    def test_worlds_filters_avatars(self, tmp_path: Path) -> None:
        """worlds() yields only World records."""
        index = ContentIndex(tmp_path / "index.json")
        index.add(_world())
        index.add(ContentRecord(id="avtr_b", type=ContentType.AVATAR, path="/cache/b/__data"))

        assert [r.id for r in index.worlds()] == ["wrld_a"]

    def test_mark_patched(self, tmp_path: Path) -> None:
        """mark_patched updates the record in place."""
        index = ContentIndex(tmp_path / "index.json")
        record = _world()
        index.add(record)

        index.mark_patched("wrld_a", ["Ad Board"])

        assert record.patched is True
        assert record.disabled_objects == ["Ad Board"]
        assert record.patched_at is not None

    def test_mark_patched_unknown_id_is_ignored(self, tmp_path: Path) -> None:
        """Marking an unindexed id does nothing."""
        index = ContentIndex(tmp_path / "index.json")

        index.mark_patched("wrld_missing", [])

        assert len(index) == 0

    def test_concurrent_adds(self, tmp_path: Path) -> None:
        """Records added from many threads are all kept."""
        index = ContentIndex(tmp_path / "index.json")

        def add_many(offset: int) -> None:
            for i in range(100):
                index.add(_world(f"wrld_{offset}_{i}"))

        threads = [threading.Thread(target=add_many, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(index) == 400


class TestContentIndexPersistence:
    """Tests for save() and load()."""

    def test_save_and_load(self, tmp_path: Path) -> None:
        """A saved index loads back with patch state intact."""
        path = tmp_path / "state" / "index.json"
        index = ContentIndex(path)
        index.add(_world())
        index.mark_patched("wrld_a", ["Sign"])
        index.save()

        restored = ContentIndex(path)
        assert restored.load() == 1
        record = restored.get("wrld_a")
        assert record is not None
        assert record.patched is True
        assert record.disabled_objects == ["Sign"]

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """A missing index file means an empty index."""
        assert ContentIndex(tmp_path / "absent.json").load() == 0

    def test_load_skips_corrupt_records(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Corrupt records are skipped with a warning."""
        path = tmp_path / "index.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "wrld_a", "type": "world", "path": "/a"},
                    {"id": "x", "type": "spaceship", "path": "/b"},
                    {"type": "world"},
                ]
            )
        )
        index = ContentIndex(path)

        with caplog.at_level(logging.WARNING):
            assert index.load() == 1

        assert "Skipping corrupt index record" in caplog.text

    def test_load_rejects_non_list(self, tmp_path: Path) -> None:
        """An index file that is not a list is an error."""
        path = tmp_path / "index.json"
        path.write_text('{"id": "wrld_a"}')

        with pytest.raises(ContentIndexError, match="not a list"):
            ContentIndex(path).load()

    def test_load_rejects_invalid_json(self, tmp_path: Path) -> None:
        """Unreadable JSON is an error."""
        path = tmp_path / "index.json"
        path.write_text("[{")

        with pytest.raises(ContentIndexError, match="Failed to read index"):
            ContentIndex(path).load()
