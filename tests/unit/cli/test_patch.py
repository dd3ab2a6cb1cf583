"""Unit tests for the patch command."""

import json
from pathlib import Path
from unittest.mock import patch

from scenegate.blocklist.patcher import is_patched
from scenegate.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

BLOCKLIST = """
[[block]]
world_id = "wrld_test"
game_objects = [{ name = "Ad" }]
"""


def _index_world(tmp_path: Path, data: Path) -> None:
    records = [{"id": "wrld_test", "type": "world", "path": str(data)}]
    (tmp_path / "index.json").write_text(json.dumps(records))


class TestPatchCommand:
    """Tests for `scenegate patch`."""

    def test_patches_indexed_worlds(
        self, config_file: Path, blocklist_dir: Path, tmp_path: Path, store, write_scene
    ) -> None:
        """Indexed worlds with entries are patched and the index saved."""
        (blocklist_dir / "ads.toml").write_text(BLOCKLIST)
        data = write_scene(tmp_path / "cache" / "__data", [("Ad", (0, 0, 0))])
        _index_world(tmp_path, data)

        with patch("scenegate.cli.commands.patch.require_store", return_value=store):
            result = runner.invoke(app, ["--config", str(config_file), "patch"])

        assert result.exit_code == 0
        assert "Patched 1 of 1 worlds." in result.output
        assert is_patched(data)
        saved = json.loads((tmp_path / "index.json").read_text())
        assert saved[0]["patched"] is True

    def test_dry_run_writes_nothing(
        self, config_file: Path, blocklist_dir: Path, tmp_path: Path, store, write_scene
    ) -> None:
        """--dry-run reports matches without touching files."""
        (blocklist_dir / "ads.toml").write_text(BLOCKLIST)
        data = write_scene(tmp_path / "cache" / "__data", [("Ad", (0, 0, 0))])
        _index_world(tmp_path, data)
        before = data.read_text()

        with patch("scenegate.cli.commands.patch.require_store", return_value=store):
            result = runner.invoke(app, ["--config", str(config_file), "--dry-run", "patch"])

        assert result.exit_code == 0
        assert "Patched 0 of 1 worlds." in result.output
        assert "Dry-run: matches are reported" in result.output
        assert data.read_text() == before
        assert not is_patched(data)

    def test_nothing_to_patch(self, config_file: Path, store) -> None:
        """An empty index has nothing to patch."""
        with patch("scenegate.cli.commands.patch.require_store", return_value=store):
            result = runner.invoke(app, ["--config", str(config_file), "patch"])

        assert result.exit_code == 0
        assert "No indexed worlds have blocklist entries." in result.output

    def test_missing_asset_store(self, config_file: Path) -> None:
        """Without an asset codec the command fails."""
        result = runner.invoke(app, ["--config", str(config_file), "patch"])

        assert result.exit_code == 1

    def test_local_dry_run_option(
        self, config_file: Path, blocklist_dir: Path, tmp_path: Path, store, write_scene
    ) -> None:
        """`patch --dry-run` behaves like the global option."""
        (blocklist_dir / "ads.toml").write_text(BLOCKLIST)
        data = write_scene(tmp_path / "cache" / "__data", [("Ad", (0, 0, 0))])
        _index_world(tmp_path, data)

        with patch("scenegate.cli.commands.patch.require_store", return_value=store):
            result = runner.invoke(app, ["--config", str(config_file), "patch", "--dry-run"])

        assert result.exit_code == 0
        assert not is_patched(data)
