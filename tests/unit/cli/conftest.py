"""Fixtures for CLI tests."""

from pathlib import Path

import pytest
import tomli_w


@pytest.fixture
def config_file(tmp_path: Path, blocklist_dir: Path) -> Path:
    """Settings file pointing every path into tmp_path."""
    path = tmp_path / "config.toml"
    data = {
        "client_dir": str(tmp_path / "client"),
        "blocklist_dir": str(blocklist_dir),
        "index_path": str(tmp_path / "index.json"),
    }
    path.write_bytes(tomli_w.dumps(data).encode())
    return path
