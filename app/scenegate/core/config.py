"""Runtime settings for scenegate.

This module provides the settings model and I/O functions for the
background patcher. Settings are stored in ~/.config/scenegate/config.toml;
every field has a default, so a missing file is not an error.
"""

import importlib
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scenegate.core.paths import (
    get_blocklist_dir,
    get_default_client_dir,
    get_index_path,
    get_settings_path,
)


class Settings(BaseModel):
    """Configuration for the background patcher.

    Attributes:
        client_dir: The VR client's data directory.
        content_root: Directory tree watched for new content. Defaults to
            the client's cache directory.
        log_dir: Directory holding the client's log files. Defaults to
            ``client_dir``.
        blocklist_dir: Directory of blocklist definition files.
        index_path: Where the content index is persisted.
        dry_run: Match and log, but never write asset files.
        asset_store: ``module:attribute`` of the asset codec factory.
        persist_interval_seconds: Interval between index flushes.
        retry_delay_seconds: Back-off between reads of an incomplete file.
        gate_timeout_seconds: Longest wait for a world load to finish
            before giving up on a live patch (None waits forever).
        max_workers: Parse tasks allowed to run at once.
    """

    model_config = ConfigDict(extra="forbid")

    client_dir: Annotated[
        Path,
        Field(default_factory=get_default_client_dir, description="Client data directory"),
    ]
    content_root: Annotated[Path | None, Field(description="Content cache root")] = None
    log_dir: Annotated[Path | None, Field(description="Client log directory")] = None
    blocklist_dir: Annotated[
        Path,
        Field(default_factory=get_blocklist_dir, description="Blocklist directory"),
    ]
    index_path: Annotated[
        Path,
        Field(default_factory=get_index_path, description="Content index file"),
    ]
    dry_run: Annotated[bool, Field(description="Never write asset files")] = False
    asset_store: Annotated[
        str | None,
        Field(description="Asset codec factory as 'module:attribute'"),
    ] = None
    persist_interval_seconds: Annotated[
        float,
        Field(ge=1, description="Seconds between index flushes"),
    ] = 300.0
    retry_delay_seconds: Annotated[
        float,
        Field(gt=0, description="Back-off for incomplete files"),
    ] = 0.5
    gate_timeout_seconds: Annotated[
        float | None,
        Field(gt=0, description="Longest wait for a world load (None = forever)"),
    ] = 600.0
    max_workers: Annotated[int, Field(ge=1, le=64, description="Concurrent parse tasks")] = 4

    @property
    def effective_content_root(self) -> Path:
        """Content root, falling back to the client's cache directory."""
        if self.content_root is not None:
            return self.content_root
        return self.client_dir / "Cache-WindowsPlayer"

    @property
    def effective_log_dir(self) -> Path:
        """Log directory, falling back to the client directory."""
        if self.log_dir is not None:
            return self.log_dir
        return self.client_dir


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object. Defaults if the file does not exist.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to a dictionary suitable for TOML serialization.

    TOML has no null, so unset optional fields are left out.

    Args:
        settings: The Settings object to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    data = settings.model_dump(mode="json")
    return {key: value for key, value in data.items() if value is not None}


def load_asset_store(reference: str | None) -> Any:
    """Instantiate the asset codec named by the ``asset_store`` setting.

    Args:
        reference: Factory reference in ``module:attribute`` form.

    Returns:
        Whatever the factory returns; expected to satisfy AssetStore.

    Raises:
        SettingsError: If the reference is malformed or cannot be imported.
    """
    if not reference:
        raise SettingsError("No asset_store configured; set it in config.toml")

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise SettingsError(f"asset_store must look like 'module:attribute', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SettingsError(f"Cannot import asset store module {module_name!r}: {e}") from e

    try:
        factory = getattr(module, attribute)
    except AttributeError as e:
        raise SettingsError(f"Module {module_name!r} has no attribute {attribute!r}") from e

    return factory()
