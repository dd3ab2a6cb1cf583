"""Shared helpers for CLI commands.

Loading settings and the asset codec is the same for every command, as
is turning their errors into a clean exit.
"""

from pathlib import Path

import typer

from scenegate.assets.store import AssetStore
from scenegate.core.config import Settings, SettingsError, load_asset_store, load_settings
from scenegate.utils.formatting import print_error


def require_settings(ctx: typer.Context) -> Settings:
    """Load settings from the path given to the global ``--config`` option.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    obj = ctx.find_root().obj or {}
    config_path: Path | None = obj.get("config_path")
    try:
        settings = load_settings(config_path)
    except SettingsError as e:
        print_error(f"Failed to load settings: {e}")
        raise typer.Exit(code=1) from e
    if obj.get("dry_run"):
        settings = settings.model_copy(update={"dry_run": True})
    return settings


def require_store(settings: Settings) -> AssetStore:
    """Instantiate the configured asset codec.

    Raises:
        typer.Exit: If the codec cannot be loaded.
    """
    try:
        store = load_asset_store(settings.asset_store)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if not isinstance(store, AssetStore):
        print_error(f"{settings.asset_store} does not provide load_bundle()")
        raise typer.Exit(code=1)
    return store
