"""Settings commands."""

from pathlib import Path
from typing import Annotated

import typer

from scenegate.cli.types import require_settings
from scenegate.core.config import Settings, SettingsError, save_settings
from scenegate.core.paths import get_settings_path
from scenegate.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show or create the settings file.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective settings."""
    settings = require_settings(ctx)
    for key, value in settings.model_dump(mode="json").items():
        console.print(f"[header]{key}[/] = {value}")
    console.print(f"[header]effective content_root[/] = {settings.effective_content_root}")
    console.print(f"[header]effective log_dir[/] = {settings.effective_log_dir}")


@app.command()
def init(
    ctx: typer.Context,
    asset_store: Annotated[
        str | None,
        typer.Option("--asset-store", help="Asset codec factory as 'module:attribute'."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    obj = ctx.find_root().obj or {}
    path: Path = obj.get("config_path") or get_settings_path()
    if path.exists() and not force:
        print_error(f"{path} already exists (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(Settings(asset_store=asset_store), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Wrote {saved}")
