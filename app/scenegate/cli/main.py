"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from scenegate import __version__
from scenegate.cli.commands import blocklist, config, index, patch, run
from scenegate.utils.formatting import configure_logging

app = typer.Typer(
    name="scenegate",
    help="Disable blocklisted objects in downloaded VR worlds.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"scenegate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/scenegate/config.toml).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Match and log, but never modify asset files.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log warnings and errors.",
        ),
    ] = False,
) -> None:
    """scenegate - blocklist patcher for downloaded VR worlds.

    Watches the client's content cache and disables maintainer-listed
    scene objects in each world once it is safe to rewrite the file.
    """
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["dry_run"] = dry_run


app.command(name="run")(run.run)
app.command(name="patch")(patch.patch)
app.add_typer(blocklist.app, name="blocklist")
app.add_typer(index.app, name="index")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
