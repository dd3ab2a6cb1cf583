"""Content index inspection commands."""

import typer
from rich.table import Table

from scenegate.cli.types import require_settings
from scenegate.core.index import ContentIndex, ContentIndexError
from scenegate.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Inspect the content index.",
    no_args_is_help=True,
)


@app.command(name="list")
def list_content(ctx: typer.Context) -> None:
    """List indexed content and its patch state."""
    settings = require_settings(ctx)
    index = ContentIndex(settings.index_path)
    try:
        index.load()
    except ContentIndexError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    records = sorted(index.records(), key=lambda r: (r.type.value, r.id))
    if not records:
        print_info("The content index is empty.")
        return

    table = Table(title="Content Index")
    table.add_column("ID", style="info", no_wrap=True)
    table.add_column("Type")
    table.add_column("Patched", justify="center")
    table.add_column("Path", style="muted", overflow="fold")

    for record in records:
        patched = "[success]yes[/]" if record.patched else "[muted]no[/]"
        table.add_row(record.id, record.type.value, patched, record.path)
    console.print(table)
    console.print(f"\n[muted]{len(records)} items[/muted]")
