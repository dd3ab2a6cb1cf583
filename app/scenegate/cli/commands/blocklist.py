"""Blocklist inspection commands."""

from typing import Annotated

import typer
from rich.table import Table

from scenegate.blocklist.compiler import BlocklistRegistry
from scenegate.cli.types import require_settings
from scenegate.models.blocklist import GameObjectInstance
from scenegate.utils.formatting import console, print_info

app = typer.Typer(
    help="Inspect the compiled blocklist.",
    no_args_is_help=True,
)


def _load_registry(ctx: typer.Context) -> BlocklistRegistry:
    settings = require_settings(ctx)
    registry = BlocklistRegistry(settings.blocklist_dir)
    registry.reload()
    return registry


@app.command(name="list")
def list_worlds(ctx: typer.Context) -> None:
    """List every world with blocklisted objects."""
    compiled = _load_registry(ctx).snapshot()
    if not compiled:
        print_info("No blocklist entries found.")
        return

    table = Table(title="Compiled Blocklist")
    table.add_column("World", style="info", no_wrap=True)
    table.add_column("Objects", justify="right")

    for world_id in sorted(compiled):
        table.add_row(world_id, str(len(compiled[world_id])))
    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    world_id: Annotated[str, typer.Argument(help="World identity (wrld_...).")],
) -> None:
    """Show the objects blocked in one world."""
    targets = _load_registry(ctx).targets_for(world_id)
    if not targets:
        print_info(f"No blocklist entries for {world_id}.")
        raise typer.Exit(code=1)

    table = Table(title=world_id)
    table.add_column("Name", style="info")
    table.add_column("Position", style="muted")
    table.add_column("Parent", style="muted")

    for target in sorted(targets, key=lambda t: t.name):
        table.add_row(target.name, _format_position(target), _format_parent(target))
    console.print(table)


def _format_position(target: GameObjectInstance) -> str:
    if target.position is None:
        return "-"
    return f"({target.position.x:g}, {target.position.y:g}, {target.position.z:g})"


def _format_parent(target: GameObjectInstance) -> str:
    names: list[str] = []
    parent = target.parent
    while parent is not None:
        names.append(parent.name)
        parent = parent.parent
    return " < ".join(names) if names else "-"
