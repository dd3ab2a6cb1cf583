"""Patch command: re-apply blocklists to indexed worlds."""

from typing import Annotated

import typer
from rich.table import Table

from scenegate.blocklist.compiler import BlocklistRegistry
from scenegate.blocklist.patcher import BlocklistPatcher, PatchResult
from scenegate.cli.types import require_settings, require_store
from scenegate.core.index import ContentIndex, ContentIndexError
from scenegate.live.indexer import Indexer
from scenegate.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def patch(
    ctx: typer.Context,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Only report matches, write nothing."),
    ] = False,
) -> None:
    """Apply the current blocklists to every indexed world.

    Worlds that already have a backup file are left alone. Worlds in
    which nothing matched have no backup and are checked again each run.
    """
    settings = require_settings(ctx)
    if dry_run:
        settings = settings.model_copy(update={"dry_run": True})
    store = require_store(settings)
    if settings.dry_run:
        print_warning("Dry-run: matches are reported, no files are modified.")

    index = ContentIndex(settings.index_path)
    try:
        index.load()
    except ContentIndexError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    registry = BlocklistRegistry(settings.blocklist_dir)
    registry.reload()
    indexer = Indexer(store, index, registry, BlocklistPatcher(store, dry_run=settings.dry_run))

    results = indexer.patch_all()
    if not results:
        print_info("No indexed worlds have blocklist entries.")
        return

    _print_results(results)

    if not settings.dry_run:
        try:
            index.save()
        except ContentIndexError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    written = sum(1 for result in results if result.written)
    print_success(f"Patched {written} of {len(results)} worlds.")


def _print_results(results: list[PatchResult]) -> None:
    table = Table(title="Patch Results")
    table.add_column("File", style="muted", overflow="fold")
    table.add_column("Outcome", style="info")
    table.add_column("Disabled", justify="right")

    for result in results:
        if result.skipped:
            outcome = "already patched"
        elif result.dry_run:
            outcome = "dry-run"
        elif result.written:
            outcome = "patched"
        else:
            outcome = "no matches"
        table.add_row(result.path, outcome, str(len(result.disabled)))

    console.print(table)
