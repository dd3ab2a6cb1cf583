"""Run command: the long-running background patcher."""

from typing import Annotated

import typer

from scenegate.cli.types import require_settings, require_store
from scenegate.live.service import Service
from scenegate.utils.formatting import print_info


def run(
    ctx: typer.Context,
    scan: Annotated[
        bool,
        typer.Option(
            "--scan/--no-scan",
            help="Index and patch existing content before watching.",
        ),
    ] = True,
) -> None:
    """Watch for new worlds and patch them until interrupted.

    Examples:
        scenegate run
        scenegate --dry-run run --no-scan
    """
    settings = require_settings(ctx)
    store = require_store(settings)

    service = Service(settings, store)
    service.start(scan=scan)
    print_info("Watching for new content. Press Ctrl-C to stop.")
    try:
        service.wait()
    except KeyboardInterrupt:
        print_info("Stopping...")
    finally:
        service.stop()
