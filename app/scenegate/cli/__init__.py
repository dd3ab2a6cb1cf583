"""CLI package for scenegate.

This package contains the Typer application and all subcommands.
"""

from scenegate.cli.main import app

__all__ = ["app"]
