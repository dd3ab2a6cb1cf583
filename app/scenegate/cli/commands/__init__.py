"""CLI commands for scenegate.

This package contains all subcommand implementations.
"""

from scenegate.cli.commands import blocklist, config, index, patch, run

__all__ = ["blocklist", "config", "index", "patch", "run"]
