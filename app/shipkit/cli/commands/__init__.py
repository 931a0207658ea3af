"""CLI commands for shipkit.

This package contains all subcommand implementations.
"""

from shipkit.cli.commands import init, record, status, version

__all__ = ["init", "record", "status", "version"]
