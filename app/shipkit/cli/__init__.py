"""CLI package for shipkit.

This package contains the Typer application and all subcommands.
"""

from shipkit.cli.main import app

__all__ = ["app"]
