"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer

from shipkit import __version__
from shipkit.cli.commands import init, record, status, version

# Create main Typer app
app = typer.Typer(
    name="shipkit",
    help="Deployment tracking and versioning for mobile app releases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shipkit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    show_version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """shipkit - Deployment tracking and versioning for mobile app releases.

    Keeps app.json and package.json versions in step, records which
    version reached which platform and profile, and flags build config
    drift that requires a clean build.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(init.app, name="init")
app.add_typer(status.app, name="status")
app.add_typer(version.app, name="version")
app.add_typer(record.app, name="record")
