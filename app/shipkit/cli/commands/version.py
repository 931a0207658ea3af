"""Version command implementation.

Reads, bumps and sets the app version in app.json and package.json.
"""

from typing import Annotated

import typer

from shipkit.core.config import config_exists
from shipkit.core.paths import locate_project_root
from shipkit.core.version import InvalidVersionFormatError, VersionManager
from shipkit.models.version import BumpType
from shipkit.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Manage the app version.",
    invoke_without_command=True,
)


def _get_manager(*, warn_standalone: bool = False) -> VersionManager:
    """Get a VersionManager for the enclosing project.

    Args:
        warn_standalone: Warn when the project has no shipkit.toml.
    """
    project_root = locate_project_root()
    if warn_standalone and not config_exists(project_root):
        print_warning("shipkit is not initialized. Running in standalone mode.")
    return VersionManager(project_root)


@app.callback(invoke_without_command=True)
def version(ctx: typer.Context) -> None:
    """Show or change the app version.

    Without a subcommand, prints the current version from app.json.

    Examples:
        shipkit version              # Print current version
        shipkit version bump patch   # 1.2.3 -> 1.2.4
        shipkit version set 2.0.0    # Set an explicit version
    """
    if ctx.invoked_subcommand is not None:
        return

    console.print(str(_get_manager().current_version()), highlight=False)


@app.command()
def bump(
    kind: Annotated[
        BumpType,
        typer.Argument(
            help="Bump type: patch, minor, major or none.",
            case_sensitive=False,
        ),
    ],
) -> None:
    """Bump the version in app.json and package.json."""
    result = _get_manager(warn_standalone=True).bump(kind)

    if not result.changed:
        print_info(f"Current version: {result.old_version}")
        return

    print_success(f"Version bumped: {result.old_version} → {result.new_version}")


@app.command("set")
def set_version(
    new_version: Annotated[
        str,
        typer.Argument(
            metavar="VERSION",
            help="Version to set, e.g. 1.2.3.",
        ),
    ],
) -> None:
    """Set a specific version in app.json and package.json."""
    manager = _get_manager(warn_standalone=True)

    try:
        result = manager.set_version(new_version)
    except InvalidVersionFormatError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Version set to {result}")
