"""Init command implementation.

Creates shipkit.toml and an empty deployment ledger in the project root.
"""

from typing import Annotated

import typer

from shipkit.core.config import (
    ShipkitConfigError,
    config_exists,
    get_default_config,
    save_config,
)
from shipkit.core.ledger import DeploymentLedger
from shipkit.core.paths import locate_project_root
from shipkit.core.project import get_available_profiles, get_project_name, is_expo_project
from shipkit.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Initialize shipkit in the current project.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    project_name: Annotated[
        str | None,
        typer.Option(
            "--project-name",
            "-n",
            help="App name for display (default: expo.name from app.json).",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config and reset the deployment history.",
        ),
    ] = False,
) -> None:
    """Initialize shipkit in the current project.

    Writes shipkit.toml with default settings and creates an empty
    .deployments.json. An existing deployment history is never reset
    unless --force is given.

    Examples:
        shipkit init                  # Initialize with defaults
        shipkit init -n MyApp         # Set the display name
        shipkit init --force          # Reset config and history
    """
    if ctx.invoked_subcommand is not None:
        return

    project_root = locate_project_root()
    if not is_expo_project(project_root):
        print_warning("No app.json with an 'expo' section found in this directory.")

    ledger = DeploymentLedger(project_root)
    if (config_exists(project_root) or ledger.exists()) and not force:
        print_error("shipkit is already initialized in this project.")
        print_info("Use --force to overwrite the config and reset the deployment history.")
        raise typer.Exit(code=1)

    name = project_name or get_project_name(project_root)
    profiles = get_available_profiles(project_root)
    try:
        config = get_default_config(name, profiles or None)
    except ShipkitConfigError as e:
        print_warning(f"Ignoring eas.json build profiles: {e}")
        config = get_default_config(name)

    try:
        config_path = save_config(config, project_root)
    except ShipkitConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    try:
        ledger.initialize()
    except OSError as e:
        print_error(f"Failed to write deployment history: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {config_path}")
    print_success(f"Deployment history created at {ledger.path}")
    print_info(f"Tracking profiles: {', '.join(config.profiles)}")
