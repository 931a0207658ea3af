"""Status command implementation.

Shows where the current (and previous) app versions were deployed,
which platforms lag behind, and whether critical build config drifted
since the last recorded build.
"""

import json
from typing import Annotated

import typer

from shipkit.cli.display import (
    create_version_status_table,
    print_config_changes,
    print_missing_platforms,
)
from shipkit.core.config import ShipkitConfig, config_exists, require_config
from shipkit.core.drift import check_drift, detect_changes
from shipkit.core.ledger import DeploymentLedger
from shipkit.core.paths import get_config_path, locate_project_root
from shipkit.core.version import VersionManager, compare_versions
from shipkit.utils.formatting import console, print_banner, print_error, print_info, print_muted

app = typer.Typer(
    help="Show deployment status.",
    invoke_without_command=True,
)

# Previous versions shown without --all
PREVIOUS_VERSIONS_LIMIT = 3


def _status_to_dict(
    config: ShipkitConfig,
    ledger: DeploymentLedger,
    current_version: str,
    version: str | None,
) -> dict[str, object]:
    """Build the JSON status document.

    Args:
        config: Project configuration.
        ledger: Loaded deployment ledger.
        current_version: Version in app.json.
        version: Restrict output to this version, if given.

    Returns:
        Dictionary ready for JSON serialization.
    """
    versions = [version] if version else ledger.list_versions()
    history = ledger.history

    return {
        "current_version": current_version,
        "versions": {v: ledger.get_version_status(v).model_dump() for v in versions},
        "last_config": history.last_config.model_dump(),
        "drift": [
            check_drift(platform, ledger, config.critical_config.for_platform(platform)).to_dict()
            for platform in config.platforms.enabled()
        ],
    }


@app.callback(invoke_without_command=True)
def status(
    ctx: typer.Context,
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            help="Show status for a specific version.",
        ),
    ] = None,
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Show all previous versions.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show deployment status for the current version.

    Lists the deployment time per platform and profile, warns about
    platforms that lag behind their sibling, and reports critical build
    config that changed since the last recorded build.

    Examples:
        shipkit status                   # Current version + 3 previous
        shipkit status --all             # All tracked versions
        shipkit status --version 1.2.0   # A single version
        shipkit status --json            # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    project_root = locate_project_root()
    if not config_exists(project_root):
        config_path = get_config_path(project_root)
        print_error(f"shipkit is not initialized in this project: {config_path} not found")
        print_info("Run 'shipkit init' first.")
        raise typer.Exit(code=1)

    config = require_config(project_root)
    ledger = DeploymentLedger(project_root)
    current_version = str(VersionManager(project_root).current_version())
    platforms = config.platforms.enabled()

    if json_output:
        console.print_json(json.dumps(_status_to_dict(config, ledger, current_version, version)))
        return

    print_banner(config.effective_banner)

    if version:
        is_current = compare_versions(version, current_version) == 0
        console.print(
            create_version_status_table(
                version,
                ledger.get_version_status(version),
                config.profiles,
                platforms,
                is_current=is_current,
            )
        )
        return

    print_info(f"Current version: {current_version}")
    console.print(
        create_version_status_table(
            current_version,
            ledger.get_version_status(current_version),
            config.profiles,
            platforms,
            is_current=True,
        )
    )

    for profile in config.profiles:
        missing = [p for p in ledger.missing_platforms(current_version, profile) if p in platforms]
        print_missing_platforms(missing, profile, current_version)

    for platform in platforms:
        changes = detect_changes(platform, ledger, config.critical_config.for_platform(platform))
        print_config_changes(platform, changes)

    previous = [v for v in ledger.list_versions() if compare_versions(v, current_version) != 0]
    shown = previous if show_all else previous[:PREVIOUS_VERSIONS_LIMIT]

    if shown:
        console.print()
        print_muted("Previous versions:")
        for previous_version in shown:
            console.print(
                create_version_status_table(
                    previous_version,
                    ledger.get_version_status(previous_version),
                    config.profiles,
                    platforms,
                )
            )

    hidden = len(previous) - len(shown)
    if hidden > 0:
        print_muted(f"... and {hidden} more. Use --all to see all versions.")
