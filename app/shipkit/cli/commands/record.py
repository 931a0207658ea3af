"""Record command implementation.

Marks a successful build/submit in the deployment ledger. This is the
step a build pipeline runs after the external build tool succeeded: it
stamps the (version, platform, profile) slot and commits the current
critical build config as the new drift baseline.
"""

from typing import Annotated

import typer

from shipkit.cli.display import print_config_changes, print_missing_platforms, print_sync_warnings
from shipkit.core.config import require_config
from shipkit.core.drift import commit_snapshot, detect_changes
from shipkit.core.ledger import DeploymentLedger, format_date
from shipkit.core.paths import locate_project_root
from shipkit.core.version import InvalidVersionFormatError, VersionManager, parse_version_strict
from shipkit.models.deployment import Platform
from shipkit.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Record a completed deployment.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def record(
    ctx: typer.Context,
    platform: Annotated[
        Platform,
        typer.Option(
            "--platform",
            "-p",
            help="Platform that was deployed: ios or android.",
            case_sensitive=False,
        ),
    ],
    profile: Annotated[
        str,
        typer.Option(
            "--profile",
            "-P",
            help="Build profile that was deployed, e.g. preview.",
        ),
    ],
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            help="Deployed version (default: current version from app.json).",
        ),
    ] = None,
    snapshot: Annotated[
        bool,
        typer.Option(
            "--snapshot/--no-snapshot",
            help="Commit the current critical build config as the drift baseline.",
        ),
    ] = True,
) -> None:
    """Record a completed deployment in .deployments.json.

    Warns if the other platform already shipped this version and profile
    or if this exact deployment was recorded before, then records it and
    (by default) commits the current build config snapshot.

    Examples:
        shipkit record -p ios -P preview
        shipkit record -p android -P production --version 1.4.0
        shipkit record -p ios -P preview --no-snapshot
    """
    if ctx.invoked_subcommand is not None:
        return

    project_root = locate_project_root()
    config = require_config(project_root)

    if version is not None:
        try:
            target_version = str(parse_version_strict(version))
        except InvalidVersionFormatError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
    else:
        target_version = str(VersionManager(project_root).current_version())

    ledger = DeploymentLedger(project_root)
    critical_keys = config.critical_config.for_platform(platform)

    print_sync_warnings(ledger.sync_warnings(target_version, platform, profile))

    changes = detect_changes(platform, ledger, critical_keys)
    print_config_changes(platform, changes)

    try:
        timestamp = ledger.record_deployment(target_version, platform, profile)
        if snapshot:
            commit_snapshot(platform, ledger, critical_keys)
    except OSError as e:
        print_error(f"Failed to write deployment history: {e}")
        raise typer.Exit(code=1) from e

    print_success(
        f"Recorded {platform.value} {profile} for v{target_version} at {format_date(timestamp)}"
    )
    if snapshot and changes:
        print_info(f"Config snapshot updated for {platform.value}.")

    enabled = config.platforms.enabled()
    missing = [p for p in ledger.missing_platforms(target_version, profile) if p in enabled]
    print_missing_platforms(missing, profile, target_version)
