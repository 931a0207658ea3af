"""Shared Rich display functions for deployment status.

Provides reusable table builders and warning printers used by the
status and record commands.
"""

from collections.abc import Sequence

from rich.markup import escape
from rich.table import Table

from shipkit.core.ledger import format_date
from shipkit.models.deployment import ConfigChange, DeploymentRecord, Platform, SyncWarning
from shipkit.utils.formatting import console, print_warning

PLATFORM_LABELS: dict[Platform, str] = {
    Platform.IOS: "iOS",
    Platform.ANDROID: "Android",
}


def create_version_status_table(
    version: str,
    record: DeploymentRecord,
    profiles: Sequence[str],
    platforms: Sequence[Platform] = (Platform.IOS, Platform.ANDROID),
    is_current: bool = False,
) -> Table:
    """Create a Rich table showing where a version was deployed.

    One row per platform, one column per profile. Deployed slots show a
    check mark and the deployment time, others a cross.

    Args:
        version: App version being shown.
        record: Deployment record for the version.
        profiles: Profiles to show as columns.
        platforms: Platforms to show as rows.
        is_current: Whether this is the version in app.json.

    Returns:
        Rich Table configured for status display.
    """
    title = f"v{version} (current)" if is_current else f"v{version}"

    table = Table(
        title=title,
        title_style="version.current" if is_current else "version.name",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Platform", no_wrap=True)
    for profile in profiles:
        table.add_column(profile.capitalize())

    for platform in platforms:
        cells = [f"[info]{PLATFORM_LABELS[platform]}[/]"]
        for profile in profiles:
            deployed_at = record.deployed_at(platform, profile)
            if deployed_at:
                cells.append(f"[deployed]✓[/] {format_date(deployed_at)}")
            else:
                cells.append(f"[pending]✗[/] [muted]{format_date(None)}[/]")
        table.add_row(*cells)

    return table


def print_missing_platforms(missing: Sequence[Platform], profile: str, version: str) -> None:
    """Warn about platforms lagging behind their sibling for a profile."""
    for platform in missing:
        print_warning(f"{platform.value} {profile} not yet deployed for v{version}")


def print_sync_warnings(warnings: Sequence[SyncWarning]) -> None:
    """Print sync warnings raised before recording a deployment."""
    for warning in warnings:
        print_warning(warning.message)


def print_config_changes(platform: Platform, changes: Sequence[ConfigChange]) -> None:
    """Print critical config changes for a platform.

    Args:
        platform: Platform the changes belong to.
        changes: Changes in whitelist order.
    """
    if not changes:
        return

    print_warning(f"Config changes detected for {platform.value}:")
    for change in changes:
        before = escape(str(change.from_value))
        after = escape(str(change.to_value))
        console.print(
            f"   [changed]•[/] {change.key}: [muted]{before}[/] → [changed]{after}[/]"
        )
