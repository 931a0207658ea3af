"""Config drift detection between builds.

This module compares the critical native build settings currently in the
project (the expo-build-properties plugin entry of app.json) with the
snapshot the deployment ledger recorded after the last successful build.
Any difference means the build cache should be cleared.

Only whitelisted "critical" keys are compared, so unrelated settings
never trigger a clean build and the check costs O(len(critical_keys)).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from shipkit.core.project import get_build_properties
from shipkit.models.deployment import UNSET, ConfigChange, Platform

if TYPE_CHECKING:
    from shipkit.core.ledger import DeploymentLedger

logger = logging.getLogger(__name__)

DEFAULT_CRITICAL_KEYS: dict[Platform, tuple[str, ...]] = {
    Platform.ANDROID: ("minSdkVersion", "targetSdkVersion", "compileSdkVersion"),
    Platform.IOS: ("deploymentTarget",),
}

# Distinguishes "key absent" from a stored JSON null
_MISSING = object()


def resolve_critical_keys(
    platform: Platform | str,
    critical_keys: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Get the critical-key whitelist for a platform.

    Args:
        platform: Target platform.
        critical_keys: Explicit whitelist, or None for the platform default.

    Returns:
        Whitelist in comparison order.
    """
    if critical_keys is None:
        return DEFAULT_CRITICAL_KEYS[Platform(platform)]
    return tuple(critical_keys)


@dataclass(frozen=True, slots=True)
class DriftResult:
    """Result of comparing a platform's config against its snapshot.

    Attributes:
        platform: Platform that was checked.
        changes: Differing keys, in whitelist order.
    """

    platform: Platform
    changes: tuple[ConfigChange, ...]

    @property
    def has_changes(self) -> bool:
        """Check if any critical key changed since the last snapshot."""
        return bool(self.changes)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "platform": self.platform.value,
            "changed": self.has_changes,
            "changes": [change.to_dict() for change in self.changes],
        }


def read_current_config(
    platform: Platform | str,
    critical_keys: Sequence[str] | None = None,
    project_root: Path | None = None,
) -> dict[str, Any]:
    """Read the whitelisted build settings currently configured for a platform.

    Keys missing from the project config are omitted from the result,
    not mapped to None.

    Args:
        platform: Target platform.
        critical_keys: Whitelist of keys, or None for the platform default.
        project_root: Project root. Default: cwd.

    Returns:
        Mapping of critical key to its configured value.
    """
    target = Platform(platform)
    platform_config = get_build_properties(project_root)[target]

    return {
        key: platform_config[key]
        for key in resolve_critical_keys(target, critical_keys)
        if key in platform_config
    }


def compare_config(
    current: dict[str, Any],
    snapshot: dict[str, Any],
    critical_keys: Sequence[str],
) -> list[ConfigChange]:
    """Compare two config maps over a whitelist of keys.

    A key counts as changed when its values differ or when it is present
    on one side only. Absent sides are reported as "unset".

    Args:
        current: Current project config.
        snapshot: Last committed snapshot.
        critical_keys: Keys to compare, in output order.

    Returns:
        One ConfigChange per differing key.
    """
    changes: list[ConfigChange] = []

    for key in critical_keys:
        now = current.get(key, _MISSING)
        before = snapshot.get(key, _MISSING)

        if _differs(before, now):
            changes.append(
                ConfigChange(
                    key=key,
                    from_value=UNSET if before is _MISSING else before,
                    to_value=UNSET if now is _MISSING else now,
                )
            )

    return changes


def _differs(before: Any, now: Any) -> bool:
    if before is _MISSING or now is _MISSING:
        return before is not now
    # bool is an int subclass; True must not equal 1
    if isinstance(before, bool) != isinstance(now, bool):
        return True
    return bool(before != now)


def detect_changes(
    platform: Platform | str,
    ledger: DeploymentLedger,
    critical_keys: Sequence[str] | None = None,
    project_root: Path | None = None,
) -> list[ConfigChange]:
    """Detect critical config changes since the last committed snapshot.

    Args:
        platform: Target platform.
        ledger: Ledger holding the snapshot baseline.
        critical_keys: Whitelist of keys, or None for the platform default.
        project_root: Project root. Default: the ledger's project root.

    Returns:
        Changes in whitelist order; empty when nothing drifted.
    """
    target = Platform(platform)
    keys = resolve_critical_keys(target, critical_keys)
    root = project_root if project_root is not None else ledger.project_root

    current = read_current_config(target, keys, root)
    snapshot = ledger.get_config_snapshot(target)
    changes = compare_config(current, snapshot, keys)

    if changes:
        logger.debug(
            "Config drift for %s: %s",
            target.value,
            ", ".join(change.key for change in changes),
        )
    return changes


def check_drift(
    platform: Platform | str,
    ledger: DeploymentLedger,
    critical_keys: Sequence[str] | None = None,
    project_root: Path | None = None,
) -> DriftResult:
    """Detect changes and wrap them in a DriftResult."""
    target = Platform(platform)
    changes = detect_changes(target, ledger, critical_keys, project_root)
    return DriftResult(platform=target, changes=tuple(changes))


def has_changed(
    platform: Platform | str,
    ledger: DeploymentLedger,
    critical_keys: Sequence[str] | None = None,
    project_root: Path | None = None,
) -> bool:
    """Check if any critical config key changed since the last snapshot."""
    return len(detect_changes(platform, ledger, critical_keys, project_root)) > 0


def commit_snapshot(
    platform: Platform | str,
    ledger: DeploymentLedger,
    critical_keys: Sequence[str] | None = None,
    project_root: Path | None = None,
) -> dict[str, Any]:
    """Record the current critical config as the new drift baseline.

    This is the only write path into the ledger's config snapshot and is
    meant to run after a build succeeded.

    Args:
        platform: Target platform.
        ledger: Ledger that stores the snapshot.
        critical_keys: Whitelist of keys, or None for the platform default.
        project_root: Project root. Default: the ledger's project root.

    Returns:
        The snapshot that was committed.
    """
    target = Platform(platform)
    root = project_root if project_root is not None else ledger.project_root

    snapshot = read_current_config(target, critical_keys, root)
    ledger.set_config_snapshot(target, snapshot)
    return snapshot
