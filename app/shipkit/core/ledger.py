"""Deployment ledger.

This module provides the DeploymentLedger class, which owns the
.deployments.json document: which app version was deployed to which
platform and profile, and the last committed build config per platform.

The whole document is loaded into memory when the ledger is created and
rewritten in full after every mutation. There is no locking and no
temp-file-then-rename: the ledger assumes a single writer. Two processes
mutating the same project will silently overwrite each other (last
writer wins), and a crash mid-write can leave a corrupt file, which the
next load treats as an empty history.
"""

import copy
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from shipkit.core.paths import get_deployments_path, resolve_project_root
from shipkit.core.version import VersionLike
from shipkit.models.deployment import (
    DeploymentHistory,
    DeploymentRecord,
    Platform,
    Profile,
    SyncWarning,
    SyncWarningKind,
    profile_key,
)
from shipkit.models.version import SemanticVersion
from shipkit.utils.jsonio import file_exists, load_json, save_json

logger = logging.getLogger(__name__)


def _load_history(path: Path) -> DeploymentHistory:
    """Load the ledger document, falling back to an empty history.

    Args:
        path: Path to .deployments.json.

    Returns:
        Parsed history, or an empty one if the file is missing,
        unparsable, or does not match the document schema.
    """
    data = load_json(path)
    if data is None:
        return DeploymentHistory()

    try:
        return DeploymentHistory.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring invalid deployment history %s: %s", path, e)
        return DeploymentHistory()


class DeploymentLedger:
    """Persisted record of deployments and config snapshots.

    Storage location: <project_root>/.deployments.json

    Every public mutator follows the same cycle: change the in-memory
    history, then write the full document synchronously.

    Attributes:
        project_root: Directory holding the ledger document.
    """

    def __init__(self, project_root: Path | None = None) -> None:
        """Initialize DeploymentLedger and load the current document.

        Args:
            project_root: Project root. Default: cwd.
        """
        self.project_root = resolve_project_root(project_root)
        self._history = _load_history(self.path)

    @property
    def path(self) -> Path:
        """Path to the .deployments.json file."""
        return get_deployments_path(self.project_root)

    @property
    def history(self) -> DeploymentHistory:
        """A copy of the in-memory deployment history."""
        return self._history.model_copy(deep=True)

    def exists(self) -> bool:
        """Check whether the ledger document is present on disk."""
        return file_exists(self.path)

    def initialize(self) -> None:
        """Overwrite (or create) the ledger with an empty history.

        This is destructive: any recorded deployments and snapshots are
        lost. Callers should check exists() first.
        """
        self._history = DeploymentHistory()
        self._save()

    def get_version_status(self, version: VersionLike) -> DeploymentRecord:
        """Get the deployment record for a version.

        Args:
            version: App version.

        Returns:
            A copy of the tracked record, or a fresh all-null record if
            the version has never been deployed.
        """
        record = self._history.versions.get(str(version))
        if record is None:
            return DeploymentRecord()
        return record.model_copy(deep=True)

    def record_deployment(
        self,
        version: VersionLike,
        platform: Platform | str,
        profile: Profile | str,
    ) -> str:
        """Stamp a (version, platform, profile) slot with the current time.

        Creates the version's record if it does not exist yet, then
        persists the full document.

        Args:
            version: Deployed app version.
            platform: Platform that was deployed.
            profile: Build profile that was deployed.

        Returns:
            The ISO-8601 timestamp that was recorded.

        Raises:
            ValueError: If platform is not ios or android. The history is
                left untouched.
        """
        # A version key only exists once one of its slots is stamped
        target = Platform(platform)
        profile_name = profile_key(profile)
        version_key = str(version)

        record = self._history.versions.setdefault(version_key, DeploymentRecord())
        timestamp = datetime.now(UTC).isoformat()
        record.for_platform(target)[profile_name] = timestamp
        self._save()

        logger.debug(
            "Recorded deployment %s %s %s at %s",
            version_key,
            target.value,
            profile_name,
            timestamp,
        )
        return timestamp

    def get_config_snapshot(self, platform: Platform | str) -> dict[str, Any]:
        """Get the last committed config snapshot for a platform.

        Returns:
            A copy of the snapshot, or an empty dict.
        """
        return copy.deepcopy(self._history.last_config.for_platform(platform))

    def set_config_snapshot(self, platform: Platform | str, snapshot: dict[str, Any]) -> None:
        """Replace a platform's config snapshot and persist.

        Args:
            platform: Platform whose snapshot is replaced.
            snapshot: New key -> value snapshot.
        """
        if Platform(platform) is Platform.IOS:
            self._history.last_config.ios = dict(snapshot)
        else:
            self._history.last_config.android = dict(snapshot)
        self._save()

    def list_versions(self) -> list[str]:
        """List all tracked versions, newest first.

        Ordering is numeric per component ("10.0.0" sorts above
        "2.0.0"), not lexicographic.

        Returns:
            Version strings in descending order.
        """
        # sorted() is stable, so equal versions ("1.0" vs "1.0.0") keep insertion order
        return sorted(self._history.versions, key=SemanticVersion.parse, reverse=True)

    def missing_platforms(self, version: VersionLike, profile: Profile | str) -> list[Platform]:
        """Get platforms that lag behind their sibling for a (version, profile).

        A platform is missing only when the other platform has deployed
        this (version, profile) and it has not. A version with no
        deployments at all reports nothing missing.

        Returns:
            Lagging platforms, iOS first.
        """
        status = self.get_version_status(version)
        return [
            platform
            for platform in (Platform.IOS, Platform.ANDROID)
            if not status.is_deployed(platform, profile)
            and status.is_deployed(platform.sibling, profile)
        ]

    def sync_warnings(
        self,
        version: VersionLike,
        platform: Platform | str,
        profile: Profile | str,
    ) -> list[SyncWarning]:
        """Check a planned deployment against what was already shipped.

        Two independent warnings may be produced:

        - the sibling platform already deployed this (version, profile)
          while this platform has not;
        - this exact (version, platform, profile) was already deployed.

        Args:
            version: Version about to be deployed.
            platform: Platform about to be deployed.
            profile: Profile about to be deployed.

        Returns:
            Warnings in the order listed above.
        """
        this_platform = Platform(platform)
        other_platform = this_platform.sibling
        profile_name = profile_key(profile)
        status = self.get_version_status(version)

        other_deployed_at = status.deployed_at(other_platform, profile_name)
        this_deployed_at = status.deployed_at(this_platform, profile_name)

        warnings: list[SyncWarning] = []

        if other_deployed_at and not this_deployed_at:
            warnings.append(
                SyncWarning(
                    message=(
                        f"{other_platform.value} {profile_name} was deployed on "
                        f"{format_date(other_deployed_at)}"
                    ),
                    platform=other_platform,
                    profile=profile_name,
                    kind=SyncWarningKind.SIBLING_DEPLOYED,
                )
            )

        if this_deployed_at:
            warnings.append(
                SyncWarning(
                    message=(
                        f"{this_platform.value} {profile_name} already deployed on "
                        f"{format_date(this_deployed_at)}"
                    ),
                    platform=this_platform,
                    profile=profile_name,
                    kind=SyncWarningKind.ALREADY_DEPLOYED,
                )
            )

        return warnings

    def _save(self) -> None:
        """Write the full in-memory history to disk."""
        save_json(self.path, self._history.to_document())


def format_date(timestamp: str | None) -> str:
    """Format an ISO-8601 deployment timestamp for display.

    Args:
        timestamp: ISO-8601 string or None.

    Returns:
        "Not deployed" for None, the local date and time for a valid
        timestamp, or the raw string if it cannot be parsed.
    """
    if not timestamp:
        return "Not deployed"
    try:
        parsed = datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
