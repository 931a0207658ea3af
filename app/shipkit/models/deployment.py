"""Deployment ledger models.

This module defines the persisted deployment history document and the
transient values computed from it (sync warnings and config changes).

The persisted document looks like::

    {
      "versions": {
        "1.2.0": {
          "ios": {"preview": "2026-01-26T14:30:00+00:00", "production": null},
          "android": {"preview": null, "production": null}
        }
      },
      "lastConfig": {"ios": {"deploymentTarget": "15.1"}, "android": {}}
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

# Sentinel reported for a config key that is absent on one side of a comparison
UNSET = "unset"


class Platform(str, Enum):
    """Store-submission target tracked by the ledger."""

    IOS = "ios"
    ANDROID = "android"

    @property
    def sibling(self) -> Platform:
        """The other platform."""
        return Platform.ANDROID if self is Platform.IOS else Platform.IOS


class Profile(str, Enum):
    """Named build variant with its own deployment history per platform."""

    DEVELOPMENT = "development"
    PREVIEW = "preview"
    STAGING = "staging"
    PRODUCTION = "production"


# Profile name -> ISO-8601 deployment timestamp (None = never deployed)
ProfileTimestamps = dict[str, str | None]


def _empty_profile_timestamps() -> ProfileTimestamps:
    return {Profile.PREVIEW.value: None, Profile.PRODUCTION.value: None}


class DeploymentRecord(BaseModel):
    """Per-platform deployment timestamps for a single app version.

    Attributes:
        ios: Profile -> timestamp map for iOS.
        android: Profile -> timestamp map for Android.
    """

    model_config = ConfigDict(extra="forbid")

    ios: Annotated[
        ProfileTimestamps,
        Field(default_factory=_empty_profile_timestamps, description="iOS deployments"),
    ]
    android: Annotated[
        ProfileTimestamps,
        Field(default_factory=_empty_profile_timestamps, description="Android deployments"),
    ]

    def for_platform(self, platform: Platform | str) -> ProfileTimestamps:
        """Get the mutable profile map for a platform."""
        if Platform(platform) is Platform.IOS:
            return self.ios
        return self.android

    def deployed_at(self, platform: Platform | str, profile: Profile | str) -> str | None:
        """Get the deployment timestamp for a (platform, profile) slot.

        Returns:
            ISO-8601 timestamp, or None if never deployed.
        """
        return self.for_platform(platform).get(profile_key(profile))

    def is_deployed(self, platform: Platform | str, profile: Profile | str) -> bool:
        """Check whether a (platform, profile) slot has a timestamp."""
        return bool(self.deployed_at(platform, profile))


class PlatformConfigSnapshot(BaseModel):
    """Last build-relevant configuration recorded per platform."""

    model_config = ConfigDict(extra="forbid")

    ios: Annotated[dict[str, Any], Field(default_factory=dict)]
    android: Annotated[dict[str, Any], Field(default_factory=dict)]

    def for_platform(self, platform: Platform | str) -> dict[str, Any]:
        """Get the snapshot for a platform."""
        if Platform(platform) is Platform.IOS:
            return self.ios
        return self.android


class DeploymentHistory(BaseModel):
    """Root of the persisted deployment ledger document.

    Unknown top-level keys are ignored on load and dropped on the next
    write.

    Attributes:
        versions: Version string -> deployment record.
        last_config: Config snapshot per platform (``lastConfig`` on disk).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    versions: Annotated[
        dict[str, DeploymentRecord],
        Field(default_factory=dict, description="Deployments per version"),
    ]
    last_config: Annotated[
        PlatformConfigSnapshot,
        Field(
            default_factory=PlatformConfigSnapshot,
            alias="lastConfig",
            description="Last committed config snapshot per platform",
        ),
    ]

    def to_document(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON structure."""
        return self.model_dump(mode="json", by_alias=True)


class SyncWarningKind(str, Enum):
    """Reason a sync warning was raised.

    Attributes:
        SIBLING_DEPLOYED: The other platform shipped this (version, profile)
            but this platform has not.
        ALREADY_DEPLOYED: This exact (version, platform, profile) slot was
            deployed before.
    """

    SIBLING_DEPLOYED = "sibling_deployed"
    ALREADY_DEPLOYED = "already_deployed"


@dataclass(frozen=True, slots=True)
class SyncWarning:
    """Warning about platform deployment drift for a version.

    Attributes:
        message: Human-readable description.
        platform: Platform the warning refers to.
        profile: Profile the warning refers to.
        kind: Why the warning was raised.
    """

    message: str
    platform: Platform
    profile: str
    kind: SyncWarningKind


@dataclass(frozen=True, slots=True)
class ConfigChange:
    """A single critical-key difference between snapshot and project config.

    Absent values are reported as the ``"unset"`` sentinel.

    Attributes:
        key: Critical config key.
        from_value: Value in the last committed snapshot.
        to_value: Value in the current project configuration.
    """

    key: str
    from_value: Any
    to_value: Any

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"key": self.key, "from": self.from_value, "to": self.to_value}


def profile_key(profile: Profile | str) -> str:
    """Normalize a profile to the string key used in the ledger document."""
    return profile.value if isinstance(profile, Profile) else str(profile)
