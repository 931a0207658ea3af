"""Data models for shipkit.

This module exports the core data structures used throughout the application.
"""

from shipkit.models.deployment import (
    UNSET,
    ConfigChange,
    DeploymentHistory,
    DeploymentRecord,
    Platform,
    PlatformConfigSnapshot,
    Profile,
    SyncWarning,
    SyncWarningKind,
    profile_key,
)
from shipkit.models.version import BumpType, SemanticVersion, VersionBumpResult

__all__ = [
    "UNSET",
    "BumpType",
    "ConfigChange",
    "DeploymentHistory",
    "DeploymentRecord",
    "Platform",
    "PlatformConfigSnapshot",
    "Profile",
    "SemanticVersion",
    "SyncWarning",
    "SyncWarningKind",
    "VersionBumpResult",
    "profile_key",
]
