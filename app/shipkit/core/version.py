"""Version engine for release numbering.

This module provides the VersionManager class, which reads the app
version from the primary manifest (app.json) and keeps both manifests
(app.json and package.json) in step on every bump or explicit set.

Reads are permissive: short versions are zero-padded and a missing
manifest reads as 0.0.0. Explicit writes through set_version() are
strict and reject anything but ``MAJOR.MINOR.PATCH``.
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

from shipkit.core.paths import get_app_json_path, get_package_json_path, resolve_project_root
from shipkit.core.project import get_expo_section
from shipkit.models.version import BumpType, SemanticVersion, VersionBumpResult
from shipkit.utils.jsonio import load_json_object, save_json

logger = logging.getLogger(__name__)

DEFAULT_VERSION = SemanticVersion(0, 0, 0)

_STRICT_VERSION = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")

VersionLike = SemanticVersion | str


class VersionError(Exception):
    """Base exception for version-related errors."""


class InvalidVersionFormatError(VersionError):
    """Raised when a version string is not exactly MAJOR.MINOR.PATCH."""


def parse_version_strict(version: str) -> SemanticVersion:
    """Parse a version string that must be exactly three numeric components.

    Args:
        version: Version string such as "1.2.3".

    Returns:
        Parsed SemanticVersion.

    Raises:
        InvalidVersionFormatError: For missing or extra components,
            non-numeric components, or surrounding garbage.
    """
    # fullmatch on the raw string: "1.2.3\n" must fail too
    if not isinstance(version, str) or not _STRICT_VERSION.fullmatch(version):
        msg = f"Invalid version format: {version}. Expected format: x.y.z"
        raise InvalidVersionFormatError(msg)
    return SemanticVersion.parse(version)


def _as_version(value: VersionLike) -> SemanticVersion:
    if isinstance(value, SemanticVersion):
        return value
    return SemanticVersion.parse(value)


def compare_versions(a: VersionLike, b: VersionLike) -> int:
    """Compare two versions component-wise.

    Missing components are treated as 0, so "1.2" equals "1.2.0".

    Returns:
        -1 if a < b, 0 if a == b, 1 if a > b.
    """
    left, right = _as_version(a), _as_version(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def is_newer_version(a: VersionLike, b: VersionLike) -> bool:
    """Check if version a is strictly greater than version b."""
    return compare_versions(a, b) > 0


class VersionManager:
    """Reads and writes the app version across both manifests.

    The primary manifest (app.json, ``expo.version``) is authoritative
    for reads. Every mutation writes both app.json and package.json
    (``version``) so the two stay identical.

    A manifest that is missing or unreadable at write time is skipped
    without raising; the computed version is still returned. Callers
    that need to know whether a write landed must re-read the files.

    Attributes:
        project_root: Directory holding app.json and package.json.
    """

    def __init__(self, project_root: Path | None = None) -> None:
        """Initialize VersionManager.

        Args:
            project_root: Project root. Default: cwd.
        """
        self.project_root = resolve_project_root(project_root)
        self._app_json_path = get_app_json_path(self.project_root)
        self._package_json_path = get_package_json_path(self.project_root)

    def current_version(self) -> SemanticVersion:
        """Get the current version from app.json.

        Returns:
            The version at ``expo.version``, zero-padded, or 0.0.0 if the
            manifest or field is absent. Never raises.
        """
        expo = get_expo_section(load_json_object(self._app_json_path))
        raw = expo.get("version")
        if raw is None:
            return DEFAULT_VERSION
        return SemanticVersion.parse(str(raw))

    def version_parts(self) -> tuple[int, int, int]:
        """Get the current version as a (major, minor, patch) tuple."""
        current = self.current_version()
        return current.major, current.minor, current.patch

    @staticmethod
    def calculate_new_version(current: VersionLike, kind: BumpType | str) -> SemanticVersion:
        """Calculate the version that follows ``current`` for a bump kind.

        Args:
            current: Starting version.
            kind: patch, minor, major or none.

        Returns:
            The bumped version.

        Raises:
            ValueError: If kind is not a valid bump type.
        """
        return _as_version(current).bump(BumpType(kind))

    def bump(self, kind: BumpType | str) -> VersionBumpResult:
        """Bump the version in both manifests.

        BumpType.NONE returns the current version unchanged and writes
        nothing.

        Args:
            kind: patch, minor, major or none.

        Returns:
            VersionBumpResult with the old and new versions.

        Raises:
            ValueError: If kind is not a valid bump type.
        """
        bump_type = BumpType(kind)
        old_version = self.current_version()

        if bump_type == BumpType.NONE:
            return VersionBumpResult(old_version=old_version, new_version=old_version)

        new_version = old_version.bump(bump_type)
        self._write_version(new_version)
        logger.debug("Bumped version %s -> %s (%s)", old_version, new_version, bump_type.value)

        return VersionBumpResult(old_version=old_version, new_version=new_version)

    def set_version(self, version: str) -> SemanticVersion:
        """Set an explicit version in both manifests.

        Args:
            version: Version string, exactly MAJOR.MINOR.PATCH.

        Returns:
            The version that was set.

        Raises:
            InvalidVersionFormatError: If the version string is malformed.
        """
        new_version = parse_version_strict(version)
        self._write_version(new_version)
        return new_version

    def _write_version(self, version: SemanticVersion) -> None:
        """Write a version to app.json and package.json, skipping unreadable ones."""
        self._update_manifest(self._app_json_path, version, _set_app_json_version)
        self._update_manifest(self._package_json_path, version, _set_package_json_version)

    def _update_manifest(
        self,
        path: Path,
        version: SemanticVersion,
        setter: Callable[[dict[str, Any], str], None],
    ) -> bool:
        """Rewrite the version field of one manifest.

        Returns:
            True if the manifest was written, False if it was skipped.
        """
        data = load_json_object(path)
        if data is None:
            logger.debug("Skipping version update for missing manifest %s", path)
            return False

        setter(data, str(version))
        try:
            save_json(path, data)
        except OSError as e:
            logger.warning("Failed to write version to %s: %s", path, e)
            return False
        return True


def _set_app_json_version(data: dict[str, Any], version: str) -> None:
    expo = data.get("expo")
    if not isinstance(expo, dict):
        expo = {}
        data["expo"] = expo
    expo["version"] = version


def _set_package_json_version(data: dict[str, Any], version: str) -> None:
    data["version"] = version
