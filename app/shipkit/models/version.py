"""Semantic version model.

This module defines the immutable version triple used for release
numbering, together with the bump kinds that move it forward.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_NUMERIC_COMPONENT = re.compile(r"[0-9]+")


class BumpType(str, Enum):
    """Kind of version bump.

    Attributes:
        PATCH: (M, m, p) -> (M, m, p+1)
        MINOR: (M, m, p) -> (M, m+1, 0)
        MAJOR: (M, m, p) -> (M+1, 0, 0)
        NONE: Version left unchanged.
    """

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    NONE = "none"


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    """A fully specified major.minor.patch version.

    Ordering is component-wise numeric over (major, minor, patch), so
    ``SemanticVersion(2, 0, 0) < SemanticVersion(10, 0, 0)``.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        """Validate that all components are non-negative."""
        if min(self.major, self.minor, self.patch) < 0:
            msg = f"Version components must be non-negative: {self.major}.{self.minor}.{self.patch}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Leniently parse a version string.

        Missing components are padded with 0 and components that are not
        plain non-negative integers read as 0. Components past the third
        are ignored. Never raises.

        Args:
            text: Version string such as "1.2.3", "1.2" or "2".

        Returns:
            SemanticVersion instance.
        """
        parts = str(text).strip().split(".")
        numbers = [int(p) if _NUMERIC_COMPONENT.fullmatch(p) else 0 for p in parts[:3]]
        numbers.extend([0] * (3 - len(numbers)))
        return cls(*numbers)

    def bump(self, kind: BumpType) -> SemanticVersion:
        """Return the version that follows this one for the given bump kind.

        Args:
            kind: Kind of bump to apply.

        Returns:
            New SemanticVersion (self for BumpType.NONE).
        """
        if kind == BumpType.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if kind == BumpType.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        if kind == BumpType.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        return self


@dataclass(frozen=True, slots=True)
class VersionBumpResult:
    """Outcome of a bump: the version before and after.

    Attributes:
        old_version: Version read from the primary manifest.
        new_version: Computed version (equal to old_version for NONE).
    """

    old_version: SemanticVersion
    new_version: SemanticVersion

    @property
    def changed(self) -> bool:
        """Whether the bump produced a different version."""
        return self.old_version != self.new_version
