"""Project configuration for shipkit.

This module provides the configuration model and I/O functions for the
per-project shipkit.toml file, which declares the enabled platforms,
the deployment profiles and the critical config keys whose change forces
a clean build.

Example shipkit.toml::

    project_name = "MyApp"
    profiles = ["preview", "production"]

    [platforms]
    ios = true
    android = true

    [critical_config]
    android = ["minSdkVersion", "targetSdkVersion", "compileSdkVersion"]
    ios = ["deploymentTarget"]
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shipkit.core.drift import DEFAULT_CRITICAL_KEYS
from shipkit.core.paths import get_config_path
from shipkit.models.deployment import Platform

logger = logging.getLogger(__name__)

DEFAULT_PROFILES: tuple[str, ...] = ("preview", "production")


class PlatformsConfig(BaseModel):
    """Which platforms shipkit manages."""

    model_config = ConfigDict(extra="forbid")

    ios: Annotated[bool, Field(description="Track iOS deployments")] = True
    android: Annotated[bool, Field(description="Track Android deployments")] = True

    def enabled(self) -> list[Platform]:
        """Enabled platforms, iOS first."""
        return [platform for platform in Platform if getattr(self, platform.value)]


class CriticalConfig(BaseModel):
    """Critical build-config keys per platform.

    A change to any of these keys between builds means the native build
    cache is stale.
    """

    model_config = ConfigDict(extra="forbid")

    android: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_CRITICAL_KEYS[Platform.ANDROID]),
            description="Critical Android build properties",
        ),
    ]
    ios: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_CRITICAL_KEYS[Platform.IOS]),
            description="Critical iOS build properties",
        ),
    ]

    def for_platform(self, platform: Platform | str) -> list[str]:
        """Get the whitelist for a platform."""
        if Platform(platform) is Platform.IOS:
            return self.ios
        return self.android


class BuildConfig(BaseModel):
    """Build behaviour settings consumed by the build orchestrator."""

    model_config = ConfigDict(extra="forbid")

    auto_clear_cache: Annotated[
        bool,
        Field(description="Clear the build cache when critical config drifted"),
    ] = True


class DisplayConfig(BaseModel):
    """Terminal display settings."""

    model_config = ConfigDict(extra="forbid")

    banner: Annotated[str | None, Field(description="Banner shown above status output")] = None


class ShipkitConfig(BaseModel):
    """Complete shipkit project configuration.

    Attributes:
        project_name: App name used for display.
        platforms: Enabled platforms.
        profiles: Deployment profiles checked by status.
        critical_config: Critical keys per platform.
        build: Build behaviour settings.
        display: Display settings.
    """

    model_config = ConfigDict(extra="forbid")

    project_name: Annotated[str | None, Field(description="App name")] = None
    platforms: Annotated[PlatformsConfig, Field(default_factory=PlatformsConfig)]
    profiles: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_PROFILES), min_length=1),
    ]
    critical_config: Annotated[CriticalConfig, Field(default_factory=CriticalConfig)]
    build: Annotated[BuildConfig, Field(default_factory=BuildConfig)]
    display: Annotated[DisplayConfig, Field(default_factory=DisplayConfig)]

    @field_validator("profiles")
    @classmethod
    def validate_profiles(cls, v: list[str]) -> list[str]:
        """Reject empty and duplicate profile names."""
        if any(not name.strip() for name in v):
            msg = "Profile names cannot be empty"
            raise ValueError(msg)
        duplicates = {name for name in v if v.count(name) > 1}
        if duplicates:
            msg = f"Duplicate profiles: {sorted(duplicates)}"
            raise ValueError(msg)
        return v

    @property
    def effective_banner(self) -> str:
        """Banner text, derived from the project name when not configured."""
        if self.display.banner:
            return self.display.banner
        if self.project_name:
            return f"{self.project_name.upper()} DEPLOYMENT"
        return "DEPLOYMENT STATUS"


class ShipkitConfigError(Exception):
    """Base exception for shipkit configuration errors."""


class ShipkitConfigNotFoundError(ShipkitConfigError):
    """Raised when shipkit.toml is not found."""


class ShipkitConfigParseError(ShipkitConfigError):
    """Raised when shipkit.toml cannot be parsed."""


def load_config(project_root: Path | None = None) -> ShipkitConfig:
    """Load project configuration from shipkit.toml.

    Args:
        project_root: Project root. Default: cwd.

    Returns:
        Validated ShipkitConfig object.

    Raises:
        ShipkitConfigNotFoundError: If the config file doesn't exist.
        ShipkitConfigParseError: If the TOML syntax is invalid.
        ShipkitConfigError: If the content doesn't match the schema.
    """
    config_path = get_config_path(project_root)

    if not config_path.exists():
        raise ShipkitConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ShipkitConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ShipkitConfigError(f"Failed to read config: {e}") from e

    try:
        return ShipkitConfig.model_validate(data)
    except ValidationError as e:
        raise ShipkitConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(project_root: Path | None = None) -> ShipkitConfig:
    """Load shipkit.toml, or return defaults if the project has none.

    Parse and validation errors still propagate.

    Args:
        project_root: Project root. Default: cwd.

    Returns:
        Loaded or default ShipkitConfig.
    """
    try:
        return load_config(project_root)
    except ShipkitConfigNotFoundError:
        logger.debug("No shipkit.toml found, using defaults")
        return get_default_config()


def require_config(project_root: Path | None = None) -> ShipkitConfig:
    """Load project configuration or exit with a helpful error message.

    A missing shipkit.toml falls back to defaults; an unparsable or
    invalid one is reported and ends the command.

    Args:
        project_root: Project root. Default: cwd.

    Returns:
        Loaded or default ShipkitConfig.

    Raises:
        typer.Exit: If the config exists but cannot be loaded.
    """
    import typer

    from shipkit.utils.formatting import print_error, print_info

    try:
        return load_config_or_default(project_root)
    except ShipkitConfigError as e:
        print_error(f"Failed to load config: {e}")
        print_info(f"Fix or remove {get_config_path(project_root)} and try again.")
        raise typer.Exit(code=1) from e


def save_config(config: ShipkitConfig, project_root: Path | None = None) -> Path:
    """Save project configuration to shipkit.toml.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The ShipkitConfig to save.
        project_root: Project root. Default: cwd.

    Returns:
        Path where the config was saved.

    Raises:
        ShipkitConfigError: If the file cannot be written.
    """
    import os
    from tempfile import NamedTemporaryFile

    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ShipkitConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_exists(project_root: Path | None = None) -> bool:
    """Check if shipkit.toml exists in the project root."""
    return get_config_path(project_root).exists()


def _config_to_dict(config: ShipkitConfig) -> dict[str, object]:
    """Convert ShipkitConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are left out.

    Args:
        config: The ShipkitConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(exclude_none=True)


def get_default_config(
    project_name: str | None = None,
    profiles: list[str] | None = None,
) -> ShipkitConfig:
    """Create a default ShipkitConfig.

    Args:
        project_name: Optional app name.
        profiles: Profiles to track instead of the defaults (e.g. the
            build profiles declared in eas.json).

    Returns:
        ShipkitConfig with default settings.

    Raises:
        ShipkitConfigError: If the given profiles are empty, blank or
            duplicated.
    """
    if profiles is None:
        return ShipkitConfig(project_name=project_name)

    try:
        return ShipkitConfig(project_name=project_name, profiles=profiles)
    except ValidationError as e:
        reason = e.errors()[0]["msg"]
        raise ShipkitConfigError(f"Invalid profiles: {reason}") from e
