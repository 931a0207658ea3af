"""Unit tests for shipkit.toml handling."""

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from pydantic import ValidationError
from shipkit.core.config import (
    ShipkitConfig,
    ShipkitConfigError,
    ShipkitConfigNotFoundError,
    ShipkitConfigParseError,
    config_exists,
    get_default_config,
    load_config,
    load_config_or_default,
    require_config,
    save_config,
)
from shipkit.models.deployment import Platform


class TestShipkitConfig:
    """Tests for the ShipkitConfig model."""

    def test_defaults(self) -> None:
        """Defaults track both platforms and two profiles."""
        config = ShipkitConfig()

        assert config.profiles == ["preview", "production"]
        assert config.platforms.enabled() == [Platform.IOS, Platform.ANDROID]
        assert config.critical_config.for_platform(Platform.IOS) == ["deploymentTarget"]
        assert config.critical_config.for_platform("android") == [
            "minSdkVersion",
            "targetSdkVersion",
            "compileSdkVersion",
        ]
        assert config.build.auto_clear_cache is True

    def test_disabled_platform(self) -> None:
        """Disabled platforms are left out of enabled()."""
        config = ShipkitConfig.model_validate({"platforms": {"android": False}})

        assert config.platforms.enabled() == [Platform.IOS]

    def test_rejects_empty_profiles(self) -> None:
        """At least one profile is required."""
        with pytest.raises(ValidationError):
            ShipkitConfig(profiles=[])

    def test_rejects_duplicate_profiles(self) -> None:
        """Duplicate profiles are rejected."""
        with pytest.raises(ValidationError, match="Duplicate profiles"):
            ShipkitConfig(profiles=["preview", "preview"])

    def test_rejects_blank_profile(self) -> None:
        """Blank profile names are rejected."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            ShipkitConfig(profiles=["preview", " "])

    def test_rejects_unknown_keys(self) -> None:
        """Unknown top-level keys are an error."""
        with pytest.raises(ValidationError):
            ShipkitConfig.model_validate({"unknown": 1})

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"display": {"banner": "SHIP IT"}}, "SHIP IT"),
            ({"project_name": "MyApp"}, "MYAPP DEPLOYMENT"),
            ({}, "DEPLOYMENT STATUS"),
        ],
    )
    def test_effective_banner(self, data: dict, expected: str) -> None:
        """The banner falls back to the project name, then a generic title."""
        assert ShipkitConfig.model_validate(data).effective_banner == expected


class TestLoadConfig:
    """Tests for load_config and load_config_or_default."""

    def test_missing(self, tmp_path: Path) -> None:
        """A missing file raises ShipkitConfigNotFoundError."""
        with pytest.raises(ShipkitConfigNotFoundError):
            load_config(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ShipkitConfigParseError."""
        (tmp_path / "shipkit.toml").write_text("profiles = [")

        with pytest.raises(ShipkitConfigParseError):
            load_config(tmp_path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ShipkitConfigError."""
        (tmp_path / "shipkit.toml").write_text("profiles = []\n")

        with pytest.raises(ShipkitConfigError, match="Invalid config content"):
            load_config(tmp_path)

    def test_valid(self, tmp_path: Path) -> None:
        """A valid file is parsed into ShipkitConfig."""
        (tmp_path / "shipkit.toml").write_text(
            'project_name = "MyApp"\n'
            'profiles = ["preview", "staging", "production"]\n'
            "\n"
            "[critical_config]\n"
            'ios = ["deploymentTarget", "useFrameworks"]\n'
        )

        config = load_config(tmp_path)

        assert config.project_name == "MyApp"
        assert config.profiles == ["preview", "staging", "production"]
        assert config.critical_config.ios == ["deploymentTarget", "useFrameworks"]
        assert config.critical_config.android == [
            "minSdkVersion",
            "targetSdkVersion",
            "compileSdkVersion",
        ]

    def test_or_default_when_missing(self, tmp_path: Path) -> None:
        """load_config_or_default returns defaults for a missing file."""
        assert load_config_or_default(tmp_path) == get_default_config()

    def test_or_default_still_raises_on_parse_error(self, tmp_path: Path) -> None:
        """Parse errors are not masked by the default fallback."""
        (tmp_path / "shipkit.toml").write_text("= nope")

        with pytest.raises(ShipkitConfigParseError):
            load_config_or_default(tmp_path)


class TestRequireConfig:
    """Tests for require_config."""

    def test_missing_returns_default(self, tmp_path: Path) -> None:
        """A missing file falls back to defaults."""
        assert require_config(tmp_path).profiles == ["preview", "production"]

    def test_invalid_exits(self, tmp_path: Path) -> None:
        """An invalid file ends the command with exit code 1."""
        (tmp_path / "shipkit.toml").write_text("profiles = [")

        with (
            patch("shipkit.utils.formatting.print_error") as mock_error,
            pytest.raises(typer.Exit) as exc_info,
        ):
            require_config(tmp_path)

        assert exc_info.value.exit_code == 1
        mock_error.assert_called_once()


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """A saved config loads back unchanged."""
        config = ShipkitConfig(project_name="MyApp", profiles=["preview", "staging"])

        path = save_config(config, tmp_path)

        assert path == tmp_path / "shipkit.toml"
        assert load_config(tmp_path) == config

    def test_none_values_omitted(self, tmp_path: Path) -> None:
        """TOML has no null, so unset values are not written."""
        save_config(get_default_config(), tmp_path)

        data = tomllib.loads((tmp_path / "shipkit.toml").read_text())
        assert "project_name" not in data
        assert "banner" not in data["display"]

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """The temporary file is renamed into place."""
        save_config(get_default_config(), tmp_path)

        assert [p.name for p in tmp_path.iterdir()] == ["shipkit.toml"]

    def test_write_failure(self, tmp_path: Path) -> None:
        """An OSError during replace is wrapped and the temp file removed."""
        with (
            patch("os.replace", side_effect=OSError("disk full")),
            pytest.raises(ShipkitConfigError, match="Failed to write config"),
        ):
            save_config(get_default_config(), tmp_path)

        assert list(tmp_path.iterdir()) == []

    def test_config_exists(self, tmp_path: Path) -> None:
        """config_exists reflects the file on disk."""
        assert config_exists(tmp_path) is False

        save_config(get_default_config(), tmp_path)

        assert config_exists(tmp_path) is True


class TestDefaultConfig:
    """Tests for get_default_config."""

    def test_custom_profiles(self) -> None:
        """Given profiles replace the defaults."""
        config = get_default_config("Rocket", ["development", "preview"])

        assert config.project_name == "Rocket"
        assert config.profiles == ["development", "preview"]

    @pytest.mark.parametrize("profiles", [["", "preview"], ["preview", "preview"], []])
    def test_invalid_profiles_rejected(self, profiles: list[str]) -> None:
        """Profiles are validated like those loaded from shipkit.toml."""
        with pytest.raises(ShipkitConfigError, match="Invalid profiles"):
            get_default_config("Rocket", profiles)
