"""Unit tests for theme module.

Tests for palette loading, validation, and Rich style generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from rich.theme import Theme
from shipkit.core.theme import (
    ThemeColors,
    _read_palette,
    get_rich_theme,
    get_theme,
    get_user_theme_path,
    load_theme,
)


@pytest.fixture
def user_theme(tmp_path: Path) -> Path:
    """Path to a user theme file inside a temporary directory."""
    return tmp_path / "theme.toml"


class TestThemeColors:
    """Tests for the ThemeColors palette."""

    def test_defaults(self) -> None:
        """Slot colours default to green, red and blue."""
        colors = ThemeColors()

        assert colors.deployed == "#03b971"
        assert colors.pending == "#f53263"
        assert colors.changed == "#0e8ac8"

    @pytest.mark.parametrize("value", ["#abc", "#A1B2C3", "  #abc  "])
    def test_valid_colors(self, value: str) -> None:
        """Short and long hex codes are accepted; whitespace is stripped."""
        assert ThemeColors(changed=value).changed == value.strip()

    @pytest.mark.parametrize("value", ["ffffff", "#ff", "#fffffff", "#gggggg", "green"])
    def test_invalid_colors(self, value: str) -> None:
        """Anything but #RGB or #RRGGBB is rejected."""
        with pytest.raises(ValidationError, match="expected #RGB or #RRGGBB"):
            ThemeColors(deployed=value)

    def test_unknown_colour_rejected(self) -> None:
        """Unknown palette keys are an error."""
        with pytest.raises(ValidationError):
            ThemeColors.model_validate({"package_manual": "#ffffff"})


class TestReadPalette:
    """Tests for reading a theme file's [colors] table."""

    def test_reads_colors(self, user_theme: Path) -> None:
        """String entries of [colors] are returned."""
        user_theme.write_text('[colors]\ndeployed = "#000000"\nmuted = 3\n')

        assert _read_palette(user_theme) == {"deployed": "#000000"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file reads as an empty palette without a warning."""
        with patch("shipkit.core.theme.logger") as mock_logger:
            assert _read_palette(tmp_path / "absent.toml") == {}

        mock_logger.warning.assert_not_called()

    def test_invalid_toml(self, user_theme: Path) -> None:
        """Unparsable files are logged and read as empty."""
        user_theme.write_text("not valid [ toml")

        with patch("shipkit.core.theme.logger") as mock_logger:
            assert _read_palette(user_theme) == {}

        mock_logger.warning.assert_called_once()

    def test_colors_not_a_table(self, user_theme: Path) -> None:
        """A scalar [colors] value is ignored."""
        user_theme.write_text('colors = "#ffffff"\n')

        assert _read_palette(user_theme) == {}


class TestLoadTheme:
    """Tests for load_theme."""

    def test_bundled_palette(self, user_theme: Path) -> None:
        """Without a user file the bundled palette is used."""
        with patch("shipkit.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors == ThemeColors()

    def test_user_override(self, user_theme: Path) -> None:
        """User colours replace only the keys they name."""
        user_theme.write_text('[colors]\npending = "#ff0000"\n')

        with patch("shipkit.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors.pending == "#ff0000"
        assert colors.deployed == "#03b971"

    def test_invalid_user_color_falls_back(self, user_theme: Path) -> None:
        """An invalid user colour falls back to the defaults."""
        user_theme.write_text('[colors]\ndeployed = "green"\n')

        with patch("shipkit.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors == ThemeColors()


class TestGetRichTheme:
    """Tests for the Rich style table."""

    def test_styles_used_by_output(self) -> None:
        """Every style referenced by the CLI output is defined."""
        theme = get_rich_theme(ThemeColors())

        assert set(theme.styles) >= {
            "info",
            "muted",
            "success",
            "warning",
            "error",
            "border",
            "bold_header",
            "version.current",
            "version.name",
            "deployed",
            "pending",
            "changed",
        }

    def test_slot_styles_follow_palette(self) -> None:
        """Slot styles take their colour from the palette."""
        theme = get_rich_theme(ThemeColors(deployed="#123456"))

        assert theme.styles["deployed"].color.name == "#123456"

    def test_get_theme_is_cached(self) -> None:
        """get_theme loads the theme once."""
        get_theme.cache_clear()

        assert get_theme() is get_theme()
        assert isinstance(get_theme(), Theme)


def test_user_theme_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """The user theme lives in the shipkit config directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_theme_path() == tmp_path / "shipkit" / "theme.toml"
