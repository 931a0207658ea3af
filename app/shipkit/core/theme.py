"""Colour theme for shipkit's terminal output.

The palette comes from the bundled data/theme.toml, merged with the
optional user file ~/.config/shipkit/theme.toml (same ``[colors]`` table,
any subset of keys). Each palette colour feeds the Rich styles used by
the status tables and the message helpers.
"""

import functools
import logging
import re
import tomllib
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from shipkit.core.paths import get_user_config_dir

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.toml"

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def _check_hex_color(value: str) -> str:
    if not _HEX_COLOR.fullmatch(value):
        msg = f"expected #RGB or #RRGGBB, got {value!r}"
        raise ValueError(msg)
    return value


HexColor = Annotated[str, AfterValidator(_check_hex_color)]


class ThemeColors(BaseModel):
    """Palette for deployment status output.

    ``deployed``, ``pending`` and ``changed`` colour the ledger slots and
    drift lines; the rest colour messages and table chrome.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    deployed: HexColor = "#03b971"
    pending: HexColor = "#f53263"
    changed: HexColor = "#0e8ac8"


def get_user_theme_path() -> Path:
    """Get the user theme override path (~/.config/shipkit/theme.toml)."""
    return get_user_config_dir() / THEME_FILENAME


def get_bundled_theme_path() -> Traversable:
    """Get the theme shipped inside the package."""
    return resources.files("shipkit.data").joinpath(THEME_FILENAME)


def _read_palette(path: Traversable) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    A missing file reads as an empty palette. Unparsable files and a
    malformed table are logged and also read as empty. Non-string
    entries are dropped.
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the palette, letting user colours override bundled ones.

    Returns:
        Merged palette, or the built-in defaults if any merged colour is
        invalid.
    """
    palette = _read_palette(get_bundled_theme_path())
    user_palette = _read_palette(get_user_theme_path())
    if user_palette:
        logger.debug("Applying %d user theme colours", len(user_palette))
    palette.update(user_palette)

    try:
        return ThemeColors.model_validate(palette)
    except ValidationError as e:
        logger.warning("Invalid theme colours, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors) -> Theme:
    """Build the Rich styles referenced by shipkit's output.

    Args:
        colors: Palette to derive the styles from.

    Returns:
        Rich Theme with message, table and deployment-slot styles.
    """
    return Theme(
        {
            # Message helpers
            "info": colors.info,
            "muted": colors.muted,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            # Status tables
            "border": colors.border,
            "bold_header": f"bold {colors.header}",
            "version.current": f"bold {colors.header}",
            "version.name": f"bold {colors.text}",
            # Ledger slots and drift
            "deployed": colors.deployed,
            "pending": colors.pending,
            "changed": colors.changed,
        }
    )


@functools.cache
def get_theme() -> Theme:
    """Get the Rich theme for the shared consoles, loaded once per process."""
    return get_rich_theme(load_theme())
