"""Console colours for profclean.

The palette ships in ``profclean/data/theme.toml``. A ``theme.toml`` in the
config directory may override any subset of its ``[colors]`` entries.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from profclean.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]


class ThemeColors(BaseModel):
    """Palette for the decision stream and CLI tables (#RGB or #RRGGBB)."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    keep: HexColor = "#69B9A1"
    delete: HexColor = "#f53263"
    skip: HexColor = "#b2bec3"
    space: HexColor = "#0e8ac8"


def get_bundled_theme_path() -> Path:
    return Path(str(resources.files("profclean.data").joinpath("theme.toml")))


def _read_colors(path: Path) -> dict[str, object]:
    """Return the ``[colors]`` table of a theme file, or {} if it is unusable."""
    try:
        with open(path, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_theme() -> ThemeColors:
    """Merge the user's colour overrides onto the bundled palette.

    An invalid merged palette falls back to the built-in defaults.
    """
    colors = _read_colors(get_bundled_theme_path())
    colors.update(_read_colors(get_user_theme_path()))
    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich styles used by the decision log and tables."""
    c = colors or load_theme()
    return Theme(
        {
            "text": c.text,
            "muted": c.muted,
            "timestamp": c.muted,
            "bold_header": f"bold {c.header}",
            "border": c.border,
            "success": c.success,
            "warning": c.warning,
            "error": f"bold {c.error}",
            "info": c.info,
            "keep": c.keep,
            "delete": f"bold {c.delete}",
            "skip": c.skip,
            "space": c.space,
        }
    )


@cache
def get_theme() -> Theme:
    """Rich theme loaded once per process."""
    return get_rich_theme()
