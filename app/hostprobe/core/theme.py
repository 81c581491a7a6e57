"""Console color theme.

Colors come from the bundled data/theme.toml. Any subset of them can be
overridden in ~/.config/hostprobe/theme.toml; an override file that cannot
be read or validated is logged and ignored.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from importlib.resources.abc import Traversable

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from hostprobe.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) for the console styles."""

    model_config = ConfigDict(extra="forbid")

    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    size: str = "#0ec1c8"
    path: str = "#ffffff"
    usage_low: str = "#03b971"
    usage_medium: str = "#faf870"
    usage_high: str = "#f53263"

    @field_validator("*")
    @classmethod
    def check_hex(cls, v: str) -> str:
        digits = v.removeprefix("#")
        if digits == v or len(digits) not in (3, 6) or not set(digits) <= _HEX_DIGITS:
            msg = f"invalid hex color {v!r}, expected #RGB or #RRGGBB"
            raise ValueError(msg)
        return v


def _read_colors(path: Traversable) -> dict[str, object]:
    """Return the [colors] table of a theme file, or {} if there is none."""
    try:
        with path.open("rb") as f:
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
    """Load bundled colors merged with the user's overrides."""
    bundled = _read_colors(resources.files("hostprobe.data").joinpath("theme.toml"))
    user_path = get_user_theme_path()
    try:
        return ThemeColors.model_validate({**bundled, **_read_colors(user_path)})
    except ValidationError as e:
        logger.warning("Invalid colors in %s, using bundled theme: %s", user_path, e)
        return ThemeColors.model_validate(bundled)


def build_theme(colors: ThemeColors) -> Theme:
    """Map colors onto the style names used by the CLI."""
    return Theme(
        {
            "muted": colors.muted,
            "dim": colors.muted,
            "border": colors.border,
            "bold_header": f"bold {colors.header}",
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "size": f"bold {colors.size}",
            "path": colors.path,
            "usage_low": colors.usage_low,
            "usage_medium": colors.usage_medium,
            "usage_high": f"bold {colors.usage_high}",
        }
    )


@cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return build_theme(load_theme())
