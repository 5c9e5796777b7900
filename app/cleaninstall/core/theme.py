"""Console color theme.

Colors come from the bundled ``data/theme.toml``. Any key of the
``[colors]`` table in the user's ``theme.toml`` replaces the bundled
value; invalid user colors are dropped one by one so a single typo does
not discard the rest of the override file.
"""

import functools
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated, cast

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from cleaninstall.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)


def _check_hex(value: str) -> str:
    color = value.strip()
    if not color.startswith("#"):
        msg = "color must start with '#'"
        raise ValueError(msg)
    digits = color[1:]
    if len(digits) not in (3, 6):
        msg = "color must be #RGB or #RRGGBB format"
        raise ValueError(msg)
    try:
        int(digits, 16)
    except ValueError:
        msg = f"invalid hex color '{color}'"
        raise ValueError(msg) from None
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) behind every console style."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # Removal report
    path: HexColor = "#faf870"
    size: HexColor = "#c1ff62"


# Rich style name -> (ThemeColors field, style prefix)
STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold "),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold "),
    "info": ("info", ""),
    "path": ("path", ""),
    "size": ("size", "bold "),
}


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped in ``cleaninstall.data``."""
    return resources.files("cleaninstall.data").joinpath("theme.toml")  # type: ignore[return-value]


def read_theme_file(path: Path) -> dict[str, str]:
    """Read the string entries of the ``[colors]`` table of a theme file.

    Args:
        path: TOML file to read.

    Returns:
        Color name to value mapping. Empty if the file is missing,
        unreadable, malformed or has no usable ``[colors]`` table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors: object = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return {}
    return {
        name: value
        for name, value in cast(dict[str, object], colors).items()
        if isinstance(value, str)
    }


def _valid_overrides(overrides: dict[str, str], path: Path) -> dict[str, str]:
    """Keep the overrides that name a known color and hold a valid value."""
    valid: dict[str, str] = {}
    for name, value in overrides.items():
        try:
            checked = ThemeColors.model_validate({name: value})
        except ValidationError as e:
            logger.warning("Ignoring color %r in %s: %s", name, path, e.errors()[0]["msg"])
            continue
        valid[name] = getattr(checked, name)
    return valid


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled colors with the user's overrides applied.

    Args:
        user_path: Override file. Defaults to the XDG user theme path.

    Returns:
        The merged ThemeColors.
    """
    bundled_path = Path(get_bundled_theme_path())
    try:
        colors = ThemeColors.model_validate(read_theme_file(bundled_path))
    except ValidationError as e:
        logger.error("Bundled theme %s is invalid, using defaults: %s", bundled_path, e)
        colors = ThemeColors()

    user_path = user_path or get_user_theme_path()
    overrides = _valid_overrides(read_theme_file(user_path), user_path)
    if overrides:
        logger.debug("Applying %d color override(s) from %s", len(overrides), user_path)
    return colors.model_copy(update=overrides)


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for ``colors`` (loaded when omitted)."""
    colors = colors or load_theme()
    return Theme(
        {name: f"{prefix}{getattr(colors, field)}" for name, (field, prefix) in STYLES.items()}
    )


@functools.cache
def get_theme() -> Theme:
    """Rich theme shared by the console instances, loaded once."""
    return get_rich_theme()
