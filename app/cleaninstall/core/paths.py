"""XDG-compliant path management for cleaninstall.

XDG default:
- Config: ~/.config/cleaninstall/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "cleaninstall"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/cleaninstall/ (or XDG_CONFIG_HOME/cleaninstall/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_theme_path() -> Path:
    """Get the user theme override file path.

    Returns:
        Path to ~/.config/cleaninstall/theme.toml.
    """
    return get_config_dir() / "theme.toml"
