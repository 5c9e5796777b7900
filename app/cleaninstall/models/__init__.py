"""Data models for cleaninstall.

This package contains the configuration value shared across a run and
the result types produced while cleaning.
"""

from cleaninstall.models.config import (
    DEFAULT_CONFIG,
    VCS_DIR,
    CleanConfig,
    ConfigOverrides,
    ConfigSection,
)
from cleaninstall.models.result import CleanResult, RemovalOutcome

__all__ = [
    "DEFAULT_CONFIG",
    "VCS_DIR",
    "CleanConfig",
    "CleanResult",
    "ConfigOverrides",
    "ConfigSection",
    "RemovalOutcome",
]
