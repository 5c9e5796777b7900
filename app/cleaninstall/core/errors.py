"""Exception hierarchy for cleaninstall."""

from pathlib import Path


class CleanInstallError(Exception):
    """Base exception for all cleaninstall errors."""


class ConfigSourceError(CleanInstallError):
    """Raised when a configuration source cannot be read or parsed.

    Recovered by the configuration assembler: the source is skipped.

    Attributes:
        path: The offending configuration file.
    """

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class PatternError(CleanInstallError):
    """Raised when a glob pattern cannot be resolved against a directory."""


class CleanupError(CleanInstallError):
    """Raised when a run cannot continue (e.g. the root is inaccessible)."""
