"""Package manager detection and installation.

The detected package manager only matters for the optional install
step that follows a cleanup; cleaning itself is manager-agnostic.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Protocol

from cleaninstall.utils.shell import command_exists, run_interactive

logger = logging.getLogger(__name__)


class PackageManager(str, Enum):
    """Supported Node.js package managers."""

    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"

    @property
    def install_command(self) -> list[str]:
        """Canonical install invocation, e.g. ``["pnpm", "install"]``."""
        return [self.value, "install"]


# Lockfile probes in priority order
LOCKFILE_PROBES: tuple[tuple[str, PackageManager], ...] = (
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("package-lock.json", PackageManager.NPM),
)


def detect_package_manager(root: Path) -> PackageManager:
    """Detect the package manager of a project from its lockfile.

    Must run before cleaning, since the lockfiles are removal targets.

    Args:
        root: Project root directory.

    Returns:
        The first manager whose lockfile exists, npm if none does.
    """
    for lockfile, manager in LOCKFILE_PROBES:
        if (root / lockfile).is_file():
            logger.debug("Detected %s from %s", manager.value, lockfile)
            return manager
    return PackageManager.NPM


class Installer(Protocol):
    """Capability that runs an install command and reports its exit code."""

    def run(self, command: str, args: list[str], cwd: Path) -> int:
        """Run ``command args`` in ``cwd`` and return the exit code."""
        ...


class SubprocessInstaller:
    """Installer running the command as a child process on the user's terminal."""

    def run(self, command: str, args: list[str], cwd: Path) -> int:
        """Run the command, inheriting stdin, stdout and stderr.

        Raises:
            FileNotFoundError: If ``command`` is not on the PATH.
            OSError: If the command cannot be executed.
        """
        if not command_exists(command):
            msg = f"Command not found: {command}"
            raise FileNotFoundError(msg)
        return run_interactive([command, *args], cwd=str(cwd))
