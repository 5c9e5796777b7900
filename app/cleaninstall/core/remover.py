"""Removal of a single file or directory tree.

Handles measurement, dry-run reporting, interactive confirmation and
best-effort deletion of one filesystem entry. A failed removal is
reported and counted as "not deleted"; it never aborts the run.
"""

import logging
import os
import shutil
from pathlib import Path

from cleaninstall.core.confirm import Confirmer, confirm
from cleaninstall.models.config import CleanConfig
from cleaninstall.models.result import RemovalOutcome
from cleaninstall.utils.formatting import console, format_size, print_error

logger = logging.getLogger(__name__)


def _exists(path: Path) -> bool:
    """Check existence without following a final symlink."""
    return path.exists() or path.is_symlink()


def _is_real_dir(path: Path) -> bool:
    """Directories, but not symlinks to directories."""
    return path.is_dir() and not path.is_symlink()


def measure_path(path: Path) -> tuple[int, int]:
    """Measure the size and file count of a filesystem entry.

    Directories are walked recursively without following symlinks.
    Symlinks and files count as a single entry of their own size.

    Args:
        path: Entry to measure.

    Returns:
        Tuple of (size in bytes, number of files).

    Raises:
        OSError: If the entry itself cannot be stat'ed.
    """
    if not _is_real_dir(path):
        return path.lstat().st_size, 1

    total_size = 0
    file_count = 0
    for dirpath, dirnames, filenames in os.walk(path):
        # Symlinked directories are listed but not walked; count the link itself
        names = filenames + [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
        for name in names:
            try:
                total_size += os.lstat(os.path.join(dirpath, name)).st_size
            except FileNotFoundError:
                logger.debug("Entry vanished while measuring: %s", os.path.join(dirpath, name))
                continue
            file_count += 1
    return total_size, file_count


class ItemRemover:
    """Removes single filesystem entries according to the run mode.

    Attributes:
        _dry_run: Report removals without touching the filesystem.
        _interactive: Ask the confirmer before each removal.
        _verbose: Print each removal.
        _confirmer: Confirmer used in interactive mode.
        _cwd: Directory that confirmation questions are relative to.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        interactive: bool = False,
        verbose: bool = False,
        confirmer: Confirmer | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Initialize the ItemRemover.

        Args:
            dry_run: If True, report what would be removed without removing it.
            interactive: If True, ask before each removal.
            verbose: If True, print each removed entry.
            confirmer: Confirmer to ask; required when interactive.
            cwd: Base for relative paths in questions. Defaults to the process cwd.

        Raises:
            ValueError: If interactive mode is requested without a confirmer.
        """
        if interactive and confirmer is None:
            msg = "Interactive removal requires a confirmer"
            raise ValueError(msg)
        self._dry_run = dry_run
        self._interactive = interactive
        self._verbose = verbose
        self._confirmer = confirmer
        self._cwd = cwd or Path.cwd()

    @classmethod
    def from_config(
        cls,
        config: CleanConfig,
        confirmer: Confirmer | None = None,
        cwd: Path | None = None,
    ) -> "ItemRemover":
        """Create a remover matching the run mode of ``config``."""
        return cls(
            dry_run=config.dry_run,
            interactive=config.interactive,
            verbose=config.verbose,
            confirmer=confirmer,
            cwd=cwd,
        )

    def remove(self, path: Path) -> RemovalOutcome:
        """Remove a single file or directory tree.

        A missing path is not an error: removal targets are speculative.
        The entry is measured before anything else happens, so dry-run
        reports carry the same statistics a real removal would.

        Args:
            path: Entry to remove.

        Returns:
            RemovalOutcome with the pre-deletion measurement, or a skipped
            outcome if the entry is absent, declined or could not be removed.
        """
        if not _exists(path):
            return RemovalOutcome.skipped()

        try:
            is_dir = _is_real_dir(path)
            size_bytes, file_count = measure_path(path)

            if self._dry_run:
                logger.info("Dry-run: would remove %s", path)
                console.print(
                    f"[info]\\[dry-run][/] Would remove: [path]{path}[/] "
                    f"[muted]({format_size(size_bytes)})[/]"
                )
                return RemovalOutcome(deleted=True, size_bytes=size_bytes, file_count=file_count)

            if self._interactive and not self._confirm(path):
                logger.debug("Removal declined: %s", path)
                return RemovalOutcome.skipped()

            if self._verbose:
                console.print(f"Removing: [path]{path}[/]")

            if is_dir:
                shutil.rmtree(path)
            else:
                path.unlink()

        except OSError as e:
            logger.error("Error removing %s: %s", path, e)
            print_error(f"Error removing {path}: {e}")
            return RemovalOutcome.skipped()

        return RemovalOutcome(deleted=True, size_bytes=size_bytes, file_count=file_count)

    def _confirm(self, path: Path) -> bool:
        """Ask whether ``path`` should be removed."""
        if self._confirmer is None:
            return False
        relative = os.path.relpath(path, self._cwd)
        return confirm(self._confirmer, f"Remove {relative}? [y/N] ")
