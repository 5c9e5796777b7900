"""Recursive cleaning of a directory tree.

For each directory the cleaner removes everything matched by the
directory patterns, then everything matched by the file patterns, and
only then descends into nested packages. Each call returns its own
CleanResult which the caller folds into its accumulator.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from cleaninstall.core.errors import CleanupError, PatternError
from cleaninstall.core.patterns import MatchKind, PatternResolver, resolve_pattern
from cleaninstall.core.remover import ItemRemover
from cleaninstall.models.config import CleanConfig
from cleaninstall.models.result import CleanResult
from cleaninstall.utils.formatting import console, print_error, print_warning

logger = logging.getLogger(__name__)

# File whose presence marks a subdirectory as a nested package
MANIFEST_FILE = "package.json"

DirectoryLister = Callable[[Path], list[Path]]


def list_subdirectories(directory: Path) -> list[Path]:
    """List immediate subdirectories, sorted, without following symlinks.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(
        entry for entry in directory.iterdir() if entry.is_dir() and not entry.is_symlink()
    )


def _contains(candidate: Path, directory: Path) -> bool:
    """Check whether ``candidate`` is ``directory`` or one of its ancestors."""
    try:
        return directory.resolve().is_relative_to(candidate.resolve())
    except (OSError, RuntimeError):
        return True


def is_claimed(path: Path, claimed: set[Path]) -> bool:
    """Check whether ``path`` is a claimed removal target or lies inside one."""
    return any(path.is_relative_to(target) for target in claimed)


class DirectoryCleaner:
    """Cleans a directory and, without workspaces, its nested packages.

    Args:
        config: Configuration shared by the whole run.
        remover: Remover applied to every match.
        resolver: Pattern resolution capability (see :func:`resolve_pattern`).
        lister: Directory listing capability used for recursion.
    """

    def __init__(
        self,
        config: CleanConfig,
        remover: ItemRemover,
        *,
        resolver: PatternResolver = resolve_pattern,
        lister: DirectoryLister = list_subdirectories,
    ) -> None:
        self._config = config
        self._remover = remover
        self._resolver = resolver
        self._lister = lister

    def clean(
        self,
        directory: Path,
        depth: int = 1,
        claimed: set[Path] | None = None,
    ) -> CleanResult:
        """Clean ``directory`` and recurse into nested packages.

        Every match handed to the remover is claimed, whether or not it was
        removed. Claimed paths and anything inside them are never passed to
        the remover again nor descended into, so a dry-run reports exactly
        the entries a real run deletes.

        Args:
            directory: Directory to clean.
            depth: Depth of ``directory``; the directory a run starts in is 1.
            claimed: Removal targets of the run so far, updated in place.
                A fresh set is used when omitted.

        Returns:
            CleanResult for this directory and everything cleaned below it.

        Raises:
            CleanupError: If the directory a run starts in cannot be listed.
        """
        config = self._config
        claimed = set() if claimed is None else claimed
        if config.verbose:
            console.print(f"\n[header]Scanning directory:[/] [path]{directory}[/]")

        result = CleanResult()
        for pattern in config.dir_patterns:
            result = result.merge(
                self._remove_matches(directory, pattern, MatchKind.DIRECTORY, claimed)
            )
        for pattern in config.file_patterns:
            result = result.merge(self._remove_matches(directory, pattern, MatchKind.FILE, claimed))

        if config.workspace_patterns:
            # Workspace members are located globally, not by descending here
            return result
        if depth >= config.scan_depth:
            return result

        try:
            subdirectories = self._lister(directory)
        except OSError as e:
            if depth == 1:
                msg = f"Cannot scan {directory}: {e}"
                raise CleanupError(msg) from e
            logger.error("Error scanning %s: %s", directory, e)
            print_error(f"Error scanning {directory}: {e}")
            return result

        for subdirectory in subdirectories:
            if subdirectory.name in config.skip_dirs:
                logger.debug("Skipping directory: %s", subdirectory)
                continue
            if is_claimed(subdirectory, claimed):
                continue
            if not (subdirectory / MANIFEST_FILE).is_file():
                continue
            result = result.merge(self.clean(subdirectory, depth + 1, claimed))

        return result

    def _remove_matches(
        self,
        directory: Path,
        pattern: str,
        kind: MatchKind,
        claimed: set[Path],
    ) -> CleanResult:
        """Remove every unclaimed entry in ``directory`` matching ``pattern``."""
        result = CleanResult()
        try:
            matches = self._resolver(pattern, directory, kind=kind, skip_dirs=self._config.skip_dirs)
        except (PatternError, OSError) as e:
            logger.warning("Skipping pattern %r in %s: %s", pattern, directory, e)
            print_warning(f"Could not resolve pattern '{pattern}' in {directory}: {e}")
            return result

        for match in matches:
            if _contains(match, directory):
                logger.debug("Not removing %s: it contains %s", match, directory)
                continue
            if is_claimed(match, claimed):
                logger.debug("Already targeted: %s", match)
                continue
            claimed.add(match)
            result = result.add(match, self._remover.remove(match))
        return result
