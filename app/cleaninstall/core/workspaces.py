"""Workspace member discovery.

Expands the configured workspace patterns against the project root
and returns the directories to clean, root first, each exactly once.
"""

import logging
from pathlib import Path

from cleaninstall.core.errors import PatternError
from cleaninstall.core.patterns import MatchKind, PatternResolver, resolve_pattern
from cleaninstall.models.config import CleanConfig
from cleaninstall.utils.formatting import print_warning

logger = logging.getLogger(__name__)

# Prefix marking a workspace pattern as an exclusion (pnpm syntax)
EXCLUDE_PREFIX = "!"


def locate_workspace_roots(
    root: Path,
    config: CleanConfig,
    *,
    resolver: PatternResolver = resolve_pattern,
) -> tuple[Path, ...]:
    """Locate the cleaning roots of a workspace project.

    The project root is always included and always first. Workspace
    matches follow in pattern order. Patterns starting with ``!``
    remove their matches again (the root is never removed). All paths
    are canonical absolute paths and appear once.

    Args:
        root: Project root directory.
        config: Run configuration providing patterns and skip names.
        resolver: Pattern resolution capability.

    Returns:
        Ordered, de-duplicated tuple of directories to clean.
    """
    canonical_root = root.resolve()
    found: dict[Path, None] = {canonical_root: None}
    excluded: set[Path] = set()

    for pattern in config.workspace_patterns:
        negated = pattern.startswith(EXCLUDE_PREFIX)
        glob = pattern[len(EXCLUDE_PREFIX) :] if negated else pattern
        try:
            matches = resolver(glob, canonical_root, kind=MatchKind.DIRECTORY, skip_dirs=config.skip_dirs)
        except (PatternError, OSError) as e:
            logger.warning("Skipping workspace pattern %r: %s", pattern, e)
            print_warning(f"Could not resolve workspace pattern '{pattern}': {e}")
            continue

        for match in matches:
            resolved = match.resolve()
            if negated:
                excluded.add(resolved)
            else:
                found.setdefault(resolved, None)

    roots = tuple(path for path in found if path == canonical_root or path not in excluded)
    logger.debug("Located %d workspace root(s) under %s", len(roots), canonical_root)
    return roots
