"""Glob pattern resolution relative to a base directory.

Removal targets and workspace members are both described by glob
patterns. This module turns a pattern into the concrete list of
matching directories or files, dotfiles included, while keeping
anything inside a skipped directory (``.git`` by default) out of the
result.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path, PurePath

from cleaninstall.core.errors import PatternError


# Signature shared by resolve_pattern and test doubles
PatternResolver = Callable[..., list[Path]]


class MatchKind(str, Enum):
    """Kind of filesystem entry a pattern should match.

    Attributes:
        DIRECTORY: Directories (including symlinks to directories).
        FILE: Anything that is not a directory.
    """

    DIRECTORY = "directory"
    FILE = "file"


def normalize_pattern(pattern: str) -> str:
    """Strip a leading ``./`` and trailing slashes from a pattern."""
    normalized = pattern.strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.rstrip("/")


def _in_skipped_dir(candidate: Path, base: Path, skip_dirs: frozenset[str]) -> bool:
    """Check whether any path component below ``base`` is a skipped name."""
    try:
        relative = candidate.relative_to(base)
    except ValueError:
        relative = PurePath(candidate)
    return any(part in skip_dirs for part in relative.parts)


def resolve_pattern(
    pattern: str,
    base: Path,
    *,
    kind: MatchKind,
    skip_dirs: Iterable[str] = (),
) -> list[Path]:
    """Resolve a glob pattern against a base directory.

    Args:
        pattern: Relative glob pattern (``*``, ``?``, ``[...]`` and ``**``).
        base: Directory the pattern is relative to.
        kind: Whether to return directories or files.
        skip_dirs: Directory names whose contents never match.

    Returns:
        Sorted list of matching paths, each prefixed with ``base``.

    Raises:
        PatternError: If the pattern is empty, absolute or cannot be
            evaluated against ``base``.
    """
    normalized = normalize_pattern(pattern)
    if not normalized:
        msg = f"Empty glob pattern: {pattern!r}"
        raise PatternError(msg)
    if PurePath(normalized).is_absolute():
        msg = f"Pattern must be relative to the project: {pattern!r}"
        raise PatternError(msg)

    skipped = frozenset(skip_dirs)
    try:
        candidates = sorted(base.glob(normalized))
    except (ValueError, NotImplementedError, OSError) as e:
        msg = f"Cannot resolve {pattern!r} in {base}: {e}"
        raise PatternError(msg) from e

    matches: list[Path] = []
    for candidate in candidates:
        if _in_skipped_dir(candidate, base, skipped):
            continue
        is_dir = candidate.is_dir()
        if (kind == MatchKind.DIRECTORY) != is_dir:
            continue
        matches.append(candidate)
    return matches
