"""Result models for removals and cleaned directory trees.

Both models are immutable: the directory cleaner folds outcomes into a
fresh CleanResult per recursive call instead of mutating shared state.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RemovalOutcome:
    """Result of attempting to remove a single filesystem entry.

    Either ``deleted`` is False and both counters are zero, or it is True
    and the counters hold the measurement taken before deletion.

    Attributes:
        deleted: Whether the entry was (or, in dry-run, would be) removed.
        size_bytes: Total size of the entry in bytes.
        file_count: Number of files the entry contained (1 for a file).
    """

    deleted: bool
    size_bytes: int = 0
    file_count: int = 0

    def __post_init__(self) -> None:
        """Validate outcome data after initialization."""
        if self.size_bytes < 0 or self.file_count < 0:
            msg = "Removal statistics cannot be negative"
            raise ValueError(msg)
        if not self.deleted and (self.size_bytes or self.file_count):
            msg = "A skipped removal cannot carry statistics"
            raise ValueError(msg)

    @classmethod
    def skipped(cls) -> "RemovalOutcome":
        """Create the outcome for an entry that was left in place."""
        return cls(deleted=False)


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Accumulated statistics for one cleaned directory tree.

    Attributes:
        bytes_freed: Total bytes of all removed entries.
        files_removed: Total number of files inside removed entries.
        items_deleted: Number of removed entries (directories count once).
        removed_paths: Removed entries in removal order.
    """

    bytes_freed: int = 0
    files_removed: int = 0
    items_deleted: int = 0
    removed_paths: tuple[Path, ...] = field(default_factory=tuple)

    def add(self, path: Path, outcome: RemovalOutcome) -> "CleanResult":
        """Fold a single removal outcome into a new result.

        Args:
            path: The entry the outcome belongs to.
            outcome: Outcome returned by the item remover.

        Returns:
            New CleanResult; unchanged copy if nothing was deleted.
        """
        if not outcome.deleted:
            return self
        return CleanResult(
            bytes_freed=self.bytes_freed + outcome.size_bytes,
            files_removed=self.files_removed + outcome.file_count,
            items_deleted=self.items_deleted + 1,
            removed_paths=(*self.removed_paths, path),
        )

    def merge(self, other: "CleanResult") -> "CleanResult":
        """Combine two results, keeping the removal order of both."""
        return CleanResult(
            bytes_freed=self.bytes_freed + other.bytes_freed,
            files_removed=self.files_removed + other.files_removed,
            items_deleted=self.items_deleted + other.items_deleted,
            removed_paths=(*self.removed_paths, *other.removed_paths),
        )

    def __add__(self, other: "CleanResult") -> "CleanResult":
        return self.merge(other)
