"""Configuration models for a cleanup run.

This module defines the immutable configuration value shared by every
component of a run, the shape of the ``cleaninstallNode`` section found
in ``package.json`` / ``.cleaninstallnoderc``, and the caller-supplied
overrides applied last.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Directory name of the VCS metadata folder that is never descended into
VCS_DIR = ".git"

DEFAULT_DIR_PATTERNS: tuple[str, ...] = ("node_modules", ".next", ".turbo", "dist", "build")
DEFAULT_FILE_PATTERNS: tuple[str, ...] = ("pnpm-lock.yaml", "yarn.lock", "package-lock.json")
DEFAULT_SCAN_DEPTH = 2


def _unique(values: tuple[str, ...]) -> tuple[str, ...]:
    """Drop duplicates while keeping first-seen order."""
    return tuple(dict.fromkeys(values))


class CleanConfig(BaseModel):
    """Immutable configuration for one cleanup run.

    Built once by the configuration assembler and passed unchanged to
    the workspace locator, the directory cleaner and the item remover.
    Use :meth:`with_updates` to derive a modified copy.

    Attributes:
        dir_patterns: Glob patterns of directories to remove.
        file_patterns: Glob patterns of files to remove.
        scan_depth: Maximum recursion depth when no workspaces are declared.
        skip_dirs: Directory names never descended into or removed.
        workspace_patterns: Glob patterns (relative to the root) of workspace members.
        verbose: Print every scanned directory and removed entry.
        dry_run: Measure and report without touching the filesystem.
        interactive: Ask before every removal.
        auto_install: Run the package manager's install command afterwards.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dir_patterns: Annotated[
        tuple[str, ...],
        Field(description="Glob patterns of directories to remove"),
    ] = DEFAULT_DIR_PATTERNS
    file_patterns: Annotated[
        tuple[str, ...],
        Field(description="Glob patterns of files to remove"),
    ] = DEFAULT_FILE_PATTERNS
    scan_depth: Annotated[
        int,
        Field(ge=1, description="Maximum recursion depth without workspaces"),
    ] = DEFAULT_SCAN_DEPTH
    skip_dirs: Annotated[
        tuple[str, ...],
        Field(description="Directory names that are never descended into"),
    ] = (VCS_DIR,)
    workspace_patterns: Annotated[
        tuple[str, ...],
        Field(description="Workspace member glob patterns"),
    ] = ()
    verbose: bool = True
    dry_run: bool = False
    interactive: bool = False
    auto_install: bool = False

    @field_validator("skip_dirs", "workspace_patterns")
    @classmethod
    def deduplicate(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Give set semantics to unordered pattern collections."""
        return _unique(value)

    def with_updates(self, **changes: Any) -> "CleanConfig":
        """Return a validated copy with the given fields replaced.

        Unlike ``model_copy(update=...)`` the result goes through field
        validation again, so de-duplication and bounds still hold.

        Args:
            **changes: Field values to replace.

        Returns:
            New CleanConfig instance. The receiver is left untouched.
        """
        return CleanConfig.model_validate({**self.model_dump(), **changes})


DEFAULT_CONFIG = CleanConfig()


class ConfigSection(BaseModel):
    """The ``cleaninstallNode`` section of a config source.

    Keys use the camelCase names found in ``package.json`` and
    ``.cleaninstallnoderc``. Unknown keys are ignored; a missing key
    means "keep the previous value".
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dir_patterns: Annotated[list[str] | None, Field(alias="dirsToRemove")] = None
    file_patterns: Annotated[list[str] | None, Field(alias="filesToRemove")] = None
    skip_dirs: Annotated[list[str] | None, Field(alias="skipDirs")] = None
    scan_depth: Annotated[int | None, Field(alias="scanDepth", ge=1)] = None
    verbose: bool | None = None

    def to_updates(self) -> dict[str, Any]:
        """Return only the keys that were present in the source."""
        return self.model_dump(exclude_none=True)


class ConfigOverrides(BaseModel):
    """Caller-supplied overrides, applied after every file source.

    Every field defaults to ``None`` which means "not provided". Array
    values replace the configured array entirely.

    Attributes:
        verbose: Override verbose output.
        scan_depth: Override the recursion depth.
        skip_vcs: Keep (True/None) or drop (False) the VCS directory from skip_dirs.
        dry_run: Override dry-run mode.
        interactive: Override interactive confirmation.
        auto_install: Override the install step.
        dir_patterns: Replacement directory patterns.
        file_patterns: Replacement file patterns.
        skip_dirs: Replacement skip names.
    """

    model_config = ConfigDict(extra="forbid")

    verbose: bool | None = None
    scan_depth: Annotated[int | None, Field(ge=1)] = None
    skip_vcs: bool | None = None
    dry_run: bool | None = None
    interactive: bool | None = None
    auto_install: bool | None = None
    dir_patterns: list[str] | None = None
    file_patterns: list[str] | None = None
    skip_dirs: list[str] | None = None
