"""Top-level orchestration of a cleanup run.

Sequences configuration assembly, package manager detection, cleaning
of every root and the optional install step. A run reports failure
only when cleaning itself raised; an install failure is reported
separately and leaves the cleaning outcome untouched.
"""

import dataclasses
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from cleaninstall.core.cleaner import DirectoryCleaner, is_claimed
from cleaninstall.core.config import assemble_config
from cleaninstall.core.confirm import Confirmer, ConfirmerFactory, confirm, confirmer_scope
from cleaninstall.core.errors import CleanupError
from cleaninstall.core.package_manager import (
    Installer,
    PackageManager,
    SubprocessInstaller,
    detect_package_manager,
)
from cleaninstall.core.remover import ItemRemover
from cleaninstall.core.workspaces import locate_workspace_roots
from cleaninstall.models.config import CleanConfig, ConfigOverrides
from cleaninstall.models.result import CleanResult
from cleaninstall.utils.formatting import print_error, print_info, print_success

logger = logging.getLogger(__name__)


class RunOptions(BaseModel):
    """Options a caller passes to :func:`run_cleanup`.

    Attributes:
        directory: Project root. Relative paths are resolved against the
            working directory; None means the working directory itself.
        overrides: Configuration overrides applied after all file sources.
        force: Run the install step without asking first.
    """

    model_config = ConfigDict(extra="forbid")

    directory: Annotated[Path | None, Field(description="Project root directory")] = None
    overrides: ConfigOverrides = Field(
        default_factory=ConfigOverrides,
        description="Configuration overrides",
    )
    force: Annotated[bool, Field(description="Install without confirmation")] = False


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcome of a cleanup run.

    Attributes:
        root: Canonical project root.
        config: Configuration the run used.
        package_manager: Package manager detected before cleaning.
        result: Statistics summed over every cleaned root.
        roots: Directories cleaned as roots, in processing order.
        elapsed_seconds: Wall-clock duration of the cleaning phase.
        error: Fatal cleaning error, None if cleaning completed.
        install_ran: Whether the install command was started.
        install_error: Install failure message, None on success or when skipped.
    """

    root: Path
    config: CleanConfig
    package_manager: PackageManager
    result: CleanResult
    roots: tuple[Path, ...] = ()
    elapsed_seconds: float = 0.0
    error: str | None = None
    install_ran: bool = False
    install_error: str | None = None

    @property
    def success(self) -> bool:
        """True unless cleaning raised a fatal error."""
        return self.error is None

    @property
    def exit_code(self) -> int:
        """Process exit status for this run (install failures do not count)."""
        return 0 if self.success else 1


SummaryReporter = Callable[[RunSummary], None]


def resolve_root(directory: Path | None, cwd: Path) -> Path:
    """Resolve the project root and make sure it is a directory.

    Raises:
        CleanupError: If the root does not exist or is not a directory.
    """
    root = cwd if directory is None else cwd / directory
    root = root.resolve()
    if not root.is_dir():
        msg = f"Root directory does not exist or is not a directory: {root}"
        raise CleanupError(msg)
    return root


def clean_roots(
    root: Path,
    config: CleanConfig,
    remover: ItemRemover,
) -> tuple[tuple[Path, ...], CleanResult]:
    """Clean the project root, or every workspace root when declared.

    Removal targets are shared across roots: a workspace root lying
    inside an entry targeted by an earlier root is not cleaned.

    Args:
        root: Canonical project root.
        config: Run configuration.
        remover: Remover shared by all roots.

    Returns:
        Tuple of (cleaned roots, summed CleanResult).

    Raises:
        CleanupError: If a root cannot be scanned.
    """
    cleaner = DirectoryCleaner(config, remover)
    if config.workspace_patterns:
        candidates = locate_workspace_roots(root, config)
    else:
        candidates = (root,)

    claimed: set[Path] = set()
    cleaned: list[Path] = []
    total = CleanResult()
    for directory in candidates:
        if is_claimed(directory, claimed):
            logger.debug("Skipping workspace root inside a removal target: %s", directory)
            continue
        cleaned.append(directory)
        total = total.merge(cleaner.clean(directory, depth=1, claimed=claimed))
    return tuple(cleaned), total


def _run_install(
    package_manager: PackageManager,
    root: Path,
    installer: Installer,
    confirmer: Confirmer | None,
    force: bool,
) -> tuple[bool, str | None]:
    """Run the package manager's install command.

    Returns:
        Tuple of (install started, error message or None).
    """
    command, *args = package_manager.install_command
    display = " ".join(package_manager.install_command)

    if not force and confirmer is not None and not confirm(confirmer, f"Run '{display}' now? [y/N] "):
        print_info("Skipping install.")
        return False, None

    print_info(f"Running '{display}' in {root}...")
    try:
        returncode = installer.run(command, args, root)
    except OSError as e:
        message = f"Failed to run '{display}': {e}"
        logger.error(message)
        print_error(message)
        return True, message

    if returncode != 0:
        message = f"'{display}' exited with code {returncode}"
        logger.error(message)
        print_error(message)
        return True, message

    print_success(f"'{display}' completed successfully.")
    return True, None


def run_cleanup(
    options: RunOptions | None = None,
    *,
    installer: Installer | None = None,
    confirmer_factory: ConfirmerFactory | None = None,
    reporter: SummaryReporter | None = None,
    cwd: Path | None = None,
) -> RunSummary:
    """Run a complete cleanup.

    Args:
        options: Run options; defaults clean the working directory.
        installer: Install capability. Defaults to SubprocessInstaller.
        confirmer_factory: Creates the run's confirmer when one is needed.
        reporter: Called with the summary once cleaning has finished
            and at least one item was deleted, before any install.
        cwd: Working directory. Defaults to the process cwd.

    Returns:
        RunSummary describing the cleaning outcome and the install step.
    """
    options = options or RunOptions()
    working_dir = cwd or Path.cwd()

    try:
        root = resolve_root(options.directory, working_dir)
    except CleanupError as e:
        print_error(str(e))
        unresolved = working_dir / options.directory if options.directory else working_dir
        return RunSummary(
            root=unresolved,
            config=assemble_config(unresolved, options.overrides),
            package_manager=PackageManager.NPM,
            result=CleanResult(),
            error=str(e),
        )

    config = assemble_config(root, options.overrides)
    package_manager = detect_package_manager(root)
    needs_confirmer = config.interactive or (config.auto_install and not options.force)

    with confirmer_scope(confirmer_factory, needed=needs_confirmer) as confirmer:
        remover = ItemRemover.from_config(config, confirmer=confirmer, cwd=working_dir)
        started = time.monotonic()
        roots: tuple[Path, ...] = ()
        result = CleanResult()
        error: str | None = None
        try:
            roots, result = clean_roots(root, config, remover)
        except CleanupError as e:
            error = str(e)
            logger.error("Cleanup failed: %s", e)
            print_error(f"Cleanup failed: {e}")

        summary = RunSummary(
            root=root,
            config=config,
            package_manager=package_manager,
            result=result,
            roots=roots,
            elapsed_seconds=time.monotonic() - started,
            error=error,
        )
        if reporter is not None and result.items_deleted > 0:
            reporter(summary)

        if summary.success and config.auto_install and not config.dry_run:
            install_ran, install_error = _run_install(
                package_manager,
                root,
                installer or SubprocessInstaller(),
                confirmer,
                options.force,
            )
            summary = dataclasses.replace(
                summary, install_ran=install_ran, install_error=install_error
            )

    return summary
