"""Clean command implementation.

Removes build artifacts from the project root and its workspaces,
then optionally reinstalls dependencies.
"""

from pathlib import Path
from typing import Annotated

import typer

from cleaninstall.cli.display import print_run_summary
from cleaninstall.core.runner import RunOptions, run_cleanup
from cleaninstall.models.config import ConfigOverrides
from cleaninstall.utils.formatting import console, print_info, print_success

app = typer.Typer(
    name="clean",
    help="Remove build artifacts from a project and its workspaces.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def clean(
    directory: Annotated[
        Path | None,
        typer.Option(
            "--dir",
            "-d",
            help="Root directory to clean (defaults to the current directory).",
        ),
    ] = None,
    verbose: Annotated[
        bool | None,
        typer.Option(
            "--verbose/--no-verbose",
            help="Print every scanned directory and removed entry.",
        ),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option(
            "--depth",
            min=1,
            help="How deep to scan for nested packages without workspaces.",
        ),
    ] = None,
    skip_git: Annotated[
        bool,
        typer.Option(
            "--skip-git/--no-skip-git",
            help="Never descend into .git directories.",
        ),
    ] = True,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be removed without removing it."),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Ask before removing each item."),
    ] = False,
    install: Annotated[
        bool,
        typer.Option("--install", help="Reinstall dependencies after cleaning."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Install without asking for confirmation."),
    ] = False,
    dirs: Annotated[
        list[str] | None,
        typer.Option("--dirs", help="Directory pattern to remove (repeatable, replaces config)."),
    ] = None,
    files: Annotated[
        list[str] | None,
        typer.Option("--files", help="File pattern to remove (repeatable, replaces config)."),
    ] = None,
    skip: Annotated[
        list[str] | None,
        typer.Option("--skip", help="Directory name to skip (repeatable, replaces config)."),
    ] = None,
) -> None:
    """Remove dependency folders, build outputs and lockfiles.

    Without workspaces, nested packages (directories holding a
    package.json) are cleaned down to --depth levels. When the project
    declares workspaces in package.json or pnpm-workspace.yaml, the
    root and every workspace member are cleaned instead.

    Examples:
        cleaninstall clean                     # Clean the current project
        cleaninstall clean --dry-run           # Preview removals
        cleaninstall clean -d app --depth 3    # Clean ./app, three levels deep
        cleaninstall clean --install -f        # Clean and reinstall
    """
    overrides = ConfigOverrides(
        verbose=verbose,
        scan_depth=depth,
        skip_vcs=skip_git,
        dry_run=True if dry_run else None,
        interactive=True if interactive else None,
        auto_install=True if install else None,
        dir_patterns=dirs or None,
        file_patterns=files or None,
        skip_dirs=skip or None,
    )
    options = RunOptions(directory=directory, overrides=overrides, force=force)

    console.print("[header]Starting cleanup...[/]")

    summary = run_cleanup(options, reporter=print_run_summary)

    if not summary.success:
        raise typer.Exit(code=summary.exit_code)

    if summary.result.items_deleted == 0:
        print_info("Nothing to clean.")
    elif summary.config.dry_run:
        print_info("Dry run: no files were removed.")
    else:
        print_success("Cleanup completed successfully!")

    if not summary.config.auto_install and not summary.config.dry_run:
        command = " ".join(summary.package_manager.install_command)
        console.print(f"[muted]To reinstall dependencies, run '{command}'.[/]")
