"""Shared Rich display functions for run summaries and configuration."""

from rich.table import Table

from cleaninstall.core.package_manager import PackageManager
from cleaninstall.core.runner import RunSummary
from cleaninstall.models.config import CleanConfig
from cleaninstall.utils.formatting import console, format_duration, format_size


def create_summary_table(summary: RunSummary) -> Table:
    """Create a Rich table summarizing a cleanup run.

    Args:
        summary: The run summary to display.

    Returns:
        Rich Table with one row per statistic.
    """
    title = "Cleanup Summary (Dry Run)" if summary.config.dry_run else "Cleanup Summary"
    table = Table(
        title=title,
        show_header=False,
        border_style="border",
    )
    table.add_column("Metric", style="bold_header")
    table.add_column("Value", justify="right")

    result = summary.result
    label = "Items to delete" if summary.config.dry_run else "Items deleted"
    table.add_row("Roots cleaned", str(len(summary.roots)))
    table.add_row(label, str(result.items_deleted))
    table.add_row("Files removed", f"{result.files_removed:,}")
    table.add_row("Space freed", f"[size]{format_size(result.bytes_freed)}[/]")
    table.add_row("Elapsed", f"[muted]{format_duration(summary.elapsed_seconds)}[/]")
    return table


def print_run_summary(summary: RunSummary) -> None:
    """Print the summary table of a run."""
    console.print()
    console.print(create_summary_table(summary))


def create_config_table(config: CleanConfig, package_manager: PackageManager) -> Table:
    """Create a Rich table showing an assembled configuration.

    Args:
        config: Configuration to display.
        package_manager: Detected package manager.

    Returns:
        Rich Table with one row per setting.
    """
    table = Table(
        title="Effective Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    def _join(values: tuple[str, ...]) -> str:
        return ", ".join(values) if values else "[muted]-[/]"

    table.add_row("Directories to remove", _join(config.dir_patterns))
    table.add_row("Files to remove", _join(config.file_patterns))
    table.add_row("Skipped directories", _join(config.skip_dirs))
    table.add_row("Workspace patterns", _join(config.workspace_patterns))
    table.add_row("Scan depth", str(config.scan_depth))
    table.add_row("Package manager", package_manager.value)
    return table
