"""Configuration inspection commands."""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from cleaninstall.cli.display import create_config_table
from cleaninstall.core.config import assemble_config
from cleaninstall.core.package_manager import detect_package_manager
from cleaninstall.utils.formatting import console, print_error

app = typer.Typer(
    help="Inspect the cleanup configuration of a project.",
    invoke_without_command=True,
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Output format options for config show."""

    TABLE = "table"
    JSON = "json"


@app.command()
def show(
    directory: Annotated[
        Path | None,
        typer.Option(
            "--dir",
            "-d",
            help="Project root (defaults to the current directory).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the configuration assembled from defaults and project files."""
    root = (directory or Path.cwd()).resolve()
    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        raise typer.Exit(code=1)

    config = assemble_config(root)
    package_manager = detect_package_manager(root)

    if output_format == OutputFormat.JSON:
        data = {
            **config.model_dump(mode="json"),
            "package_manager": package_manager.value,
        }
        console.print(json.dumps(data, indent=2))
        return

    console.print(create_config_table(config, package_manager))
