"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from enum import Enum
from typing import Annotated

import typer
from rich.logging import RichHandler

from cleaninstall import __version__
from cleaninstall.cli.commands import clean, config
from cleaninstall.utils.formatting import err_console

app = typer.Typer(
    name="cleaninstall",
    help="Remove Node.js build artifacts from a project and its workspaces.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


class LogLevel(str, Enum):
    """Log levels accepted by --log-level."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cleaninstall version {__version__}")
        raise typer.Exit()


def setup_logging(level: LogLevel) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.value.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level",
            help="Diagnostic log level.",
            case_sensitive=False,
        ),
    ] = LogLevel.WARNING,
) -> None:
    """cleaninstall - clean Node.js projects and monorepos.

    Removes dependency folders, build outputs and lockfiles from a
    project root and every workspace member, then optionally
    reinstalls dependencies.
    """
    setup_logging(log_level)


# Register commands
app.add_typer(clean.app, name="clean")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
