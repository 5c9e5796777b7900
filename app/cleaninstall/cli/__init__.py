"""CLI package for cleaninstall.

This package contains the Typer application and all subcommands.
"""

from cleaninstall.cli.main import app

__all__ = ["app"]
