"""CLI commands for cleaninstall.

This package contains all subcommand implementations.
"""

from cleaninstall.cli.commands import clean, config

__all__ = ["clean", "config"]
