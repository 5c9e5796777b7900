"""Utility modules for cleaninstall.

This module exports commonly used utility functions.
"""

from cleaninstall.utils.formatting import (
    console,
    err_console,
    format_duration,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from cleaninstall.utils.shell import command_exists, run_interactive

__all__ = [
    "command_exists",
    "console",
    "err_console",
    "format_duration",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_interactive",
]
