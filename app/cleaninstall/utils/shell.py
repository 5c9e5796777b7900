"""Child process helpers for the install step."""

import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path


def command_exists(name: str) -> bool:
    """Return True if ``name`` resolves to an executable on the PATH."""
    return shutil.which(name) is not None


def run_interactive(
    args: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a command attached to the current terminal and wait for it.

    Nothing is captured: package managers draw progress bars and may
    prompt, so the child shares stdin, stdout and stderr with us.

    Args:
        args: Executable followed by its arguments.
        cwd: Directory to run in. Defaults to the current one.
        env: Variables layered over ``os.environ``.

    Returns:
        The child's exit code.

    Raises:
        FileNotFoundError: If the executable does not exist.
        OSError: If the executable cannot be started.
    """
    environment = dict(os.environ)
    if env:
        environment.update(env)
    completed = subprocess.run(list(args), cwd=cwd, env=environment, check=False)
    return completed.returncode
