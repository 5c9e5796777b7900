"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

TreeSpec = dict[str, Any]


def build_tree(base: Path, spec: TreeSpec) -> None:
    """Create files (str values) and directories (dict values) under base."""
    for name, content in spec.items():
        target = base / name
        if isinstance(content, dict):
            target.mkdir(parents=True, exist_ok=True)
            build_tree(target, content)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)


def snapshot_tree(base: Path) -> dict[str, str | None]:
    """Map every relative path under base to its content (None for directories)."""
    snapshot: dict[str, str | None] = {}
    for path in sorted(base.rglob("*")):
        relative = path.relative_to(base).as_posix()
        snapshot[relative] = None if path.is_dir() else path.read_text()
    return snapshot


class ScriptedConfirmer:
    """Confirmer returning scripted answers and recording every question.

    A single answer string is repeated for every question.
    """

    def __init__(self, answers: str | list[str]) -> None:
        self._answers = answers
        self.questions: list[str] = []
        self.closed = False

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if isinstance(self._answers, str):
            return self._answers
        return self._answers.pop(0) if self._answers else ""

    def close(self) -> None:
        self.closed = True


class RecordingInstaller:
    """Installer recording calls instead of spawning a process."""

    def __init__(self, returncode: int = 0, error: OSError | None = None) -> None:
        self.returncode = returncode
        self.error = error
        self.calls: list[tuple[str, list[str], Path]] = []

    def run(self, command: str, args: list[str], cwd: Path) -> int:
        self.calls.append((command, args, cwd))
        if self.error is not None:
            raise self.error
        return self.returncode


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a project tree under tmp_path and returning its root."""

    def _make(spec: TreeSpec, name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir()
        build_tree(root, spec)
        return root

    return _make


@pytest.fixture
def simple_project() -> TreeSpec:
    """Single package with the usual artifacts."""
    return {
        "package.json": "{}",
        "node_modules": {"left-pad": {"index.js": "module.exports = 1;"}},
        "package-lock.json": "{}",
        "src": {"index.js": "console.log('hi');"},
    }


@pytest.fixture
def monorepo_project() -> TreeSpec:
    """npm-workspaces monorepo with two members."""
    return {
        "package.json": '{"workspaces": ["packages/*"]}',
        "node_modules": {"dep": {"index.js": "x"}},
        "packages": {
            "a": {"package.json": "{}", "node_modules": {"dep": {"index.js": "a"}}},
            "b": {"package.json": "{}", "node_modules": {"dep": {"index.js": "b"}}},
        },
    }


@pytest.fixture
def make_confirmer() -> Callable[[str | list[str]], ScriptedConfirmer]:
    """Factory for confirmers answering with scripted replies."""
    return ScriptedConfirmer


@pytest.fixture
def make_installer() -> Callable[..., RecordingInstaller]:
    """Factory for installers that record calls."""
    return RecordingInstaller


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, str | None]]:
    """Return the tree snapshot helper."""
    return snapshot_tree
