"""Unit tests for the cleanup runner.

Tests complete runs over real temporary trees: single packages,
workspace monorepos, fatal errors, the confirmer lifecycle and the
optional install step.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import typer
from cleaninstall.core.errors import CleanupError
from cleaninstall.core.package_manager import PackageManager
from cleaninstall.core.runner import RunOptions, resolve_root, run_cleanup
from cleaninstall.models.config import ConfigOverrides


def _options(root: Path, force: bool = False, **overrides: Any) -> RunOptions:
    return RunOptions(
        directory=root,
        overrides=ConfigOverrides(verbose=False, **overrides),
        force=force,
    )


class TestResolveRoot:
    """Tests for resolve_root function."""

    def test_defaults_to_cwd(self, tmp_path: Path) -> None:
        assert resolve_root(None, tmp_path) == tmp_path.resolve()

    def test_relative_to_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "app").mkdir()
        assert resolve_root(Path("app"), tmp_path) == (tmp_path / "app").resolve()

    def test_absolute_kept(self, tmp_path: Path) -> None:
        assert resolve_root(tmp_path, Path("/")) == tmp_path.resolve()

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(CleanupError, match="does not exist"):
            resolve_root(Path("missing"), tmp_path)

    def test_file_root(self, tmp_path: Path) -> None:
        (tmp_path / "file").write_text("")
        with pytest.raises(CleanupError):
            resolve_root(Path("file"), tmp_path)


class TestRunCleanup:
    """Tests for run_cleanup function."""

    def test_single_package(
        self,
        make_project: Callable[..., Path],
        simple_project: dict[str, Any],
        make_installer: Callable[..., Any],
    ) -> None:
        """node_modules and package-lock.json are removed, the run succeeds."""
        root = make_project(simple_project)
        installer = make_installer()

        summary = run_cleanup(_options(root), installer=installer, cwd=root)

        assert summary.success is True
        assert summary.exit_code == 0
        assert summary.result.items_deleted == 2
        assert summary.roots == (root.resolve(),)
        assert summary.package_manager == PackageManager.NPM
        assert not (root / "node_modules").exists()
        assert not (root / "package-lock.json").exists()
        assert (root / "src" / "index.js").exists()
        assert installer.calls == []

    def test_monorepo(
        self,
        make_project: Callable[..., Path],
        monorepo_project: dict[str, Any],
    ) -> None:
        """Root and both workspace members are cleaned, once each."""
        root = make_project(monorepo_project)

        summary = run_cleanup(_options(root), cwd=root)

        resolved = root.resolve()
        assert summary.roots == (
            resolved,
            resolved / "packages" / "a",
            resolved / "packages" / "b",
        )
        assert summary.result.items_deleted == 3
        assert summary.result.removed_paths == (
            resolved / "node_modules",
            resolved / "packages" / "a" / "node_modules",
            resolved / "packages" / "b" / "node_modules",
        )

    def test_workspaces_supersede_depth(self, make_project: Callable[..., Path]) -> None:
        """Workspace members are cleaned even beyond scan_depth, other packages are not."""
        root = make_project(
            {
                "package.json": json.dumps({"workspaces": ["libs/*/*"]}),
                "libs": {"group": {"deep": {"package.json": "{}", "dist": {}}}},
                "tool": {"package.json": "{}", "dist": {}},
            }
        )

        summary = run_cleanup(_options(root, scan_depth=1), cwd=root)

        assert summary.result.removed_paths == (root.resolve() / "libs" / "group" / "deep" / "dist",)
        assert (root / "tool" / "dist").exists()

    def test_missing_root_fails(self, tmp_path: Path, make_installer: Callable[..., Any]) -> None:
        installer = make_installer()

        summary = run_cleanup(
            RunOptions(directory=Path("missing"), overrides=ConfigOverrides(auto_install=True)),
            installer=installer,
            cwd=tmp_path,
        )

        assert summary.success is False
        assert summary.exit_code == 1
        assert summary.error is not None
        assert summary.result.items_deleted == 0
        assert summary.package_manager == PackageManager.NPM
        assert installer.calls == []

    def test_defaults_to_cwd(
        self, make_project: Callable[..., Path], simple_project: dict[str, Any]
    ) -> None:
        root = make_project(simple_project)

        summary = run_cleanup(
            RunOptions(overrides=ConfigOverrides(verbose=False)),
            cwd=root,
        )

        assert summary.root == root.resolve()
        assert summary.result.items_deleted == 2

    def test_idempotent(
        self, make_project: Callable[..., Path], simple_project: dict[str, Any]
    ) -> None:
        root = make_project(simple_project)

        run_cleanup(_options(root), cwd=root)
        second = run_cleanup(_options(root), cwd=root)

        assert second.success is True
        assert second.result.items_deleted == 0
        assert second.result.bytes_freed == 0

    def test_dry_run_changes_nothing(
        self,
        make_project: Callable[..., Path],
        monorepo_project: dict[str, Any],
        tree_snapshot: Callable[[Path], dict[str, str | None]],
        make_installer: Callable[..., Any],
    ) -> None:
        """Dry-run reports removals but neither deletes nor installs."""
        root = make_project(monorepo_project)
        before = tree_snapshot(root)
        installer = make_installer()

        summary = run_cleanup(
            _options(root, dry_run=True, auto_install=True, force=True),
            installer=installer,
            cwd=root,
        )

        assert summary.result.items_deleted == 3
        assert tree_snapshot(root) == before
        assert installer.calls == []

    def test_dry_run_matches_real_run_with_recursive_workspaces(
        self,
        make_project: Callable[..., Path],
        tree_snapshot: Callable[[Path], dict[str, str | None]],
    ) -> None:
        """Workspace roots inside an earlier removal target are not cleaned."""
        spec = {
            "package.json": json.dumps({"workspaces": ["packages/**"]}),
            "packages": {
                "a": {
                    "package.json": "{}",
                    "node_modules": {"dep": {"package.json": "{}", "dist": {"index.js": "x"}}},
                }
            },
        }
        dry_root = make_project(spec, name="dry")
        real_root = make_project(spec, name="real")
        before = tree_snapshot(dry_root)

        dry = run_cleanup(_options(dry_root, dry_run=True), cwd=dry_root)
        real = run_cleanup(_options(real_root), cwd=real_root)

        expected = [Path("packages/a/node_modules")]
        assert tree_snapshot(dry_root) == before
        assert [p.relative_to(dry_root.resolve()) for p in dry.result.removed_paths] == expected
        assert [p.relative_to(real_root.resolve()) for p in real.result.removed_paths] == expected
        assert dry.result.items_deleted == real.result.items_deleted == 1
        assert dry.result.bytes_freed == real.result.bytes_freed
        assert dry.result.files_removed == real.result.files_removed
        assert [p.relative_to(dry_root.resolve()) for p in dry.roots] == [
            p.relative_to(real_root.resolve()) for p in real.roots
        ]

    def test_aborted_confirmer_skips_removals_and_install(
        self,
        make_project: Callable[..., Path],
        simple_project: dict[str, Any],
        make_installer: Callable[..., Any],
    ) -> None:
        """Lost terminal input declines every question instead of crashing the run."""
        root = make_project(simple_project)
        confirmer = MagicMock()
        confirmer.ask.side_effect = typer.Abort()
        installer = make_installer()

        summary = run_cleanup(
            _options(root, interactive=True, auto_install=True),
            installer=installer,
            confirmer_factory=lambda: confirmer,
            cwd=root,
        )

        assert summary.success is True
        assert summary.result.items_deleted == 0
        assert summary.install_ran is False
        assert installer.calls == []
        assert (root / "node_modules").exists()
        confirmer.close.assert_called_once()

    def test_interactive_denial_deletes_nothing(
        self,
        make_project: Callable[..., Path],
        monorepo_project: dict[str, Any],
        make_confirmer: Callable[..., Any],
        tree_snapshot: Callable[[Path], dict[str, str | None]],
    ) -> None:
        root = make_project(monorepo_project)
        before = tree_snapshot(root)
        confirmer = make_confirmer("n")

        summary = run_cleanup(
            _options(root, interactive=True),
            confirmer_factory=lambda: confirmer,
            cwd=root,
        )

        assert summary.result.items_deleted == 0
        assert summary.result.bytes_freed == 0
        assert len(confirmer.questions) == 3
        assert tree_snapshot(root) == before
        assert confirmer.closed is True

    def test_confirmer_not_created_when_unneeded(
        self, make_project: Callable[..., Path], simple_project: dict[str, Any]
    ) -> None:
        root = make_project(simple_project)
        factory = MagicMock()

        run_cleanup(_options(root), confirmer_factory=factory, cwd=root)

        factory.assert_not_called()

    def test_lockfile_detected_before_removal(
        self, make_project: Callable[..., Path], make_installer: Callable[..., Any]
    ) -> None:
        """The package manager is detected from a lockfile that cleaning then removes."""
        root = make_project({"package.json": "{}", "yarn.lock": ""})
        installer = make_installer()

        summary = run_cleanup(
            _options(root, auto_install=True, force=True), installer=installer, cwd=root
        )

        assert not (root / "yarn.lock").exists()
        assert summary.package_manager == PackageManager.YARN
        assert installer.calls == [("yarn", ["install"], root.resolve())]
        assert summary.install_ran is True
        assert summary.install_error is None

    def test_install_asks_without_force(
        self,
        make_project: Callable[..., Path],
        make_installer: Callable[..., Any],
        make_confirmer: Callable[..., Any],
    ) -> None:
        root = make_project({"package.json": "{}", "pnpm-lock.yaml": ""})
        installer = make_installer()
        confirmer = make_confirmer("y")

        summary = run_cleanup(
            _options(root, auto_install=True),
            installer=installer,
            confirmer_factory=lambda: confirmer,
            cwd=root,
        )

        assert confirmer.questions == ["Run 'pnpm install' now? [y/N] "]
        assert installer.calls == [("pnpm", ["install"], root.resolve())]
        assert summary.install_ran is True
        assert confirmer.closed is True

    def test_install_declined(
        self,
        make_project: Callable[..., Path],
        make_installer: Callable[..., Any],
        make_confirmer: Callable[..., Any],
    ) -> None:
        root = make_project({"package.json": "{}"})
        installer = make_installer()

        summary = run_cleanup(
            _options(root, auto_install=True),
            installer=installer,
            confirmer_factory=lambda: make_confirmer("n"),
            cwd=root,
        )

        assert installer.calls == []
        assert summary.install_ran is False
        assert summary.success is True

    def test_install_failure_keeps_success(
        self, make_project: Callable[..., Path], make_installer: Callable[..., Any]
    ) -> None:
        """A failing install is reported separately from the cleaning outcome."""
        root = make_project({"package.json": "{}"})
        installer = make_installer(returncode=1)

        summary = run_cleanup(
            _options(root, auto_install=True, force=True), installer=installer, cwd=root
        )

        assert summary.success is True
        assert summary.exit_code == 0
        assert summary.install_ran is True
        assert summary.install_error is not None
        assert "exited with code 1" in summary.install_error

    def test_install_spawn_error(
        self, make_project: Callable[..., Path], make_installer: Callable[..., Any]
    ) -> None:
        root = make_project({"package.json": "{}"})
        installer = make_installer(error=FileNotFoundError("Command not found: npm"))

        summary = run_cleanup(
            _options(root, auto_install=True, force=True), installer=installer, cwd=root
        )

        assert summary.success is True
        assert summary.install_error is not None
        assert "Command not found" in summary.install_error

    def test_cleanup_error_skips_install(
        self,
        make_project: Callable[..., Path],
        make_installer: Callable[..., Any],
        make_confirmer: Callable[..., Any],
    ) -> None:
        """A fatal cleaning error fails the run, skips install and still closes the confirmer."""
        root = make_project({"package.json": "{}"})
        installer = make_installer()
        confirmer = make_confirmer("y")

        with patch(
            "cleaninstall.core.runner.clean_roots", side_effect=CleanupError("Cannot scan")
        ):
            summary = run_cleanup(
                _options(root, auto_install=True),
                installer=installer,
                confirmer_factory=lambda: confirmer,
                cwd=root,
            )

        assert summary.success is False
        assert summary.exit_code == 1
        assert summary.error == "Cannot scan"
        assert installer.calls == []
        assert confirmer.closed is True

    def test_reporter_called_when_items_deleted(
        self, make_project: Callable[..., Path], simple_project: dict[str, Any]
    ) -> None:
        root = make_project(simple_project)
        reporter = MagicMock()

        summary = run_cleanup(_options(root), reporter=reporter, cwd=root)

        reporter.assert_called_once()
        reported = reporter.call_args.args[0]
        assert reported.result == summary.result

    def test_reporter_skipped_when_nothing_deleted(self, make_project: Callable[..., Path]) -> None:
        root = make_project({"package.json": "{}"})
        reporter = MagicMock()

        run_cleanup(_options(root), reporter=reporter, cwd=root)

        reporter.assert_not_called()

    def test_config_from_project_files(self, make_project: Callable[..., Path]) -> None:
        root = make_project(
            {
                "package.json": json.dumps({"cleaninstallNode": {"dirsToRemove": ["out"]}}),
                "out": {},
                "node_modules": {},
            }
        )

        summary = run_cleanup(_options(root), cwd=root)

        assert summary.result.removed_paths == (root.resolve() / "out",)
        assert (root / "node_modules").exists()
