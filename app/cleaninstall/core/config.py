"""Configuration assembly from defaults, project files and overrides.

Sources are layered in a fixed order, later sources winning:

1. Built-in defaults
2. ``cleaninstallNode`` section of ``package.json``
3. ``workspaces`` field of ``package.json`` (appended)
4. ``.cleaninstallnoderc``
5. ``packages`` of ``pnpm-workspace.yaml`` (appended)
6. Caller-supplied overrides

A malformed source only produces a warning; its contribution is
skipped and assembly continues with the remaining sources.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from cleaninstall.core.errors import ConfigSourceError
from cleaninstall.models.config import (
    DEFAULT_CONFIG,
    VCS_DIR,
    CleanConfig,
    ConfigOverrides,
    ConfigSection,
)
from cleaninstall.utils.formatting import print_warning

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
RC_FILE = ".cleaninstallnoderc"
PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"

# Key of the cleanup section inside package.json
MANIFEST_SECTION = "cleaninstallNode"


def _load_json(path: Path) -> object:
    """Parse a JSON file.

    Raises:
        ConfigSourceError: If the file cannot be read or is not valid JSON.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigSourceError(path, f"invalid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigSourceError(path, f"cannot read file: {e}") from e


def _load_yaml(path: Path) -> object:
    """Parse a YAML file.

    Raises:
        ConfigSourceError: If the file cannot be read or is not valid YAML.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigSourceError(path, f"invalid YAML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigSourceError(path, f"cannot read file: {e}") from e


def _require_mapping(data: object, path: Path) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigSourceError(path, "expected an object at the top level")
    return cast(dict[str, Any], data)


def _overlay_section(config: CleanConfig, data: object, path: Path) -> CleanConfig:
    """Overlay a cleanup section, keeping values for absent keys.

    Raises:
        ConfigSourceError: If the section does not have the expected shape.
    """
    section_data = _require_mapping(data, path)
    try:
        section = ConfigSection.model_validate(section_data)
        return config.with_updates(**section.to_updates())
    except ValidationError as e:
        raise ConfigSourceError(path, f"invalid cleanup config: {e}") from e


def _string_patterns(value: object) -> list[str]:
    """Keep the string entries of a pattern sequence."""
    if not isinstance(value, list):
        return []
    return [item for item in cast(list[object], value) if isinstance(item, str)]


def manifest_workspace_patterns(manifest: dict[str, Any]) -> list[str]:
    """Extract workspace globs from a ``package.json`` object.

    Accepts both ``"workspaces": [...]`` and
    ``"workspaces": {"packages": [...]}``.
    """
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        return _string_patterns(cast(dict[str, object], workspaces).get("packages"))
    return _string_patterns(workspaces)


def _append_workspaces(config: CleanConfig, patterns: list[str]) -> CleanConfig:
    if not patterns:
        return config
    return config.with_updates(workspace_patterns=(*config.workspace_patterns, *patterns))


def _apply_source(
    config: CleanConfig,
    path: Path,
    loader: Callable[[Path], object],
    overlay: Callable[[CleanConfig, object, Path], CleanConfig],
) -> CleanConfig:
    """Apply one configuration file, if present.

    Missing files are ignored. Unreadable or malformed files are
    reported as a warning and leave ``config`` unchanged.
    """
    if not path.is_file():
        return config
    try:
        updated = overlay(config, loader(path), path)
    except ConfigSourceError as e:
        logger.warning("Ignoring config source %s: %s", path, e)
        print_warning(f"Could not parse {path.name} for config: {e}")
        return config
    logger.debug("Loaded config source %s", path)
    return updated


def _overlay_manifest(config: CleanConfig, data: object, path: Path) -> CleanConfig:
    manifest = _require_mapping(data, path)
    if MANIFEST_SECTION in manifest:
        try:
            config = _overlay_section(config, manifest[MANIFEST_SECTION], path)
        except ConfigSourceError as e:
            # The workspaces field stays usable when only the section is broken
            logger.warning("Ignoring %s section of %s: %s", MANIFEST_SECTION, path, e)
            print_warning(f"Could not parse {path.name} for config: {e}")
    return _append_workspaces(config, manifest_workspace_patterns(manifest))


def _overlay_pnpm_workspace(config: CleanConfig, data: object, path: Path) -> CleanConfig:
    if data is None:
        return config
    document = _require_mapping(data, path)
    return _append_workspaces(config, _string_patterns(document.get("packages")))


def load_config(root: Path) -> CleanConfig:
    """Load the project configuration without caller overrides.

    Args:
        root: Project root directory holding the config files.

    Returns:
        CleanConfig built from defaults and every readable source.
    """
    config = DEFAULT_CONFIG
    config = _apply_source(config, root / MANIFEST_FILE, _load_json, _overlay_manifest)
    config = _apply_source(config, root / RC_FILE, _load_json, _overlay_section)
    config = _apply_source(config, root / PNPM_WORKSPACE_FILE, _load_yaml, _overlay_pnpm_workspace)
    return config


def apply_overrides(config: CleanConfig, overrides: ConfigOverrides) -> CleanConfig:
    """Apply caller overrides on top of a loaded configuration.

    Provided scalars replace configured values, provided arrays replace
    configured arrays. Finally the VCS directory is added to the skip
    names unless ``skip_vcs`` is explicitly False, in which case it is
    removed.

    Args:
        config: Configuration loaded from files.
        overrides: Caller-supplied values; None fields are ignored.

    Returns:
        New CleanConfig with the overrides applied.
    """
    updates = overrides.model_dump(exclude_none=True, exclude={"skip_vcs"})
    if updates:
        config = config.with_updates(**updates)

    if overrides.skip_vcs is False:
        skip_dirs = tuple(name for name in config.skip_dirs if name != VCS_DIR)
    elif VCS_DIR not in config.skip_dirs:
        skip_dirs = (*config.skip_dirs, VCS_DIR)
    else:
        return config
    return config.with_updates(skip_dirs=skip_dirs)


def assemble_config(root: Path, overrides: ConfigOverrides | None = None) -> CleanConfig:
    """Assemble the configuration for a run rooted at ``root``.

    Always succeeds: in the worst case the result holds the built-in
    defaults plus the overrides.

    Args:
        root: Project root directory.
        overrides: Caller-supplied overrides, applied last.

    Returns:
        The immutable configuration shared by the whole run.
    """
    return apply_overrides(load_config(root), overrides or ConfigOverrides())
