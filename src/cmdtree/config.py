"""
Project configuration support for cmdtree programs.

A project is marked by a ``<program>.yml`` (or ``<program>.yaml``) file in its
root directory. Commands find the root by walking up from the working
directory and load the file as a plain mapping.

CLI construction settings live in :class:`CLIConfig`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cmdtree.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class CLIConfig:
    """Settings for building a CLI.

    Attributes:
        command_name: Program name used in usage lines and config file names.
        search_directories: Directories scanned for command modules. When
            empty, ``./commands`` under the working directory is used.
        version: Version string printed by ``--version``. Defaults to the
            cmdtree version.
    """

    command_name: str = "app"
    search_directories: list[Path] = field(default_factory=list)
    version: str | None = None


def config_filenames(program_name: str) -> list[str]:
    """Return the config file names that mark a project root."""
    return [f"{program_name}.yml", f"{program_name}.yaml"]


def _find_config_file(program_name: str, start_dir: Path) -> Path | None:
    """
    Find the project config file by walking up the directory tree.

    Args:
        program_name: Program name the config file is named after
        start_dir: Directory to start searching from

    Returns:
        Path to the config file if found, None otherwise
    """
    current = Path(start_dir).resolve()

    while True:
        for filename in config_filenames(program_name):
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at filesystem root
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def find_project_root(program_name: str, start_dir: Path | str | None = None) -> Path | None:
    """
    Locate the project root for a program.

    Args:
        program_name: Program name the config file is named after
        start_dir: Directory to start searching from (default: current directory)

    Returns:
        Directory containing ``<program_name>.yml``/``.yaml``, or None
    """
    if start_dir is None:
        start_dir = Path.cwd()

    config_path = _find_config_file(program_name, Path(start_dir))
    if config_path is None:
        return None

    logger.debug(f"Project root found at: {config_path.parent}")
    return config_path.parent


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file safely.

    Args:
        path: Path to YAML file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigurationError: If the YAML is invalid or not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path.name}",
            context={"file": str(path), "error": str(e)},
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {path.name}",
            context={"file": str(path), "error": str(e)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path.name} must contain a mapping",
            context={"file": str(path), "got": type(data).__name__},
        )
    return data


def load_config(program_name: str, root_dir: Path | str) -> dict[str, Any]:
    """
    Load the project config for a program.

    Args:
        program_name: Program name the config file is named after
        root_dir: Directory to start searching from, normally the project root

    Returns:
        Parsed config mapping, or an empty dict when no config file exists
    """
    config_path = _find_config_file(program_name, Path(root_dir))
    if config_path is None:
        logger.debug(f"No config found in {root_dir}")
        return {}

    logger.debug(f"Loaded config from {config_path}")
    return _load_yaml_file(config_path)
