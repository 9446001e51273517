"""Pytest fixtures for cmdtree tests."""

from pathlib import Path

import pytest

from helpers import PROGRAM_NAME


@pytest.fixture
def commands_dir(tmp_path: Path, monkeypatch) -> Path:
    """Empty commands directory; the working directory is its parent."""
    directory = tmp_path / "commands"
    directory.mkdir()
    monkeypatch.chdir(tmp_path)
    return directory


@pytest.fixture
def make_cli(commands_dir: Path):
    """Factory for a CLI that searches ``commands_dir``."""
    from cmdtree import CLI, CLIConfig

    def _make(*extra_dirs: Path, version: str = "1.2.3"):
        config = CLIConfig(
            command_name=PROGRAM_NAME,
            search_directories=[commands_dir, *extra_dirs],
            version=version,
        )
        return CLI(config)

    return _make


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Reset cmdtree logging after each test."""
    yield
    from cmdtree.logging import disable_verbose

    disable_verbose()
