"""Tests for BaseCommand."""

from pathlib import Path
from types import SimpleNamespace

import pytest

from cmdtree import BaseCommand
from cmdtree.exceptions import ExecutionError, ProjectRequiredError


class ProjectCommand(BaseCommand):
    requires_project = True

    def run(self, options):
        return self.config


@pytest.fixture
def cli():
    return SimpleNamespace(name="tool")


class TestInit:
    """Tests for project resolution in init()."""

    def test_no_project_is_fine_by_default(self, cli, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        command = BaseCommand(cli, {})

        command.init()

        assert command.project_root is None
        assert command.config == {}

    def test_required_project_missing(self, cli, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ProjectRequiredError, match=r"tool\.yml not found"):
            ProjectCommand(cli, {}).init()

    def test_project_found_from_working_directory(self, cli, tmp_path, monkeypatch):
        (tmp_path / "tool.yml").write_text("name: demo\n")
        subdir = tmp_path / "sub"
        subdir.mkdir()
        monkeypatch.chdir(subdir)
        command = ProjectCommand(cli, {})

        command.init()

        assert command.project_root == tmp_path.resolve()
        assert command.config == {"name": "demo"}

    def test_root_dir_option_wins(self, cli, tmp_path, monkeypatch):
        (tmp_path / "tool.yml").write_text("name: cwd\n")
        other = tmp_path / "other"
        other.mkdir()
        (other / "tool.yml").write_text("name: other\n")
        monkeypatch.chdir(tmp_path)
        command = ProjectCommand(cli, {"root_dir": str(other)})

        command.init()

        assert command.project_root == Path(other)
        assert command.config == {"name": "other"}

    def test_program_name_defaults_without_cli(self):
        assert BaseCommand().program_name == "app"


class TestHelpers:
    """Tests for the output helpers."""

    def test_run_must_be_implemented(self):
        with pytest.raises(NotImplementedError):
            BaseCommand().run({})

    def test_success_and_info_go_to_stdout(self, capsys):
        command = BaseCommand()
        command.success("built")
        command.info("3 files")

        out = capsys.readouterr().out
        assert "built" in out
        assert "3 files" in out

    def test_warn_goes_to_stderr(self, capsys):
        BaseCommand().warn("careful [now]")

        assert "careful [now]" in capsys.readouterr().err

    def test_error_raises_execution_error(self):
        with pytest.raises(ExecutionError, match="bad input"):
            BaseCommand().error("bad input")

    def test_error_reraises_exception(self):
        with pytest.raises(KeyError):
            BaseCommand().error(KeyError("missing"))
