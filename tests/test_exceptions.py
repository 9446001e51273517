"""Tests for cmdtree.exceptions module."""

import pytest

from cmdtree.exceptions import (
    CmdTreeError,
    CommandLoadError,
    CommandNotFoundError,
    ConfigurationError,
    ExecutionError,
    ParseError,
    ProjectRequiredError,
    ShellCommandError,
    ValidationError,
)


class TestCmdTreeError:
    """Tests for the base exception class."""

    def test_basic_message(self):
        """Test basic error message."""
        err = CmdTreeError("Something went wrong")
        assert str(err) == "Something went wrong"
        assert err.message == "Something went wrong"
        assert err.context == {}
        assert err.suggestions == []

    def test_with_context(self):
        """Test error with context dictionary."""
        err = CmdTreeError(
            "Load failed",
            context={"file": "commands/build.py", "line": 42},
        )
        msg = str(err)
        assert "Load failed" in msg
        assert "Context:" in msg
        assert "file: commands/build.py" in msg
        assert "line: 42" in msg

    def test_with_suggestions(self):
        """Test error with suggestions list."""
        err = CmdTreeError(
            "Invalid command",
            suggestions=["Export a command class", "Check the run() signature"],
        )
        msg = str(err)
        assert "Suggestions:" in msg
        assert "  - Export a command class" in msg
        assert "  - Check the run() signature" in msg

    def test_context_before_suggestions(self):
        err = CmdTreeError("Failed", context={"a": 1}, suggestions=["fix it"])
        msg = str(err)
        assert msg.index("Context:") < msg.index("Suggestions:")

    def test_can_be_raised_and_caught(self):
        """Test exception can be raised and caught."""
        with pytest.raises(CmdTreeError) as exc_info:
            raise CmdTreeError("Test error")
        assert exc_info.value.message == "Test error"


class TestSubclasses:
    """Tests for the concrete error types."""

    @pytest.mark.parametrize(
        "error_class",
        [
            CommandLoadError,
            ParseError,
            ValidationError,
            ExecutionError,
            CommandNotFoundError,
            ConfigurationError,
            ShellCommandError,
        ],
    )
    def test_inherits_from_base(self, error_class):
        err = error_class("message")
        assert isinstance(err, CmdTreeError)
        assert err.message == "message"

    def test_command_load_error_file_path(self):
        err = CommandLoadError("No command exported", file_path="commands/build.py")
        assert err.context == {"file": "commands/build.py"}
        assert "file: commands/build.py" in str(err)

    def test_command_load_error_keeps_explicit_file(self):
        err = CommandLoadError(
            "Failed", context={"file": "explicit.py"}, file_path="ignored.py"
        )
        assert err.context["file"] == "explicit.py"


class TestProjectRequiredError:
    """Tests for ProjectRequiredError."""

    def test_message_names_config_file(self):
        err = ProjectRequiredError("mytool")
        assert err.message == (
            "This command requires to be run within a mytool project "
            "(mytool.yml not found)."
        )
        assert err.context == {}

    def test_start_dir_in_context(self, tmp_path):
        err = ProjectRequiredError("mytool", tmp_path)
        assert err.context == {"searched_from": str(tmp_path)}

    def test_suggestions(self):
        err = ProjectRequiredError("mytool")
        assert any("mytool.yml" in s for s in err.suggestions)
        assert any("--root-dir" in s for s in err.suggestions)
