"""
Custom exception hierarchy for cmdtree.

Provides consistent error handling with context, suggestions, and actionable guidance.
All exceptions include:
- Context information (file paths, command paths, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from cmdtree.exceptions import CommandLoadError, ProjectRequiredError

    raise CommandLoadError(
        "Variadic argument must be last",
        context={"file": "commands/module/add.py", "argument": "files..."},
        suggestions=["Move 'files...' to the end of the args list"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class CmdTreeError(Exception):
    """
    Base exception for all cmdtree errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (file, command, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class CommandLoadError(CmdTreeError):
    """
    A single command file could not be turned into a command.

    Raised while loading one file during discovery: the import failed, the
    module has no usable command export, or the declared metadata is invalid.
    Discovery logs it and moves on to the next file.

    Example::

        raise CommandLoadError(
            "No command class exported",
            file_path="commands/build.py",
            suggestions=["Define a class with a run() method or assign it to 'command'"],
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        super().__init__(message, ctx, suggestions)


class ParseError(CmdTreeError):
    """
    The raw invocation was rejected by the argument grammar.

    Raised by the parser before any command-specific dispatch runs,
    e.g. for an unknown top-level command or a missing option value.
    """

    pass


class ValidationError(CmdTreeError):
    """
    A matched invocation failed validation.

    Raised for a missing required positional argument or a subcommand
    that does not exist in its namespace.
    """

    pass


class ExecutionError(CmdTreeError):
    """
    A command's init or run phase failed.

    Example::

        raise ExecutionError(
            "Deployment failed",
            context={"command": "deploy", "stage": "upload"},
        )
    """

    pass


class ProjectRequiredError(CmdTreeError):
    """
    A command that needs a project was run outside of one.

    The message names the config file that marks a project root.
    """

    def __init__(self, program_name: str, start_dir: Optional[Union[str, Path]] = None):
        context = {"searched_from": str(start_dir)} if start_dir else None
        super().__init__(
            f"This command requires to be run within a {program_name} project "
            f"({program_name}.yml not found).",
            context=context,
            suggestions=[
                f"Create {program_name}.yml (or {program_name}.yaml) in the project root",
                "Pass --root-dir <path> to point at an existing project",
            ],
        )


class CommandNotFoundError(CmdTreeError):
    """
    No command or namespace matches a help query.
    """

    pass


class ConfigurationError(CmdTreeError):
    """
    Configuration or settings error.

    Raised when a project config file cannot be read or is not valid YAML.

    Example::

        raise ConfigurationError(
            "Invalid YAML in project config",
            context={"file": "/work/app.yml", "error": "mapping values are not allowed here"},
        )
    """

    pass


class ShellCommandError(CmdTreeError):
    """
    A shell command run through cmdtree.shell exited with a non-zero status.
    """

    pass


__all__ = [
    "CmdTreeError",
    "CommandLoadError",
    "ParseError",
    "ValidationError",
    "ExecutionError",
    "ProjectRequiredError",
    "CommandNotFoundError",
    "ConfigurationError",
    "ShellCommandError",
]
