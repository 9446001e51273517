"""Base class for cmdtree commands.

Subclass it in a command module and implement ``run``:

    from cmdtree import BaseCommand

    class BuildCommand(BaseCommand):
        description = "Build the project"
        requires_project = True

        def run(self, options):
            target = self.config.get("target", "dist")
            self.success(f"Built into {target}")

``init`` runs before ``run`` on every invocation. It resolves the project
root (``--root-dir`` or the nearest ``<program>.yml``) and loads its config.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn

from cmdtree.cli.command_protocol import CommandArgs
from cmdtree.cli.utils import get_error_console, get_output_console
from cmdtree.config import find_project_root, load_config
from cmdtree.exceptions import ExecutionError, ProjectRequiredError

logger = logging.getLogger(__name__)


class BaseCommand:
    """Common lifecycle and output helpers for commands."""

    usage: str = ""
    description: str = ""
    args: CommandArgs = CommandArgs()
    requires_project: bool = False

    def __init__(self, cli: Any = None, options: dict[str, Any] | None = None):
        self.cli = cli
        self.global_options: dict[str, Any] = dict(options or {})
        self.project_root: Path | None = None
        self.config: dict[str, Any] = {}

    @property
    def program_name(self) -> str:
        return getattr(self.cli, "name", None) or "app"

    def init(self) -> None:
        """Resolve the project root and load the project config."""
        root_dir = self.global_options.get("root_dir")
        if root_dir:
            self.project_root = Path(root_dir)
        else:
            self.project_root = find_project_root(self.program_name, Path.cwd())

        if self.requires_project and self.project_root is None:
            raise ProjectRequiredError(self.program_name, Path.cwd())

        if self.project_root is not None:
            self.config = load_config(self.program_name, self.project_root)
            logger.debug(f"Loaded config from {self.project_root}")

    def run(self, options: dict[str, Any]) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement run()")

    # Helpers

    def success(self, msg: str) -> None:
        get_output_console().print(msg, style="green", markup=False, highlight=False)

    def info(self, msg: str) -> None:
        get_output_console().print(msg, markup=False, highlight=False)

    def warn(self, msg: str) -> None:
        get_error_console().print(msg, style="yellow", markup=False, highlight=False)

    def error(self, msg: str | BaseException) -> NoReturn:
        """Abort the command; the CLI reports the message and exits 1."""
        if isinstance(msg, BaseException):
            raise msg
        raise ExecutionError(msg)
