"""
The cmdtree application object.

Wires discovery, routing and help together:

    from cmdtree import CLI, CLIConfig

    cli = CLI(CLIConfig(command_name="mytool", search_directories=[Path("commands")]))
    cli.start()          # parses sys.argv and exits with the outcome's code

``CLI.run(argv)`` does the same work and returns the exit code instead of
exiting, which is what tests use.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

from cmdtree import __version__
from cmdtree.cli.outcome import Outcome
from cmdtree.cli.parser import (
    HELP_FLAGS,
    CommandParser,
    ParserExit,
    ParserRecord,
    add_global_options,
    first_non_flag,
)
from cmdtree.cli.registry import Importer, Registry, discover_commands, load_module
from cmdtree.cli.router import Router
from cmdtree.cli.utils import print_message
from cmdtree.config import CLIConfig
from cmdtree.exceptions import ParseError
from cmdtree.logging import enable_verbose, set_debug_mode

logger = logging.getLogger(__name__)

# Ships the built-in help command
BUILTIN_COMMANDS_DIR = Path(__file__).resolve().parent.parent / "commands"


class CLI:
    """A command-line program assembled from discovered command modules."""

    def __init__(self, config: CLIConfig | None = None, importer: Importer = load_module):
        self.config = config or CLIConfig()
        self.name = self.config.command_name
        self.version = self.config.version or __version__
        self.registry = Registry()
        self.records: dict[str, ParserRecord] = {}
        self.router = Router(self)
        self.parser: CommandParser | None = None
        self._importer = importer

    @property
    def version_string(self) -> str:
        return f"{self.name} {self.version}"

    def get_commands(self) -> Registry:
        """Return the discovered commands."""
        return self.registry

    def search_directories(self) -> list[Path]:
        """Directories scanned for commands, in precedence order."""
        directories = [Path(d) for d in self.config.search_directories]
        if not directories:
            directories = [Path.cwd() / "commands"]
        return [*directories, BUILTIN_COMMANDS_DIR]

    def build_parser(self) -> CommandParser:
        parser = CommandParser(
            prog=self.name,
            usage=f"{self.name} <command> [options]",
            add_help=False,
            allow_abbrev=False,
        )
        add_global_options(parser, self.version_string)
        return parser

    def load(self) -> Registry:
        """Discover commands and build the grammar. Runs once per process."""
        directories = self.search_directories()
        if not any(d.is_dir() for d in directories[:-1]):
            logger.debug("No commands directory found.")

        self.registry = discover_commands(directories, importer=self._importer)
        self.parser = self.build_parser()
        self.records = self.router.build_and_register(self.registry, self.parser)
        return self.registry

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Run one invocation and return its exit code."""
        argv = list(sys.argv[1:] if argv is None else argv)

        # Warnings and load errors reach stderr unless --debug asks for more
        if "--debug" in argv:
            set_debug_mode(True)
        else:
            enable_verbose("WARNING")

        self.load()
        outcome = self.dispatch(argv)
        return outcome.exit_code

    def start(self, argv: Sequence[str] | None = None) -> None:
        """Run one invocation and exit the process with its exit code."""
        sys.exit(self.run(argv))

    def dispatch(self, argv: Sequence[str]) -> Outcome:
        """Parse ``argv`` and hand it to the matching command handler."""
        # A bare help request never depends on matching a command
        if any(flag in argv for flag in HELP_FLAGS) and first_non_flag(argv) is None:
            self.router.show_help([])
            return Outcome.success()

        try:
            namespace, extras = self.parser.parse_known_args(argv)
            if extras and not getattr(namespace, "_accepts_unknown", False):
                self.parser.error(f"unrecognized arguments: {' '.join(extras)}")
        except ParserExit as e:
            if e.status == 0:
                return Outcome.success()
            return Outcome.parse_error(f"parser exited with status {e.status}")
        except ParseError as e:
            return self._parse_failure(e, argv)

        handler = getattr(namespace, "_handler", None)
        if handler is None:
            self.router.show_help([])
            return Outcome.success()
        return handler(namespace, extras)

    def _parse_failure(self, error: ParseError, argv: Sequence[str]) -> Outcome:
        print_message(error.message)
        candidate = first_non_flag(argv)
        self.router.show_help([candidate] if candidate else [])
        return Outcome.parse_error(error.message)
