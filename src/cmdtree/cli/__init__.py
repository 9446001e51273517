"""
Command-line interface for cmdtree.

The ``cmdtree`` program runs the commands found in ``./commands`` under the
working directory, plus the built-in ``help`` command:

    commands/
        build.py              -> cmdtree build
        module/
            add.py            -> cmdtree module add <url>
            remove.py         -> cmdtree module remove <name>

Examples:
    cmdtree --help
    cmdtree help module
    cmdtree module add https://example.com/repo.git --ref main
    cmdtree build --debug
"""

from pathlib import Path
from typing import List, Optional

from cmdtree.cli.app import CLI
from cmdtree.config import CLIConfig

__all__ = ["CLI", "main"]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cmdtree CLI."""
    cli = CLI(CLIConfig(command_name="cmdtree", search_directories=[Path.cwd() / "commands"]))
    return cli.run(argv)
