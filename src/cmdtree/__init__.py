"""
cmdtree: assemble a command-line program from a directory of command modules.

Each Python file under a commands directory becomes a command named after
its path; nested directories become namespaces. Arguments and options are
declared on the command class, and help text is generated from them.

Modules:
    cli.registry: Command discovery
    cli.router: Grammar building and dispatch
    cli.help: Help text rendering
    cli.base: BaseCommand lifecycle and helpers
    config: Project root detection and YAML config
    shell: Shell command helper

Quick Start::

    # commands/greet.py
    from cmdtree import ArgumentSpec, BaseCommand, CommandArgs

    class GreetCommand(BaseCommand):
        description = "Say hello"
        args = CommandArgs(args=[ArgumentSpec("name", required=True)])

        def run(self, options):
            self.info(f"Hello, {options['name']}!")

    # mytool.py
    from cmdtree import CLI, CLIConfig

    CLI(CLIConfig(command_name="mytool", search_directories=["commands"])).start()
"""

__version__ = "0.1.0"

# Command model
from cmdtree.cli.command_protocol import (
    ArgumentSpec,
    Command,
    CommandArgs,
    CommandMetadata,
    OptionSpec,
)
from cmdtree.cli.base import BaseCommand

# Application
from cmdtree.cli.app import CLI
from cmdtree.cli.registry import LoadedCommand, Registry, discover_commands
from cmdtree.config import CLIConfig, find_project_root, load_config

# Utilities
from cmdtree.logging import disable_verbose, enable_verbose, set_debug_mode
from cmdtree.shell import ShellResult, run_command

__all__ = [
    # Version
    "__version__",
    # Command model
    "ArgumentSpec",
    "OptionSpec",
    "CommandArgs",
    "CommandMetadata",
    "Command",
    "BaseCommand",
    # Application
    "CLI",
    "CLIConfig",
    "LoadedCommand",
    "Registry",
    "discover_commands",
    # Config
    "find_project_root",
    "load_config",
    # Utilities
    "enable_verbose",
    "disable_verbose",
    "set_debug_mode",
    "run_command",
    "ShellResult",
]
