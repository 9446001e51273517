"""Helpers for writing command trees in tests."""

import json
import textwrap
from pathlib import Path

PROGRAM_NAME = "testcli"

# Prints the options it receives as one sorted JSON line
ECHO_COMMAND = '''
import json

from cmdtree import ArgumentSpec, BaseCommand, CommandArgs, OptionSpec


class EchoCommand(BaseCommand):
    description = "{description}"
    args = CommandArgs(
        args={args},
        options={options},
    )

    def run(self, options):
        print("OPTIONS: " + json.dumps(options, sort_keys=True, default=str))
'''

GREET_COMMAND = """
from cmdtree import ArgumentSpec, BaseCommand, CommandArgs


class GreetCommand(BaseCommand):
    description = "Greet someone"
    args = CommandArgs(
        args=[ArgumentSpec("name", required=True, description="Who to greet")],
    )

    def run(self, options):
        print(f"Hello, {options['name']}!")
"""


def write_command(root: Path, relative: str, source: str) -> Path:
    """Write a command module below ``root`` and return its path."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip())
    return path


def echo_command(description: str = "", args: str = "[]", options: str = "[]") -> str:
    """Source for a command that prints its options."""
    return ECHO_COMMAND.format(description=description, args=args, options=options)


def parse_options(output: str) -> dict:
    """Extract the options printed by an echo command."""
    for line in output.splitlines():
        if line.startswith("OPTIONS: "):
            return json.loads(line[len("OPTIONS: "):])
    raise AssertionError(f"No OPTIONS line in output:\n{output}")
