"""
Argument grammar helpers for cmdtree.

Wraps argparse so that the router can build one grammar entry per command
group, and defines the global options every command accepts.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, NoReturn, Sequence

from cmdtree.cli.command_protocol import OptionSpec, option_key
from cmdtree.exceptions import ParseError

__all__ = [
    "GLOBAL_OPTIONS",
    "HELP_FLAGS",
    "CommandParser",
    "ParserExit",
    "ParserRecord",
    "add_global_options",
    "add_option",
    "option_default",
    "first_non_flag",
    "fold_unknown_options",
]

GLOBAL_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("--help", "Display this message"),
    OptionSpec("--version", "Display version number"),
    OptionSpec("--root-dir <path>", "Override project root"),
    OptionSpec("--debug", "Enable debug mode"),
)

HELP_FLAGS = ("--help", "-h")


class ParserExit(Exception):
    """Raised instead of exiting when argparse finishes early (e.g. --version)."""

    def __init__(self, status: int = 0):
        self.status = status
        super().__init__(status)


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process.

    Sub-parsers created through ``add_subparsers`` inherit this class.
    """

    def error(self, message: str) -> NoReturn:
        raise ParseError(message, context={"usage": self.format_usage().strip()})

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            self._print_message(message)
        raise ParserExit(status)


@dataclass
class ParserRecord:
    """What the grammar layer registered for a leaf command.

    Attributes:
        raw_name: Registered usage form, e.g. ``"greet [name]"``.
        description: Description the sub-parser was created with.
        options: Declared options merged with the global options.
    """

    raw_name: str
    description: str = ""
    options: list[OptionSpec] = field(default_factory=list)


def option_default(spec: OptionSpec) -> Any:
    """Value an option gets when it is not given; boolean flags get False."""
    if not spec.takes_value and spec.default is None:
        return False
    return spec.default


def add_option(parser: argparse.ArgumentParser, spec: OptionSpec) -> None:
    """Register one declared option on a parser."""
    kwargs: dict[str, Any] = {
        "dest": spec.key,
        "help": spec.description or None,
        "default": option_default(spec),
    }
    if spec.value_optional:
        kwargs.update(nargs="?", const=True, metavar=spec.metavar)
    elif spec.takes_value:
        kwargs.update(metavar=spec.metavar)
    else:
        kwargs.update(action="store_true")
    parser.add_argument(*spec.flags, **kwargs)


def add_global_options(
    parser: argparse.ArgumentParser, version: str, suppress_defaults: bool = False
) -> None:
    """Register the global options on a parser.

    Sub-parsers pass ``suppress_defaults=True``: argparse copies every
    sub-parser default over the parent namespace, which would reset a
    global flag given before the command name.
    """
    help_opt, version_opt, root_dir_opt, debug_opt = GLOBAL_OPTIONS
    defaults: dict[str, Any] = {"default": argparse.SUPPRESS} if suppress_defaults else {}
    parser.add_argument(
        "-h", "--help", action="store_true", help=help_opt.description, **defaults
    )
    parser.add_argument(
        "--version", action="version", version=version, help=version_opt.description
    )
    parser.add_argument(
        "--root-dir",
        dest="root_dir",
        metavar="path",
        help=root_dir_opt.description,
        **defaults,
    )
    parser.add_argument(
        "--debug", action="store_true", help=debug_opt.description, **defaults
    )


def first_non_flag(argv: Sequence[str]) -> str | None:
    """Return the first token that does not start with a dash."""
    for token in argv:
        if not token.startswith("-"):
            return token
    return None


def fold_unknown_options(
    tokens: Sequence[str], declared: Sequence[OptionSpec] = ()
) -> tuple[dict[str, Any], list[str]]:
    """Turn tokens argparse did not recognize into an options mapping.

    Declared options with a value placeholder consume the next token
    (``--ref main``); ``--key=value`` is split on ``=``; any other flag is
    set to True. Undeclared flags followed by a non-flag token take it as
    their value. A bare ``--`` ends option processing.

    Args:
        tokens: Unrecognized tokens, in command-line order.
        declared: Options the target command declares.

    Returns:
        Tuple of (options mapping, leftover positional tokens).
    """
    by_flag = {flag: spec for spec in declared for flag in spec.flags}
    options: dict[str, Any] = {}
    positionals: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        if token == "--":
            positionals.extend(tokens[i:])
            break

        if not token.startswith("-") or token == "-":
            positionals.append(token)
            continue

        flag, sep, inline_value = token.partition("=")
        spec = by_flag.get(flag)
        key = spec.key if spec is not None else option_key(flag)

        if sep:
            options[key] = inline_value
            continue

        next_is_value = i < len(tokens) and not tokens[i].startswith("-")
        if spec is not None:
            if spec.takes_value and next_is_value:
                options[key] = tokens[i]
                i += 1
            elif spec.takes_value and not spec.value_optional:
                raise ParseError(f"option '{flag}' requires a value")
            else:
                options[key] = True
        elif next_is_value:
            options[key] = tokens[i]
            i += 1
        else:
            options[key] = True

    return options, positionals
