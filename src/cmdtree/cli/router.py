"""
Command routing for cmdtree.

Turns a Registry into an argparse grammar and the dispatch logic behind it.
Commands are grouped by their first path token:

- a *leaf command* (``build``) gets a sub-parser with its own positional
  slots and options;
- a *namespace command* (``module add``, ``module remove``) gets a single
  ``module [subcommand] [...args]`` sub-parser that accepts unknown options
  and picks the child at dispatch time.

Every dispatch returns an :class:`~cmdtree.cli.outcome.Outcome`; nothing in
here exits the process.
"""

from __future__ import annotations

import argparse
import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Sequence

from cmdtree.cli.command_protocol import ArgumentSpec
from cmdtree.cli.outcome import Outcome
from cmdtree.cli.parser import (
    GLOBAL_OPTIONS,
    ParserRecord,
    add_global_options,
    add_option,
    fold_unknown_options,
    option_default,
)
from cmdtree.cli.registry import LoadedCommand, Registry
from cmdtree.cli.utils import format_error, print_error, print_message
from cmdtree.exceptions import CmdTreeError, ParseError, ValidationError
from cmdtree.logging import is_debug_mode

if TYPE_CHECKING:
    from cmdtree.cli.app import CLI

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, Sequence[str]], Outcome]

HELP_COMMAND = "help"


def run_lifecycle(instance: Any, options: dict[str, Any]) -> Any:
    """Run ``init`` then ``run`` on a command instance.

    Either phase may return an awaitable; once one does, the rest of the
    lifecycle runs on a single event loop.
    """
    pending = instance.init()
    if inspect.isawaitable(pending):
        return asyncio.run(_finish_lifecycle(pending, instance, options))

    result = instance.run(options)
    if inspect.isawaitable(result):
        return asyncio.run(result)
    return result


async def _finish_lifecycle(pending: Any, instance: Any, options: dict[str, Any]) -> Any:
    await pending
    result = instance.run(options)
    if inspect.isawaitable(result):
        result = await result
    return result


def collect_options(namespace: argparse.Namespace) -> dict[str, Any]:
    """Flatten a parsed namespace into an options mapping.

    Internal attributes (leading underscore) are dropped.
    """
    return {key: value for key, value in vars(namespace).items() if not key.startswith("_")}


def map_arguments(
    specs: Sequence[ArgumentSpec],
    positionals: Sequence[Any],
    options: dict[str, Any],
    variadic_takes_rest: bool = False,
) -> ArgumentSpec | None:
    """Map positional values onto their argument specs by position.

    Values are stored in ``options`` under each spec's key. An absent
    optional argument with a declared default gets the default.

    Args:
        specs: Declared positional arguments.
        positionals: Parsed positional values, one per spec for leaf
            commands or the raw remainder for namespace children.
        options: Options mapping to update in place.
        variadic_takes_rest: A variadic spec takes every value from its
            index onward.

    Returns:
        The first required spec without a value, or None.
    """
    for index, spec in enumerate(specs):
        if spec.variadic and variadic_takes_rest:
            value: Any = list(positionals[index:])
        else:
            value = positionals[index] if index < len(positionals) else None

        if value is not None and value != []:
            options[spec.key] = value
        elif spec.required:
            return spec
        elif spec.default is not None:
            options.setdefault(spec.key, spec.default)
    return None


def _require_arguments(
    command: LoadedCommand,
    positionals: Sequence[Any],
    options: dict[str, Any],
    variadic_takes_rest: bool = False,
) -> None:
    """Map positionals for ``command``; raise if a required one is missing."""
    missing = map_arguments(
        command.metadata.args.args, positionals, options, variadic_takes_rest
    )
    if missing is not None:
        raise ValidationError(
            f"Missing required argument: {missing.key}",
            context={"command": command.command_path, "argument": missing.name},
        )


def _positional_dest(index: int) -> str:
    return f"_arg{index}"


def leaf_usage(command: LoadedCommand) -> str:
    """Usage form registered for a leaf command; every slot is optional."""
    parts = [command.command_path]
    for spec in command.metadata.args.args:
        parts.append(f"[...{spec.key}]" if spec.variadic else f"[{spec.key}]")
    return " ".join(parts)


class Router:
    """Builds the grammar for a Registry and dispatches parsed invocations."""

    def __init__(self, cli: CLI):
        self.cli = cli
        self.registry = Registry()
        self.records: dict[str, ParserRecord] = {}
        self.help_command: LoadedCommand | None = None
        self.parser: argparse.ArgumentParser | None = None

    def build_and_register(
        self, registry: Registry, parser: argparse.ArgumentParser
    ) -> dict[str, ParserRecord]:
        """Register every command group on ``parser``.

        Args:
            registry: Discovered commands.
            parser: Top-level parser; sub-parsers are added to it.

        Returns:
            Parser records for the leaf commands, keyed by command path.
        """
        self.registry = registry
        self.parser = parser
        self.records = {}
        self.help_command = registry.find(HELP_COMMAND)
        if self.help_command is None:
            logger.debug("No help command registered, using parser help")

        subparsers = parser.add_subparsers(dest="_command", metavar="<command>")

        for root, group in registry.groups().items():
            if len(group) == 1 and group[0].command_path == root:
                self._register_leaf(subparsers, group[0])
            else:
                self._register_namespace(subparsers, root, group)

        return self.records

    def _add_parser(self, subparsers: Any, name: str, usage: str, description: str):
        return subparsers.add_parser(
            name,
            help=description or None,
            description=description or None,
            usage=f"{self.cli.name} {usage}",
            add_help=False,
            allow_abbrev=False,
            conflict_handler="resolve",
        )

    def _register_leaf(self, subparsers: Any, command: LoadedCommand) -> None:
        metadata = command.metadata
        usage = leaf_usage(command)
        sub = self._add_parser(subparsers, command.root, usage, metadata.description)

        # Required-ness is checked after parsing so a bare --help still parses
        dests = []
        for index, spec in enumerate(metadata.args.args):
            dest = _positional_dest(index)
            sub.add_argument(
                dest,
                metavar=spec.key,
                nargs="*" if spec.variadic else "?",
                help=spec.description or None,
            )
            dests.append(dest)

        for option in metadata.args.options:
            add_option(sub, option)
        add_global_options(sub, self.cli.version_string, suppress_defaults=True)

        sub.set_defaults(_handler=self._leaf_handler(command, dests))
        self.records[command.command_path] = ParserRecord(
            raw_name=usage,
            description=metadata.description,
            options=[*metadata.args.options, *GLOBAL_OPTIONS],
        )
        logger.debug(f"Registered leaf command: {usage}")

    def _register_namespace(
        self, subparsers: Any, root: str, group: list[LoadedCommand]
    ) -> None:
        usage = f"{root} [subcommand] [...args]"
        sub = self._add_parser(subparsers, root, usage, f"Manage {root} commands")
        sub.add_argument("_subcommand", metavar="subcommand", nargs="?")
        sub.add_argument("_args", metavar="args", nargs="*")
        add_global_options(sub, self.cli.version_string, suppress_defaults=True)

        sub.set_defaults(
            _handler=self._namespace_handler(root, group),
            _accepts_unknown=True,
        )
        logger.debug(f"Registered namespace command: {usage}")

    def _leaf_handler(self, command: LoadedCommand, dests: list[str]) -> Handler:
        parts = [command.command_path]

        def handle(namespace: argparse.Namespace, extras: Sequence[str]) -> Outcome:
            options = collect_options(namespace)
            if options.get("help"):
                self.show_help(parts)
                return Outcome.success()

            positionals = [getattr(namespace, dest, None) for dest in dests]
            try:
                _require_arguments(command, positionals, options)
            except ValidationError as e:
                return self._reject(e, parts)

            return self.invoke(command, options, parts)

        return handle

    def _namespace_handler(self, root: str, group: list[LoadedCommand]) -> Handler:
        def handle(namespace: argparse.Namespace, extras: Sequence[str]) -> Outcome:
            options = collect_options(namespace)
            subcommand = getattr(namespace, "_subcommand", None)
            remainder = list(getattr(namespace, "_args", None) or [])

            if not subcommand or options.get("help"):
                self.show_help([part for part in (root, subcommand) if part])
                return Outcome.success()

            parts = [root, subcommand]
            # Descend while the next token names a deeper command
            while remainder and _names_command(group, [*parts, remainder[0]]):
                parts.append(remainder.pop(0))

            full_path = " ".join(parts)
            command = next((c for c in group if c.command_path == full_path), None)
            if command is None:
                if _names_command(group, parts):
                    self.show_help(parts)
                    return Outcome.success()
                message = f"Unknown subcommand '{subcommand}' for '{root}'"
                print_message(message)
                return Outcome.validation_error(message)

            metadata = command.metadata
            try:
                extra_options, leftovers = fold_unknown_options(extras, metadata.args.options)
                child_options = {**options, **extra_options}
                _require_arguments(
                    command,
                    [*remainder, *leftovers],
                    child_options,
                    variadic_takes_rest=True,
                )
            except (ParseError, ValidationError) as e:
                return self._reject(e, parts)

            for option in metadata.args.options:
                if option.key not in child_options:
                    child_options[option.key] = option_default(option)

            return self.invoke(command, child_options, parts)

        return handle

    def _reject(self, error: CmdTreeError, parts: Sequence[str]) -> Outcome:
        """Report an invalid invocation with help for the command."""
        print_message(error.message)
        self.show_help(parts)
        return Outcome.validation_error(error.message)

    def invoke(
        self, command: LoadedCommand, options: dict[str, Any], parts: Sequence[str]
    ) -> Outcome:
        """Construct a fresh instance of ``command`` and run its lifecycle."""
        logger.debug(f"Running command: {command.command_path}")
        try:
            instance = command.factory(self.cli, options)
            run_lifecycle(instance, options)
        except Exception as e:
            print_error(e, verbose=bool(options.get("debug")) or is_debug_mode())
            self.show_help(parts)
            return Outcome.execution_error(format_error(e))
        return Outcome.success()

    def show_help(self, parts: Sequence[str]) -> bool:
        """Render help for a command path through the help command.

        Falls back to the parser's own help when no help command exists.

        Returns:
            False if the help command could not resolve ``parts``.
        """
        if self.help_command is None:
            if self.parser is not None:
                self.parser.print_help()
            return True

        instance = self.help_command.factory(self.cli, {})
        try:
            result = instance.run({"command": list(parts)})
            if inspect.isawaitable(result):
                asyncio.run(result)
        except CmdTreeError as e:
            print_message(e.message)
            return False
        return True


def _names_command(group: list[LoadedCommand], parts: Sequence[str]) -> bool:
    """True if ``parts`` is a command path or a prefix of one in ``group``."""
    path = " ".join(parts)
    return any(c.command_path == path or c.command_path.startswith(path + " ") for c in group)
