"""
Help text rendering for cmdtree.

All functions here are pure: they build and return text, and the caller
decides where it goes. Three query shapes are supported:

    app help                 -> global help (every command)
    app help module          -> namespace help ("module add", "module remove")
    app help module add      -> command help (usage, arguments, options)
"""

from __future__ import annotations

from typing import Mapping, Sequence

from cmdtree.cli.command_protocol import OptionSpec
from cmdtree.cli.parser import GLOBAL_OPTIONS, ParserRecord
from cmdtree.cli.registry import LoadedCommand, Registry
from cmdtree.exceptions import CommandNotFoundError

__all__ = [
    "render_global",
    "render_namespace",
    "render_command",
    "resolve_help",
    "synthesize_usage",
]

COMMAND_COLUMN = 25
NAMESPACE_COLUMN = 20


def _row(indent: int, name: str, width: int, text: str) -> str:
    return f"{' ' * indent}{name.ljust(width)} {text}".rstrip()


def render_global(program_name: str, registry: Registry) -> str:
    """Render help listing every command and the global options."""
    lines = [
        "",
        f"  Usage: {program_name} <command> [options]",
        "",
        "  Commands:",
        "",
    ]
    for command in registry:
        lines.append(_row(4, command.command_path, COMMAND_COLUMN, command.metadata.description))

    lines += ["", "  Options:", ""]
    for option in GLOBAL_OPTIONS:
        lines.append(_row(4, option.name, COMMAND_COLUMN, option.description))
    lines.append("")
    return "\n".join(lines)


def render_namespace(query: Sequence[str], registry: Registry) -> str:
    """Render the commands nested under a namespace."""
    prefix = " ".join(query)
    lines = ["", f"  Commands for {prefix}:", ""]
    for command in registry.namespace(prefix):
        lines.append(_row(2, command.command_path, NAMESPACE_COLUMN, command.metadata.description))
    lines.append("")
    return "\n".join(lines)


def synthesize_usage(command: LoadedCommand) -> str:
    """Build a usage line from the declared positional arguments."""
    parts = [command.command_path]
    parts.extend(spec.usage for spec in command.metadata.args.args)
    return " ".join(parts)


def _format_default(option: OptionSpec) -> str:
    if option.default:
        return f" (default: {option.default})"
    return ""


def render_command(command: LoadedCommand, record: ParserRecord | None = None) -> str:
    """Render help for a single command.

    Explicit metadata wins; the parser record fills gaps (usage and
    description); as a last resort the usage line is synthesized from the
    declared arguments.
    """
    metadata = command.metadata

    usage = metadata.usage
    if not usage and record is not None:
        usage = record.raw_name
    if not usage:
        usage = synthesize_usage(command)

    description = metadata.description or (record.description if record else "") or ""

    lines = ["", f"  Usage: {usage}", "", f"  {description}".rstrip(), ""]

    if metadata.args.args:
        lines.append("  Arguments:")
        for spec in metadata.args.args:
            required = " (required)" if spec.required else ""
            lines.append(_row(4, spec.name, COMMAND_COLUMN, f"{spec.description}{required}"))
        lines.append("")

    if record is not None:
        options = list(record.options)
    else:
        # No grammar entry of its own (nested command): add the globals here
        options = [*metadata.args.options, *GLOBAL_OPTIONS]

    if options:
        lines.append("  Options:")
        for option in options:
            lines.append(
                _row(4, option.name, COMMAND_COLUMN, f"{option.description}{_format_default(option)}")
            )
        lines.append("")

    return "\n".join(lines)


def resolve_help(
    query: Sequence[str],
    registry: Registry,
    records: Mapping[str, ParserRecord] | None = None,
    program_name: str = "app",
) -> str:
    """Resolve a help query to rendered text.

    Resolution order: empty query, exact command path, namespace prefix.

    Raises:
        CommandNotFoundError: If nothing matches the query.
    """
    path = " ".join(query)
    if not path:
        return render_global(program_name, registry)

    exact = registry.find(path)
    if exact is not None:
        record = (records or {}).get(path)
        return render_command(exact, record)

    if registry.namespace(path):
        return render_namespace(query, registry)

    raise CommandNotFoundError(f"Unknown command: {path}")
