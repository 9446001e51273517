"""Command protocol for cmdtree.

Defines the interface that discovered command modules implement and the
declarative descriptors they use for their positional arguments and options.

Usage:
    from cmdtree.cli.base import BaseCommand
    from cmdtree.cli.command_protocol import ArgumentSpec, CommandArgs, OptionSpec

    class AddCommand(BaseCommand):
        description = "Add a module to the project"
        args = CommandArgs(
            args=[ArgumentSpec("url", required=True, description="Module repository")],
            options=[OptionSpec("--ref <name>", "Branch or tag", default="main")],
        )

        def run(self, options):
            self.info(f"Adding {options['url']} at {options['ref']}")

A command module may also declare ``args`` as a plain mapping::

    args = {
        "args": [{"name": "files...", "required": True}],
        "options": [{"name": "--dry-run", "description": "Only print"}],
    }
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

VARIADIC_SUFFIX = "..."

_PLACEHOLDER_RE = re.compile(r"^[<\[].*[>\]]$")


@runtime_checkable
class Command(Protocol):
    """Protocol for discovered command classes.

    Instances are constructed fresh for every invocation with
    ``(cli, options)``; ``init`` prepares per-invocation state and ``run``
    executes. Either may be a coroutine function.

    Class attributes (all optional):
        usage: Explicit usage line shown in help.
        description: One-line description shown in command tables.
        args: ``CommandArgs`` or mapping with ``args``/``options`` lists.
        requires_project: Fail unless a project root is found.
    """

    def init(self) -> Any:
        """Prepare the instance before ``run``."""
        ...

    def run(self, options: dict[str, Any]) -> Any:
        """Execute the command with the mapped options."""
        ...


@dataclass(frozen=True)
class ArgumentSpec:
    """A positional argument.

    A trailing ``...`` on ``name`` marks the argument variadic: it collects
    every remaining positional value.
    """

    name: str
    required: bool = False
    description: str = ""
    default: Any = None

    @property
    def variadic(self) -> bool:
        return self.name.endswith(VARIADIC_SUFFIX)

    @property
    def key(self) -> str:
        """Name with the variadic suffix stripped; the options key."""
        if self.variadic:
            return self.name[: -len(VARIADIC_SUFFIX)]
        return self.name

    @property
    def usage(self) -> str:
        """Usage fragment: ``<name>``/``<...name>`` or ``[name]``/``[...name]``."""
        inner = f"...{self.key}" if self.variadic else self.key
        return f"<{inner}>" if self.required else f"[{inner}]"

    @classmethod
    def coerce(cls, value: ArgumentSpec | Mapping[str, Any]) -> ArgumentSpec:
        if isinstance(value, cls):
            return value
        return cls(
            name=value["name"],
            required=bool(value.get("required", False)),
            description=value.get("description") or "",
            default=value.get("default"),
        )


@dataclass(frozen=True)
class OptionSpec:
    """A flag option in its flag form, e.g. ``"--retries <n>"`` or ``"-f, --force"``.

    ``<value>`` marks a required value, ``[value]`` an optional one; with no
    placeholder the option is a boolean flag.
    """

    name: str
    description: str = ""
    default: Any = None

    @property
    def flags(self) -> list[str]:
        tokens = self.name.replace(",", " ").split()
        return [token for token in tokens if token.startswith("-")]

    @property
    def placeholder(self) -> str | None:
        tokens = self.name.replace(",", " ").split()
        for token in tokens:
            if _PLACEHOLDER_RE.match(token):
                return token
        return None

    @property
    def takes_value(self) -> bool:
        return self.placeholder is not None

    @property
    def value_optional(self) -> bool:
        placeholder = self.placeholder
        return placeholder is not None and placeholder.startswith("[")

    @property
    def metavar(self) -> str | None:
        placeholder = self.placeholder
        return placeholder[1:-1] if placeholder else None

    @property
    def key(self) -> str:
        """Runtime lookup key: ``--dry-run`` becomes ``dry_run``."""
        flags = self.flags
        if not flags:
            raise ValueError(f"Option {self.name!r} has no flag")
        long_flags = [flag for flag in flags if flag.startswith("--")]
        flag = long_flags[0] if long_flags else flags[0]
        return option_key(flag)

    @classmethod
    def coerce(cls, value: OptionSpec | Mapping[str, Any]) -> OptionSpec:
        if isinstance(value, cls):
            return value
        return cls(
            name=value["name"],
            description=value.get("description") or "",
            default=value.get("default"),
        )


def option_key(flag: str) -> str:
    """Strip leading dashes and convert kebab-case to snake_case."""
    return flag.lstrip("-").replace("-", "_")


@dataclass(frozen=True)
class CommandArgs:
    """Positional arguments and options declared by a command."""

    args: tuple[ArgumentSpec, ...] = ()
    options: tuple[OptionSpec, ...] = ()

    def __init__(self, args=(), options=()):
        object.__setattr__(self, "args", tuple(ArgumentSpec.coerce(a) for a in args or ()))
        object.__setattr__(
            self, "options", tuple(OptionSpec.coerce(o) for o in options or ())
        )

    @classmethod
    def coerce(cls, value: CommandArgs | Mapping[str, Any] | None) -> CommandArgs:
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(args=value.get("args"), options=value.get("options"))

    def validate(self) -> None:
        """Raise ValueError if a variadic argument is not the last one."""
        for spec in self.args[:-1]:
            if spec.variadic:
                raise ValueError(
                    f"Variadic argument '{spec.name}' must be the last argument"
                )


@dataclass(frozen=True)
class CommandMetadata:
    """Static metadata read from a command class."""

    usage: str = ""
    description: str = ""
    args: CommandArgs = field(default_factory=CommandArgs)
    requires_project: bool = False

    @classmethod
    def from_class(cls, command_class: type) -> CommandMetadata:
        return cls(
            usage=getattr(command_class, "usage", "") or "",
            description=getattr(command_class, "description", "") or "",
            args=CommandArgs.coerce(getattr(command_class, "args", None)),
            requires_project=bool(getattr(command_class, "requires_project", False)),
        )
