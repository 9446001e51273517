"""Command registry for cmdtree.

Discovers command modules on disk and maps their file paths to command paths:

    commands/build.py            -> "build"
    commands/module/add.py       -> "module add"
    commands/module/index.py     -> "module"
    commands/index.py            -> (nothing)

Usage:
    from cmdtree.cli.registry import discover_commands

    registry = discover_commands([Path("commands")])
    for command in registry:
        print(command.command_path, command.metadata.description)
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, Sequence

from cmdtree.cli.command_protocol import CommandMetadata
from cmdtree.exceptions import CommandLoadError

logger = logging.getLogger(__name__)

COMMAND_EXTENSIONS = (".py",)
STUB_EXTENSIONS = (".pyi",)

# Base names that stand for their containing directory
INDEX_NAMES = ("index", "__init__")

Importer = Callable[[Path], ModuleType]


@dataclass(frozen=True)
class LoadedCommand:
    """A discovered command.

    Attributes:
        command_path: Space-joined command tokens, e.g. "module add".
        source_path: File the command was loaded from.
        metadata: Static metadata read from the command class.
        factory: Builds a fresh command instance from ``(cli, options)``.
    """

    command_path: str
    source_path: Path
    metadata: CommandMetadata
    factory: Callable[[Any, dict], Any]

    @property
    def tokens(self) -> list[str]:
        return self.command_path.split(" ")

    @property
    def root(self) -> str:
        return self.tokens[0]


class Registry:
    """Immutable, ordered collection of discovered commands."""

    def __init__(self, commands: Iterable[LoadedCommand] = ()):
        self._commands: tuple[LoadedCommand, ...] = tuple(commands)

    def __iter__(self) -> Iterator[LoadedCommand]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __getitem__(self, index: int) -> LoadedCommand:
        return self._commands[index]

    def __repr__(self) -> str:
        return f"Registry({[c.command_path for c in self._commands]!r})"

    @property
    def paths(self) -> list[str]:
        return [c.command_path for c in self._commands]

    def find(self, command_path: str) -> LoadedCommand | None:
        """Return the first command registered under an exact path."""
        for command in self._commands:
            if command.command_path == command_path:
                return command
        return None

    def namespace(self, prefix: str) -> list[LoadedCommand]:
        """Return the commands nested under a path prefix."""
        return [c for c in self._commands if c.command_path.startswith(prefix + " ")]

    def groups(self) -> dict[str, list[LoadedCommand]]:
        """Partition commands by root token, in first-seen order."""
        groups: dict[str, list[LoadedCommand]] = {}
        for command in self._commands:
            groups.setdefault(command.root, []).append(command)
        return groups


def load_module(path: Path) -> ModuleType:
    """Import a Python file as a module.

    The module is registered in ``sys.modules`` under a name derived from
    its resolved path, so two files with the same base name never collide.
    """
    path = Path(path).resolve()
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    module_name = f"_cmdtree_command_{path.stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _is_command_class(obj: Any) -> bool:
    return inspect.isclass(obj) and callable(getattr(obj, "run", None))


def primary_export(module: ModuleType) -> Any:
    """Return the command class a module exports, or None.

    The ``command`` attribute wins; otherwise the first class defined in the
    module itself (not imported into it) with a callable ``run``.
    """
    if hasattr(module, "command"):
        return module.command

    for obj in vars(module).values():
        if _is_command_class(obj) and obj.__module__ == module.__name__:
            return obj
    return None


def command_path_for(relative_parts: Sequence[str]) -> str | None:
    """Map a file's path parts below a search root to its command path.

    ``["module", "add.py"]`` maps to ``"module add"``; an index file maps to
    its directory, and an index file directly under the root maps to None.
    """
    *prefix, filename = relative_parts
    base_name = Path(filename).stem
    parts = list(prefix)
    if base_name not in INDEX_NAMES:
        parts.append(base_name)
    elif not parts:
        return None
    return " ".join(parts)


def _is_command_file(path: Path) -> bool:
    name = path.name
    if name.endswith(STUB_EXTENSIONS):
        return False
    return name.endswith(COMMAND_EXTENSIONS)


def load_command(path: Path, command_path: str, importer: Importer = load_module) -> LoadedCommand:
    """Load one command file.

    Raises:
        CommandLoadError: If the file cannot be imported, exports no usable
            command, or declares invalid arguments.
    """
    try:
        module = importer(path)
    except Exception as e:
        raise CommandLoadError(
            f"Failed to load command at {path}: {e}", file_path=path
        ) from e

    export = primary_export(module)
    if not export:
        raise CommandLoadError("No command exported", file_path=path)
    if not _is_command_class(export):
        raise CommandLoadError(
            "Exported command is not a class with a run() method",
            file_path=path,
            suggestions=["Export a BaseCommand subclass as 'command'"],
        )

    try:
        metadata = CommandMetadata.from_class(export)
        metadata.args.validate()
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CommandLoadError(
            f"Invalid command arguments: {e}",
            file_path=path,
            context={"command": command_path},
        ) from e

    return LoadedCommand(
        command_path=command_path,
        source_path=path,
        metadata=metadata,
        factory=export,
    )


def _scan(
    directory: Path,
    prefix: list[str],
    importer: Importer,
    commands: list[LoadedCommand],
    seen: dict[str, Path],
) -> None:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            try:
                _scan(entry, [*prefix, entry.name], importer, commands, seen)
            except OSError as e:
                logger.error(f"Cannot read directory {entry}: {e}")
            continue

        if not _is_command_file(entry):
            continue

        logger.debug(f"Found potential command file: {entry}")
        command_path = command_path_for([*prefix, entry.name])
        if command_path is None:
            continue

        try:
            loaded = load_command(entry, command_path, importer)
        except CommandLoadError as e:
            if e.__cause__ is not None:
                logger.error(e.message)
            else:
                logger.debug(f"Skipping {entry}: {e.message}")
            continue

        if command_path in seen:
            logger.warning(
                f"Command '{command_path}' at {entry} is shadowed by {seen[command_path]}"
            )
            continue

        seen[command_path] = entry
        commands.append(loaded)
        logger.debug(f"Registered command: {command_path}")


def discover_commands(
    root_dirs: Iterable[Path | str],
    importer: Importer = load_module,
) -> Registry:
    """Discover commands under one or more root directories.

    Roots are scanned in order, each depth-first in sorted listing order.
    Missing roots are skipped. A file that fails to load is logged and
    skipped. When two files map to the same command path, the first one
    registered wins.

    Args:
        root_dirs: Directories to scan.
        importer: Loads a module from a file path (injectable for tests).

    Returns:
        The Registry of discovered commands.
    """
    commands: list[LoadedCommand] = []
    seen: dict[str, Path] = {}

    for root in root_dirs:
        root = Path(root)
        logger.debug(f"Loading commands from: {root}")
        if not root.is_dir():
            logger.debug(f"Commands directory not found: {root}")
            continue
        _scan(root, [], importer, commands, seen)

    return Registry(commands)
