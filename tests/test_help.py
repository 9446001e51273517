"""Tests for help text rendering.

Tests cover:
1. Global help layout and column alignment
2. Namespace help for a command prefix
3. Command help: usage precedence, arguments, options and defaults
4. Help query resolution
"""

from pathlib import Path

import pytest

from cmdtree.cli.command_protocol import ArgumentSpec, CommandArgs, CommandMetadata, OptionSpec
from cmdtree.cli.help import (
    render_command,
    render_global,
    render_namespace,
    resolve_help,
    synthesize_usage,
)
from cmdtree.cli.parser import GLOBAL_OPTIONS, ParserRecord
from cmdtree.cli.registry import LoadedCommand, Registry
from cmdtree.exceptions import CommandNotFoundError


def loaded(path, description="", usage="", args=(), options=()):
    metadata = CommandMetadata(
        usage=usage,
        description=description,
        args=CommandArgs(args=args, options=options),
    )
    return LoadedCommand(path, Path(path.replace(" ", "/") + ".py"), metadata, object)


@pytest.fixture
def registry():
    return Registry(
        [
            loaded("build", "Build the project"),
            loaded("module add", "Add a module"),
            loaded("module remove", "Remove a module"),
            loaded("help", "Display help for commands."),
        ]
    )


class TestRenderGlobal:
    """Tests for the global help listing."""

    def test_layout(self, registry):
        lines = render_global("app", registry).split("\n")

        assert lines[:5] == ["", "  Usage: app <command> [options]", "", "  Commands:", ""]
        assert lines[-1] == ""

    def test_command_rows_are_aligned(self, registry):
        text = render_global("app", registry)

        assert "    build" + " " * 21 + "Build the project" in text
        assert "    module add" + " " * 16 + "Add a module" in text

    def test_lists_global_options(self, registry):
        text = render_global("app", registry)

        assert "  Options:" in text
        for option in GLOBAL_OPTIONS:
            assert option.name in text
        assert "    --root-dir <path>" + " " * 9 + "Override project root" in text

    def test_command_without_description_has_no_trailing_space(self):
        text = render_global("app", Registry([loaded("bare")]))

        assert "    bare\n" in text

    def test_empty_registry(self):
        lines = render_global("app", Registry()).split("\n")

        assert lines[3:7] == ["  Commands:", "", "", "  Options:"]


class TestRenderNamespace:
    """Tests for namespace help."""

    def test_lists_children_only(self, registry):
        text = render_namespace(["module"], registry)

        assert "  Commands for module:" in text
        assert "  module add" + " " * 11 + "Add a module" in text
        assert "  module remove" + " " * 8 + "Remove a module" in text
        assert "build" not in text

    def test_layout(self, registry):
        lines = render_namespace(["module"], registry).split("\n")

        assert lines[0] == ""
        assert lines[2] == ""
        assert lines[-1] == ""


class TestRenderCommand:
    """Tests for single-command help."""

    def test_explicit_usage_wins(self):
        command = loaded("deploy", usage="deploy <env> [--fast]")
        record = ParserRecord("deploy [env]")

        assert "  Usage: deploy <env> [--fast]" in render_command(command, record)

    def test_record_usage_before_synthesized(self):
        command = loaded("greet", args=[ArgumentSpec("name", required=True)])
        record = ParserRecord("greet [name]")

        assert "  Usage: greet [name]" in render_command(command, record)

    def test_synthesized_usage(self):
        command = loaded(
            "copy",
            args=[ArgumentSpec("dest", required=True), ArgumentSpec("files...")],
        )

        assert synthesize_usage(command) == "copy <dest> [...files]"
        assert "  Usage: copy <dest> [...files]" in render_command(command)

    def test_required_variadic_usage(self):
        command = loaded("module add", args=[ArgumentSpec("urls...", required=True)])

        assert synthesize_usage(command) == "module add <...urls>"

    def test_description_falls_back_to_record(self):
        command = loaded("greet")
        record = ParserRecord("greet", description="From the grammar")

        assert "  From the grammar" in render_command(command, record)

    def test_arguments_block(self):
        command = loaded(
            "greet",
            args=[
                ArgumentSpec("name", required=True, description="Who to greet"),
                ArgumentSpec("greeting", description="Word to use"),
            ],
        )

        text = render_command(command)

        assert "  Arguments:" in text
        assert "    name" + " " * 22 + "Who to greet (required)" in text
        assert "    greeting" + " " * 18 + "Word to use\n" in text

    def test_no_arguments_block_without_args(self):
        assert "Arguments:" not in render_command(loaded("build"))

    def test_nested_command_lists_declared_and_global_options(self):
        command = loaded("module add", options=[OptionSpec("--ref <name>", "Branch", default="main")])

        text = render_command(command)

        assert "    --ref <name>" + " " * 14 + "Branch (default: main)" in text
        assert "--debug" in text
        assert text.index("--ref") < text.index("--help")

    def test_record_options_are_used_as_registered(self):
        command = loaded("build", options=[OptionSpec("--fast")])
        record = ParserRecord("build", options=[OptionSpec("--only-this", "Recorded")])

        text = render_command(command, record)

        assert "--only-this" in text
        assert "--fast" not in text

    def test_falsy_default_is_not_shown(self):
        command = loaded("build", options=[OptionSpec("--jobs <n>", "Jobs", default=0)])

        assert "(default" not in render_command(command)


class TestResolveHelp:
    """Tests for resolving help queries."""

    def test_empty_query_is_global(self, registry):
        assert resolve_help([], registry, program_name="app") == render_global("app", registry)

    def test_exact_match_renders_command(self, registry):
        text = resolve_help(["module", "add"], registry)

        assert "  Usage: module add" in text
        assert "Add a module" in text

    def test_exact_match_uses_record(self, registry):
        records = {"build": ParserRecord("build [target]", "Build the project")}

        assert "  Usage: build [target]" in resolve_help(["build"], registry, records)

    def test_prefix_renders_namespace(self, registry):
        assert "Commands for module:" in resolve_help(["module"], registry)

    def test_unknown_query_raises(self, registry):
        with pytest.raises(CommandNotFoundError, match="Unknown command: nope"):
            resolve_help(["nope"], registry)

    def test_partial_token_is_not_a_prefix(self, registry):
        with pytest.raises(CommandNotFoundError):
            resolve_help(["mod"], registry)
