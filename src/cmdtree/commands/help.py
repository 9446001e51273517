"""Built-in help command."""

from cmdtree.cli.base import BaseCommand
from cmdtree.cli.command_protocol import ArgumentSpec, CommandArgs
from cmdtree.cli.help import resolve_help
from cmdtree.cli.utils import print_text


class HelpCommand(BaseCommand):
    description = "Display help for commands."

    args = CommandArgs(
        args=[ArgumentSpec("command...", required=False, description="Command name to get help for")],
    )

    def run(self, options):
        query = options.get("command") or []
        if isinstance(query, str):
            query = [query]

        text = resolve_help(
            query,
            self.cli.get_commands(),
            records=self.cli.records,
            program_name=self.program_name,
        )
        print_text(text)


command = HelpCommand
