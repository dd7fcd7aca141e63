from typing import Iterable, List, Optional

from config.constants import PERMISSION_LEVEL_STANDARD_USER
from core.command import Command
from utils.response import respond_to

PREFIX_PLACEHOLDER = "{0}"
NAME_COLUMN_WIDTH = 34


def format_command_help(command: Command, indexed_by: str, prefix: str) -> str:
    """Detailed help for one command, noting the other names it answers to"""
    syntax = command.syntax.replace(PREFIX_PLACEHOLDER, prefix)
    description = command.description.replace(PREFIX_PLACEHOLDER, prefix)
    text = f"**Command:** `{command.name}` \n{description}\n\n**Usage:** `{syntax}"
    # An odd number of graves means the syntax closes its own code span
    if syntax.count("`") % 2 == 0:
        text += "`"

    if command.alternate_names:
        if indexed_by.lower() == command.name.lower():
            others = list(command.alternate_names)
        else:
            others = [command.name] + [
                alt for alt in command.alternate_names if alt.lower() != indexed_by.lower()
            ]
        text += "\n**Can also be run with:** " + ", ".join(f"`{name}`" for name in others)
    return text


class HelpCommand(Command):
    name = "help"
    description = (
        "Lists every command or returns information on a command.\n\n"
        "Some commands may show something called \"Arguments\" as part of their documentation. "
        "This is the text like `<someArg>` or `[someArg]`.\n"
        "Any text shown in greater than/less than (these: `<>`) is a **required argument.** "
        "For instance, in `{0}say <message>` you need to put something after `{0}say`, like `{0}say Hello!`. "
        "Do not include the `< >` in your text.\n\n"
        "Any text shown in square brackets (these: `[]`) is an **optional argument.** "
        "`{0}help` can **optionally** take the name of a command to get more information on it. "
        "Do not include the `[ ]` in your text.\n\n"
        "Command arguments are split by spaces. `{0}cmd abc Cool Text! 123` has four arguments: "
        "`abc`, `Cool`, `Text!`, and `123`. Put quotes around arguments to join them: "
        "`{0}cmd abc \"Cool Text!\" 123` has *three* arguments: `abc`, `Cool Text!`, and `123`."
    )
    syntax = "help [commandName]"
    required_permission_level = PERMISSION_LEVEL_STANDARD_USER

    def __init__(self, system):
        self.system = system

    @property
    def prefix(self) -> str:
        return self.system.dispatcher.prefix

    def _listing_lines(self, commands: Iterable[Command], member) -> List[str]:
        lines = []
        for command in commands:
            usage_prefix = "+ "
            if member is not None:
                usage_prefix = "+ " if command.can_use_command(member).can_use else "- "
            label = (usage_prefix + command.name).ljust(NAME_COLUMN_WIDTH)
            lines.append(f"{label}Requires Permission Level {command.required_permission_level} (or higher).")
        return lines

    def build_listing(self, context, member) -> str:
        text = (
            "Commands with a `+` before them are commands you can use. "
            "Commands with a `-` before them are commands you cannot use. "
            "\nSay **`{0}help command_name_here`** to get more documentation on a specific command. "
            "Say **`{0}help help`** to get information on how commands work."
            "```diff\n"
        )
        text += "".join(line + "\n" for line in self._listing_lines(self.system.commands.entries, member))
        if context is not None and context.commands:
            text += "\nCommands specific to this server:\n\n"
            text += "".join(line + "\n" for line in self._listing_lines(context.commands, member))
        text += "```\n"
        return text.replace(PREFIX_PLACEHOLDER, self.prefix)

    def find_for_help(self, context, name: str) -> Optional[Command]:
        """Global commands are searched before the context's own"""
        command = self.system.commands.find(name)
        if command is None and context is not None:
            command = context.find_command(name)
        return command

    async def execute(self, context, member, message, args, raw_args):
        if len(args) == 0:
            await respond_to(message, self.build_listing(context, member))
        elif len(args) == 1:
            command = self.find_for_help(context, args[0])
            if command is None:
                raise self.error(f"Command `{args[0]}` does not exist.")
            await respond_to(message, format_command_help(command, args[0], self.prefix))
        else:
            raise self.error(
                "Invalid argument count. Expected no arguments, or one argument which is "
                "the name of the command you wish to get details on."
            )
