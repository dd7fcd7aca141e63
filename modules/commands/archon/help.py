from core.command import ArchonCommand
from utils.response import respond_to


class ArchonHelpCommand(ArchonCommand):
    name = "help"
    description = (
        "Returns the list of Archon Commands that are registered, or lists information on the input command. "
        "Identical to the stock help command, but it instead targets Archon Commands."
    )
    syntax = "help [archonCommandName]"

    def __init__(self, system):
        self.system = system

    async def execute(self, context, member, message, args, raw_args):
        if len(args) == 0:
            names = "".join(command.name + "\n" for command in self.system.archon_commands.entries)
            await respond_to(message, "Current Archon Commands:\n```\n" + names + "```\n")
        elif len(args) == 1:
            command = self.system.archon_commands.find(args[0])
            if command is None:
                raise self.error(f"Archon Command `{args[0]}` does not exist.")
            await respond_to(
                message,
                f"**Archon Command:** `{command.name}` \n{command.description}\n\n**Usage:** `{command.syntax}`"
            )
        else:
            raise self.error(
                "Invalid argument count. Expected no arguments, or one argument which is the name "
                "of the archon command you wish to get details on."
            )
