from config.constants import PERMISSION_LEVEL_ADMINISTRATOR
from core.argument_splitter import split_command_line
from core.command import Command


class ArchonCommandRunner(Command):
    """``archoncmd``: the entry point into the archon command registry."""

    name = "archoncmd"
    description = "Offers commands intended for low-level control of the bot."
    syntax = "archoncmd <cmd> [cmdArgs]`\nUse `archoncmd help` to get a list of Archon Commands."
    required_permission_level = PERMISSION_LEVEL_ADMINISTRATOR

    def __init__(self, system):
        self.system = system

    async def execute(self, context, member, message, args, raw_args):
        if len(args) == 0:
            raise self.error("Invalid argument count. Expected at least one arg.")

        line = split_command_line(raw_args)
        archon_command = self.system.archon_commands.find(line.command)
        if archon_command is None:
            raise self.error(f"Unable to execute Archon Command `{line.command}` because it does not exist.")
        await archon_command.execute(context, member, message, line.args, line.raw_args)
