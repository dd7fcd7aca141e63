from config.constants import PERMISSION_LEVEL_ADMINISTRATOR
from core.command import Command
from utils.response import respond_to


class ShutdownCommand(Command):
    name = "shutdown"
    description = "Shuts down the bot"
    syntax = "shutdown"
    required_permission_level = PERMISSION_LEVEL_ADMINISTRATOR

    def __init__(self, system):
        self.system = system

    async def execute(self, context, member, message, args, raw_args):
        if message is not None:
            await respond_to(message, "Sending shutdown signal and shutting down...")
        self.system.shutdown(0)
