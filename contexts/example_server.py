# contexts/example_server.py
import os

from config.constants import PERMISSION_LEVEL_STANDARD_USER
from core.bot_context import BotContext
from core.command import Command, PassiveHandler
from utils.logger import setup_logger
from utils.response import respond_to


class SayHelloCommand(Command):
    name = "sayhello"
    alternate_names = ("hello",)
    description = "Makes the bot say hello."
    syntax = "sayhello"
    required_permission_level = PERMISSION_LEVEL_STANDARD_USER

    async def execute(self, context, member, message, args, raw_args):
        self.require_context(context)
        await respond_to(message, f"Hello, {member.mention}")


class PasswordHandler(PassiveHandler):
    """Answers anyone asking for the password"""

    name = "Password Guard"
    description = "Responds to people who ask the bot for the password."
    TRIGGER = "what's the password"

    async def run(self, context, member, message) -> bool:
        if self.TRIGGER in message.content.lower():
            await respond_to(message, "Nice try. I'm not telling you the password.")
            return True
        return False


class ExampleServerContext(BotContext):
    """A small user-defined context showing a command and a passive handler"""

    name = "Example server context"
    data_persistence_name = "ctxExampleServer"
    server_id = int(os.getenv("BASTION_EXAMPLE_SERVER_ID", "0"))

    def create_commands(self):
        return [SayHelloCommand()]

    def create_handlers(self):
        return [PasswordHandler()]

    def after_context_initialized(self) -> None:
        setup_logger(__name__).info(f"{self.name} finished initializing.")
