from core.command import ArchonCommand
from utils.response import respond_with_embed


class CurrentContextCommand(ArchonCommand):
    name = "currentcontext"
    description = "Returns information on the BotContext representing this server."
    syntax = "currentcontext"

    async def execute(self, context, member, message, args, raw_args):
        if context is None:
            raise self.error(
                "Cannot use currentcontext from the console, as it requires a context to be present."
            )
        await respond_with_embed(message, context.to_embed(), context.to_console_string())
