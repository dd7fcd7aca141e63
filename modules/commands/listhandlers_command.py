from config.constants import PERMISSION_LEVEL_STANDARD_USER
from core.command import Command
from utils.response import respond_to


class ListHandlersCommand(Command):
    name = "listhandlers"
    description = (
        "Lists all passive handlers that are currently active. Passive handlers are like commands, "
        "but they run based on any applicable message (not just commands)"
    )
    syntax = "listhandlers [handlerName]"
    required_permission_level = PERMISSION_LEVEL_STANDARD_USER

    async def execute(self, context, member, message, args, raw_args):
        self.require_context(context)

        if len(args) == 0:
            names = "".join(handler.name + "\n" for handler in context.handlers)
            await respond_to(message, "```\n" + names + "```")
        elif len(args) == 1:
            handler = context.find_handler(args[0])
            if handler is None:
                await respond_to(
                    message,
                    f"There is no Passive Handler with the name {args[0]}\n"
                    "(If there's a space in the name, try adding quotation marks around the name!)"
                )
                return
            await respond_to(message, f"**{handler.name}:** {handler.description}")
        else:
            raise self.error(
                "Invalid amount of command arguments. Try putting quotation marks around the name of the handler."
            )
