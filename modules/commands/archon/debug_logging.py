from config.constants import PERMISSION_LEVEL_SERVER_OWNER
from config.logging_config import LoggingConfig
from config.settings import Settings
from core.command import ArchonCommand
from utils.logger import set_debug_logging
from utils.response import respond_to


class DebugLoggingCommand(ArchonCommand):
    name = "debuglogging"
    description = (
        "Enables or disables debug logging even if debug mode is off. "
        "Can only be executed by the bot developer or backend console."
    )
    syntax = "debuglogging :true|false:"

    async def execute(self, context, member, message, args, raw_args):
        if member is not None and member.permission_level < PERMISSION_LEVEL_SERVER_OWNER:
            raise self.error(
                "Cannot execute this command at current permission level. This command requires "
                f"backend console access (permission level {PERMISSION_LEVEL_SERVER_OWNER}+)"
            )
        if len(args) != 1:
            raise self.error("Expected one arg `<enabled>`.")

        value = args[0].lower()
        if value not in ("true", "false"):
            raise self.error(f"Failed to cast `{args[0]}` into boolean (true/false).")
        enable = value == "true"

        text = f"Forcefully {'ENABLING' if enable else 'DISABLING'} debug-logging to the bot's console."
        if Settings.DEBUG:
            text += " **NOTE:** This will have no effect since the bot is currently running in debug mode."
        else:
            set_debug_logging(enable, LoggingConfig.LOG_LEVEL)
        await respond_to(message, text)
