from config.constants import PERMISSION_LEVEL_OPERATOR
from core.command import Command
from utils.response import respond_to


class ConfigCommand(Command):
    """Reads and edits the invoking context's configuration file (the global one from the console)."""

    name = "config"
    description = "Alters bot configuration data."
    syntax = "config :get|set|remove|list: [<key> [<value>]]"
    required_permission_level = PERMISSION_LEVEL_OPERATOR

    def __init__(self, system):
        self.system = system

    def _check_key(self, key: str) -> None:
        if not key:
            raise self.error("Config keys cannot be empty.")
        if any(char.isspace() for char in key):
            raise self.error("Config keys cannot contain spaces.")

    async def execute(self, context, member, message, args, raw_args):
        if len(args) == 0:
            raise self.error("Invalid argument count. Expected at least one argument.")

        store = self.system.config_for(context)
        operation = args[0].lower()

        if operation == "list":
            await respond_to(message, "**Configuration Values:**\n" + store.format_listing())

        elif operation == "get":
            if len(args) not in (2, 3):
                raise self.error("Expected one or two arguments for operation \"get\" -- get <key> [default]")
            key = args[1]
            self._check_key(key)
            default = args[2] if len(args) == 3 else None
            try:
                value = store.get(key, default)
            except ValueError as e:
                raise self.error(str(e))
            if value is None:
                await respond_to(message, "The specified key does not exist in the configuration.")
            else:
                await respond_to(message, f"```\n{key}={value}\n```")

        elif operation == "set":
            if len(args) != 3:
                raise self.error("Expected two arguments for operation \"set\" -- set <key> <value>")
            key, value = args[1], args[2]
            self._check_key(key)
            try:
                store.set(key, value)
            except ValueError as e:
                raise self.error(str(e))
            await respond_to(message, f"Set [`{key}`] to: `{value}`")

        elif operation == "remove":
            if len(args) != 2:
                raise self.error("Expected one argument for operation \"remove\" -- remove <key>")
            key = args[1]
            self._check_key(key)
            if store.remove(key):
                await respond_to(message, f"Removed configuration entry `{key}`")
            else:
                await respond_to(
                    message, f"Could not remove configuration entry `{key}` -- it doesn't exist in the first place."
                )

        else:
            raise self.error(f"Invalid operation \"{operation}\" (expected get, set, remove, or list)")
