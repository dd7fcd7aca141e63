from core.command import ArchonCommand
from modules.commands.perms_commands import parse_permission_level
from utils.logger import setup_logger
from utils.response import respond_to
from utils.user_lookup import find_member_strict, parse_user_id


class ForcePermsCommand(ArchonCommand):
    """Sets a level without the rank checks ``setperms`` applies.

    From the console there is no context, so the level is written in every
    user-defined context.
    """

    name = "forceperms"
    description = "Forces the permission level of a given user."
    syntax = "forceperms <userID> <permLvl>"

    def __init__(self, system):
        self.system = system
        self.logger = setup_logger(__name__)

    def _parse_level(self, text: str) -> int:
        level = parse_permission_level(text)
        if level is None:
            raise self.error("Invalid permission level")
        return level

    def _check_not_bot(self, user_id: int) -> None:
        if self.system.permissions.is_bot(user_id):
            raise self.error("My permission level is immutable and cannot be lowered from 255.")

    async def execute(self, context, member, message, args, raw_args):
        if len(args) != 2:
            raise self.error("Expected 2 args.")
        level = self._parse_level(args[1])

        if context is None:
            user_id = parse_user_id(args[0])
            if user_id is None:
                raise self.error("Invalid user.")
            self._check_not_bot(user_id)
            self.logger.warning(
                "No context is available from the console, so this level will be set in ALL contexts."
            )
            for target_context in self.system.contexts.user_defined_contexts:
                self.system.permissions.set(target_context, user_id, level)
            await respond_to(message, f"Set the permission level of user {user_id} to {level} in every context.")
            return

        found = find_member_strict(context.server, args[0])
        if found is None:
            raise self.error("Invalid user.")
        self._check_not_bot(found.id)
        target = self.system.members.get(context, found)
        target.set_permission_level(level)
        await respond_to(message, f"Forced the permission level of user `{target.full_name}` to `{level}`")
