from config.constants import (
    MAX_PERMISSION_LEVEL,
    MIN_PERMISSION_LEVEL,
    PERMISSION_LEVEL_OPERATOR,
    PERMISSION_LEVEL_STANDARD_USER,
)
from core.command import Command
from core.exceptions import AmbiguousResultError
from utils.response import respond_to
from utils.user_lookup import find_member, find_member_strict, format_candidates


def parse_permission_level(text: str):
    """The level in ``text``, or None if it is not a whole number from 0 to 255"""
    try:
        level = int(text)
    except ValueError:
        return None
    if not MIN_PERMISSION_LEVEL <= level <= MAX_PERMISSION_LEVEL:
        return None
    return level


class GetPermsCommand(Command):
    name = "getperms"
    description = (
        "Gets the current user's permissions, or if a user is specified, the permissions of the specified user."
    )
    syntax = "getperms [username/nickname/userID]"
    required_permission_level = PERMISSION_LEVEL_STANDARD_USER

    def __init__(self, system):
        self.system = system

    async def execute(self, context, member, message, args, raw_args):
        self.require_context(context)

        if len(args) == 0:
            await respond_to(message, f"Your permission level is `{member.permission_level}`")
            return

        try:
            found = find_member(context.server, raw_args)
        except AmbiguousResultError as e:
            await respond_to(message, format_candidates(e))
            return
        if found is None:
            raise self.error("The specified user is not a member of this server.")

        target = self.system.members.get(context, found)
        await respond_to(message, f"The permission level of `{target.full_name}` is `{target.permission_level}`")


class SetPermsCommand(Command):
    name = "setperms"
    description = (
        "Sets the specified user's permissions. For security reasons, this requires the user's ID. "
        "See <https://support.discord.com/hc/en-us/articles/206346498>"
    )
    syntax = "setperms <userID> <newPermissionLevel>"
    required_permission_level = PERMISSION_LEVEL_OPERATOR

    def __init__(self, system):
        self.system = system

    async def execute(self, context, member, message, args, raw_args):
        self.require_context(context)
        if len(args) != 2:
            raise self.error("Invalid argument count! Expected a user ID and a permission level.")

        level = parse_permission_level(args[1])
        if level is None:
            raise self.error(
                f"`{args[1]}` is not a valid permission level "
                f"(expected a number from {MIN_PERMISSION_LEVEL} to {MAX_PERMISSION_LEVEL})."
            )

        found = find_member_strict(context.server, args[0])
        if found is None:
            raise self.error("The specified member could not be found. Are you searching by user ID?")
        target = self.system.members.get(context, found)

        if target.id == member.id:
            raise self.error("You cannot alter your own permission level.")
        own_level = member.permission_level
        if own_level <= level:
            raise self.error(
                f"You cannot set the permission level of user `{target.full_name}` to a permission level "
                "equal to or higher than your own."
            )
        if own_level <= target.permission_level:
            raise self.error(
                "You cannot edit the permission level of someone at a rank greater than or equal to your own."
            )

        target.set_permission_level(level)
        await respond_to(message, f"Set the permission level of user `{target.full_name}` to `{level}`")
