"""Discord users as seen from inside one context."""
import threading
from typing import Any, Dict, Optional, Tuple

import discord

from core.permissions import PermissionStore


class BotMember:
    """A user paired with the context they were seen in.

    Everything that touches Discord or the permission store is an explicit
    method or property here, rather than an implicit conversion.
    """

    def __init__(self, context: Any, user: discord.abc.User, permissions: PermissionStore):
        self.context = context
        self.user = user
        self.permissions = permissions

    def __repr__(self) -> str:
        return f"<BotMember {self.full_name} ({self.id}) in {getattr(self.context, 'name', None)}>"

    def __str__(self) -> str:
        return self.full_name

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def full_name(self) -> str:
        """``name#discriminator``, or the bare name for accounts without a discriminator"""
        discriminator = getattr(self.user, "discriminator", "0")
        if not discriminator or discriminator == "0":
            return self.user.name
        return f"{self.user.name}#{discriminator}"

    @property
    def mention(self) -> str:
        return self.user.mention

    def get_discord_member(self) -> Optional[discord.Member]:
        """Look the user up in the context's guild; None when unbound or not a member"""
        server = getattr(self.context, "server", None)
        if server is None:
            return None
        return server.get_member(self.id)

    @property
    def nickname(self) -> Optional[str]:
        member = self.get_discord_member()
        if member is None:
            return None
        return member.nick

    @property
    def permission_level(self) -> int:
        return self.permissions.get(self.context, self.id)

    def set_permission_level(self, level: int, save_now: bool = True) -> bool:
        return self.permissions.set(self.context, self.id, level, save_now)


class MemberRegistry:
    """One BotMember per (context, user id)"""

    def __init__(self, permissions: PermissionStore):
        self.permissions = permissions
        self._members: Dict[Tuple[str, int], BotMember] = {}
        self._lock = threading.Lock()

    def get(self, context: Any, user: discord.abc.User) -> Optional[BotMember]:
        if user is None:
            return None
        key = (context.data_persistence_name, user.id)
        with self._lock:
            member = self._members.get(key)
            if member is None:
                member = BotMember(context, user, self.permissions)
                self._members[key] = member
            else:
                member.user = user
            return member

    def clear(self) -> None:
        with self._lock:
            self._members.clear()
