"""Base classes for commands, archon sub-commands and passive handlers."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from config.constants import PERMISSION_LEVEL_STANDARD_USER
from core.exceptions import ArchonCommandError, CommandError


@dataclass(frozen=True)
class UsagePermissionPacket:
    """Whether a command may be used, and why not if it may not."""
    can_use: bool
    error_message: Optional[str] = None
    suggested_channel: Any = None

    @classmethod
    def allow(cls) -> "UsagePermissionPacket":
        return cls(True)

    @classmethod
    def deny(cls, error_message: str, suggested_channel: Any = None) -> "UsagePermissionPacket":
        return cls(False, error_message, suggested_channel)


def _name_matches(name: str, candidates: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(candidate.lower() == lowered for candidate in candidates)


class Command(ABC):
    """A runnable chat command.

    Subclasses set the class attributes below and implement ``execute``.
    ``name`` should be lowercase with no spaces; matching is case-insensitive
    and also considers ``alternate_names``.
    """

    name: str = ""
    alternate_names: Tuple[str, ...] = ()
    description: str = ""
    syntax: str = ""
    required_permission_level: int = PERMISSION_LEVEL_STANDARD_USER

    @property
    def all_names(self) -> List[str]:
        return [self.name, *self.alternate_names]

    def matches(self, name: str) -> bool:
        return _name_matches(name, self.all_names)

    def sort_key(self) -> Tuple[int, str]:
        """Help listings show commands by required level, then by name"""
        return (self.required_permission_level, self.name)

    def __lt__(self, other: "Command") -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} level={self.required_permission_level}>"

    def error(self, message: str) -> CommandError:
        return CommandError(self, message)

    def require_context(self, context) -> None:
        if context is None:
            raise self.error("This command is not available from the console.")

    def can_use_command(self, member) -> UsagePermissionPacket:
        """Default rule: the member's level must be at least the required level.

        ``member`` is ``None`` for console invocations, which are always allowed.
        """
        if member is None:
            return UsagePermissionPacket.allow()
        level = member.permission_level
        if level >= self.required_permission_level:
            return UsagePermissionPacket.allow()
        return UsagePermissionPacket.deny(
            f"You are not authorized to use `{self.name}`. It is only available to "
            f"`{self.required_permission_level}` and above (You are at `{level}`)"
        )

    def can_use_command_in_channel(self, member, channel) -> UsagePermissionPacket:
        """Override to restrict a command to certain channels.

        A denial should name an alternate channel in ``suggested_channel``.
        """
        return UsagePermissionPacket.allow()

    @abstractmethod
    async def execute(self, context, member, message, args: List[str], raw_args: str) -> None:
        """Run the command. Permission checks have already been done by the dispatcher.

        ``context``, ``member`` and ``message`` are all ``None`` when the
        command was typed into the console.
        """
        raise NotImplementedError


class ArchonCommand(ABC):
    """A low-level operational command reached through ``archoncmd``."""

    name: str = ""
    description: str = ""
    syntax: str = ""

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.lower()

    def sort_key(self) -> Tuple[str]:
        return (self.name,)

    def __lt__(self, other: "ArchonCommand") -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    def error(self, message: str) -> ArchonCommandError:
        return ArchonCommandError(self, message)

    @abstractmethod
    async def execute(self, context, member, message, args: List[str], raw_args: str) -> None:
        raise NotImplementedError


class PassiveHandler(ABC):
    """Inspects every non-command message in a context.

    ``run`` returns True when it consumed the message, which stops the
    handlers after it from seeing that message.
    """

    name: str = ""
    description: str = ""

    def sort_key(self) -> Tuple[str]:
        return (self.name,)

    def __lt__(self, other: "PassiveHandler") -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    @abstractmethod
    async def run(self, context, member, message) -> bool:
        raise NotImplementedError

    def dispose(self) -> None:
        """Called before shutdown to save data and release resources"""
        pass
