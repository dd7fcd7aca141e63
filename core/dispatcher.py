"""Turns one inbound message or console line into a command run or passive handler pass.

Every call returns a ``DispatchResult``. Expected failures (bad arguments,
missing permissions, malformed stored data, an aborted operation) are
reported to the invoker and folded into the result; anything else is
logged and re-raised.

Cancellation anywhere in a dispatch, including while a reply is being sent,
ends it as ``ABORTED`` with nothing further sent. discord.py runs each
``on_message`` in its own task and discards a CancelledError from it, so
there is no owner waiting to see the cancellation.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from config.settings import Settings
from core.argument_splitter import CommandLine, split_command_line
from core.bot_context import ContextRegistry
from core.command import Command
from core.command_registry import CommandRegistry
from core.exceptions import (
    AmbiguousResultError,
    ArchonCommandError,
    CommandError,
    MalformedConfigDataError,
)
from core.member import MemberRegistry
from utils.formatting import args_to_text, strip_color_formatting
from utils.logger import setup_logger
from utils.response import respond_to
from utils.user_lookup import format_candidates

CONSOLE_INVOKER = "CONSOLE"


class DispatchOutcome(Enum):
    NOT_COMMAND = "not_command"
    COMPLETED = "completed"
    REJECTED = "rejected"
    ABORTED = "aborted"
    HANDLED = "handled"
    UNHANDLED = "unhandled"


class RejectionReason(Enum):
    TOO_LONG = "too_long"
    UNKNOWN_COMMAND = "unknown_command"
    UNAUTHORIZED = "unauthorized"
    WRONG_CHANNEL = "wrong_channel"
    COMMAND_ERROR = "command_error"
    DATA_ERROR = "data_error"


@dataclass(frozen=True)
class DispatchResult:
    """What happened to one inbound message.

    ``command`` is the resolved command (or the passive handler that consumed
    the message) when there was one; ``detail`` is the text shown to the
    invoker for rejections.
    """
    outcome: DispatchOutcome
    reason: Optional[RejectionReason] = None
    command: Any = None
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (DispatchOutcome.COMPLETED, DispatchOutcome.HANDLED)


class CommandDispatcher:
    def __init__(self, contexts: ContextRegistry, commands: CommandRegistry, members: MemberRegistry,
                 prefix: str = Settings.COMMAND_PREFIX,
                 allow_spaces_after_prefix: bool = Settings.ALLOW_SPACES_AFTER_PREFIX,
                 max_command_name_length: int = Settings.MAX_COMMAND_NAME_LENGTH):
        if not prefix:
            raise ValueError("The command prefix cannot be empty")
        self.logger = setup_logger(__name__)
        self.contexts = contexts
        self.commands = commands
        self.members = members
        self.prefix = prefix
        self.allow_spaces_after_prefix = allow_spaces_after_prefix
        self.max_command_name_length = max_command_name_length

    def strip_prefix(self, text: str) -> Optional[str]:
        """The text after the prefix, or None if ``text`` is not a command"""
        if text is None or len(text) <= len(self.prefix):
            return None
        if not text.lower().startswith(self.prefix.lower()):
            return None
        remainder = text[len(self.prefix):]
        if self.allow_spaces_after_prefix and remainder.startswith(" "):
            remainder = remainder[1:]
        if not remainder or remainder[0].isspace():
            return None
        return remainder

    def is_command(self, text: str) -> bool:
        return self.strip_prefix(text) is not None

    def find_global_command(self, name: str) -> Optional[Command]:
        return self.commands.find(name)

    def find_command(self, context: Any, name: str) -> Optional[Command]:
        """Context commands shadow global ones with the same name"""
        if context is not None:
            command = context.find_command(name)
            if command is not None:
                self.logger.debug(f"Found command [{command.name}] in context {context.name}.")
                return command
        command = self.find_global_command(name)
        if command is not None:
            self.logger.debug(f"Found command [{command.name}] globally.")
        return command

    async def handle_message(self, message: Any) -> DispatchResult:
        if self.is_command(message.content):
            return await self.handle_message_command(message)
        return await self.run_passive_handlers(message)

    async def _until_cancelled(self, dispatch, description: str) -> DispatchResult:
        try:
            return await dispatch
        except asyncio.CancelledError:
            self.logger.warning(f"Dispatch of {description} was cancelled.")
            return DispatchResult(DispatchOutcome.ABORTED)

    async def handle_message_command(self, message: Any) -> DispatchResult:
        return await self._until_cancelled(self._handle_message_command(message), "a chat command")

    async def _handle_message_command(self, message: Any) -> DispatchResult:
        remainder = self.strip_prefix(message.content)
        if remainder is None:
            return DispatchResult(DispatchOutcome.NOT_COMMAND)

        context = self.contexts.get_context(message.guild)
        member = self.members.get(context, message.author)
        self.logger.debug(f"Executing command in context:\n{context.to_console_string()}")

        line = split_command_line(remainder)
        invoker = member.full_name
        name = self._check_name_length(line.command)
        if name is None:
            return await self._reject(
                message, RejectionReason.TOO_LONG, None, "The command you input is too long.",
                f'User "{invoker}" issued a command that was considered too long to parse.'
            )

        command = self.find_command(context, name)
        if command is None:
            return await self._reject(
                message, RejectionReason.UNKNOWN_COMMAND, None, f"The command `{name}` does not exist.",
                f'User "{invoker}" attempted to issue command "{name}" but it failed because it doesn\'t exist.'
            )

        try:
            usage = command.can_use_command(member)
        except MalformedConfigDataError as e:
            return await self._reject(
                message, RejectionReason.DATA_ERROR, command, e.message,
                f'Permission data for user "{invoker}" was malformed: {e.message}'
            )
        if not usage.can_use:
            return await self._reject(
                message, RejectionReason.UNAUTHORIZED, command, usage.error_message,
                f'User "{invoker}" attempted to issue command "{command.name}" but it failed '
                "because they don't have a high enough permission level."
            )

        channel_usage = command.can_use_command_in_channel(member, message.channel)
        if not channel_usage.can_use:
            detail = channel_usage.error_message or f"`{command.name}` cannot be used in this channel."
            suggested = channel_usage.suggested_channel
            if suggested is not None:
                detail += f" Try using it in {getattr(suggested, 'mention', suggested)} instead."
            else:
                self.logger.warning(f"Command {command.name} refused a channel without suggesting another one.")
            return await self._reject(
                message, RejectionReason.WRONG_CHANNEL, command, detail,
                f'User "{invoker}" attempted to issue command "{command.name}" in a channel it cannot be used in.'
            )

        async with message.channel.typing():
            return await self._execute(command, context, member, message, line, invoker)

    async def handle_console_command(self, text: str) -> DispatchResult:
        """Run a console line against the global commands only, with no context or member"""
        return await self._until_cancelled(self._handle_console_command(text), "a console command")

    async def _handle_console_command(self, text: str) -> DispatchResult:
        text = (text or "").strip()
        if self.is_command(text):
            text = self.strip_prefix(text)
        if not text:
            return DispatchResult(DispatchOutcome.NOT_COMMAND)

        line = split_command_line(text)
        name = self._check_name_length(line.command)
        if name is None:
            return await self._reject(
                None, RejectionReason.TOO_LONG, None, "The command you input is too long.",
                "The console issued a command that was considered too long to parse."
            )

        command = self.find_global_command(name)
        if command is None:
            return await self._reject(
                None, RejectionReason.UNKNOWN_COMMAND, None, f"The command `{name}` does not exist.",
                f'The console attempted to issue command "{name}" but it doesn\'t exist.'
            )
        return await self._execute(command, None, None, None, line, CONSOLE_INVOKER)

    async def run_passive_handlers(self, message: Any) -> DispatchResult:
        """Offer a non-command message to the context's handlers until one consumes it"""
        if message is None:
            return DispatchResult(DispatchOutcome.UNHANDLED)
        context = self.contexts.get_context(message.guild)
        if context.is_virtual:
            return DispatchResult(DispatchOutcome.UNHANDLED)

        member = self.members.get(context, message.author)
        for handler in context.handlers:
            try:
                consumed = await handler.run(context, member, message)
            except asyncio.CancelledError:
                self.logger.warning(f"Passive handler {handler.name} was cancelled.")
                return DispatchResult(DispatchOutcome.ABORTED, command=handler)
            except Exception as e:
                self.logger.error(f"Passive handler {handler.name} failed: {str(e)}", exc_info=True)
                raise
            if consumed:
                self.logger.debug(f"Passive handler {handler.name} consumed a message from {member.full_name}.")
                return DispatchResult(DispatchOutcome.HANDLED, command=handler)
        return DispatchResult(DispatchOutcome.UNHANDLED)

    def _check_name_length(self, name: str) -> Optional[str]:
        if len(name) > self.max_command_name_length:
            return None
        return strip_color_formatting(name)

    async def _reject(self, message: Any, reason: RejectionReason, command: Optional[Command],
                      detail: str, log_line: str) -> DispatchResult:
        await respond_to(message, detail)
        self.logger.info(log_line)
        return DispatchResult(DispatchOutcome.REJECTED, reason, command, detail)

    async def _execute(self, command: Command, context: Any, member: Any, message: Any,
                       line: CommandLine, invoker: str) -> DispatchResult:
        try:
            await command.execute(context, member, message, line.args, line.raw_args)
        except CommandError as e:
            detail = f"Failed to issue command `{e.command.name}`: {e.message}"
            return await self._reject(
                message, RejectionReason.COMMAND_ERROR, command, detail,
                f'User "{invoker}" attempted to issue command "{e.command.name}" but it failed. '
                f"The command gave the reason: {e.message}"
            )
        except ArchonCommandError as e:
            detail = f"Failed to issue Archon Command `{e.command.name}`: {e.message}"
            return await self._reject(
                message, RejectionReason.COMMAND_ERROR, command, detail,
                f'User "{invoker}" attempted to issue Archon Command "{e.command.name}" but it failed. '
                f"The command gave the reason: {e.message}"
            )
        except AmbiguousResultError as e:
            return await self._reject(
                message, RejectionReason.COMMAND_ERROR, command, format_candidates(e),
                f'User "{invoker}" issued command "{command.name}" with an ambiguous query.'
            )
        except MalformedConfigDataError as e:
            return await self._reject(
                message, RejectionReason.DATA_ERROR, command, e.message,
                f'Command "{command.name}" issued by "{invoker}" read malformed data: {e.message}'
            )
        except asyncio.CancelledError:
            self.logger.warning(f'Command "{command.name}" issued by "{invoker}" was cancelled.')
            return DispatchResult(DispatchOutcome.ABORTED, command=command)
        except Exception as e:
            self.logger.error(f'Unexpected error running command "{command.name}" for "{invoker}": {str(e)}',
                              exc_info=True)
            raise

        self.logger.info(f'User "{invoker}" issued command "{line.command}" with args {args_to_text(line.args)}')
        return DispatchResult(DispatchOutcome.COMPLETED, command=command)
