import asyncio
from unittest.mock import MagicMock

import pytest

from core.bot_context import ContextRegistry
from core.command import UsagePermissionPacket
from core.command_registry import CommandRegistry
from core.configuration import ConfigurationRegistry
from core.dispatcher import CommandDispatcher, DispatchOutcome, RejectionReason
from core.member import MemberRegistry
from core.permissions import PermissionStore

from fakes import (
    FakeChannel,
    FakeContext,
    FakeGuild,
    FakeMessage,
    FakeUser,
    RecordingCommand,
    RecordingHandler,
)

ALICE = FakeUser(1001, "alice", discriminator="1234")
GUILD = FakeGuild(555, "Test Guild", [ALICE])


class FailingCommand(RecordingCommand):
    def __init__(self, name, error):
        super().__init__(name)
        self.raised = error

    async def execute(self, context, member, message, args, raw_args):
        if self.raised == "command":
            raise self.error("bad input")
        raise self.raised


class ChannelBoundCommand(RecordingCommand):
    def __init__(self, name, suggested):
        super().__init__(name)
        self.suggested = suggested

    def can_use_command_in_channel(self, member, channel):
        return UsagePermissionPacket.deny("Not here.", self.suggested)


def _dispatcher(tmp_path, global_commands=(), context=None, **kwargs):
    contexts = ContextRegistry()
    if context is not None:
        contexts.register(context)
    permissions = PermissionStore(ConfigurationRegistry(tmp_path), 2)
    dispatcher = CommandDispatcher(
        contexts, CommandRegistry(global_commands), MemberRegistry(permissions), **kwargs
    )
    return dispatcher, permissions


def _send(dispatcher, text, guild=GUILD, author=ALICE):
    message = FakeMessage(text, author, guild, FakeChannel())
    result = asyncio.run(dispatcher.handle_message(message))
    return result, message


def test_prefix_classification(tmp_path) -> None:
    dispatcher, _ = _dispatcher(tmp_path, prefix=">>", allow_spaces_after_prefix=True)

    assert dispatcher.strip_prefix(">>help") == "help"
    assert dispatcher.strip_prefix(">> help") == "help"
    assert dispatcher.strip_prefix("help") is None
    assert dispatcher.strip_prefix(">>") is None
    assert dispatcher.strip_prefix(">> ") is None
    assert dispatcher.strip_prefix(">>  help") is None


def test_prefix_without_spaces_allowed(tmp_path) -> None:
    dispatcher, _ = _dispatcher(tmp_path, prefix=">>", allow_spaces_after_prefix=False)

    assert dispatcher.is_command(">>help")
    assert not dispatcher.is_command(">> help")


def test_prefix_is_case_insensitive(tmp_path) -> None:
    dispatcher, _ = _dispatcher(tmp_path, prefix="bot!")

    assert dispatcher.strip_prefix("BOT!help") == "help"


def test_empty_prefix_is_refused(tmp_path) -> None:
    with pytest.raises(ValueError):
        _dispatcher(tmp_path, prefix="")


def test_command_runs_with_args_and_audit_line(tmp_path) -> None:
    ping = RecordingCommand("ping")
    dispatcher, _ = _dispatcher(tmp_path, [ping], prefix=">>")
    dispatcher.logger = MagicMock()

    result, message = _send(dispatcher, '>>PING one "two three"')

    assert result.outcome is DispatchOutcome.COMPLETED
    assert result.succeeded
    assert result.command is ping
    context, member, sent, args, raw_args = ping.calls[0]
    assert member.id == ALICE.id
    assert sent is message
    assert args == ["one", "two three"]
    assert raw_args == 'one "two three"'
    assert message.channel.typing_count == 1
    dispatcher.logger.info.assert_called_with(
        'User "alice#1234" issued command "PING" with args [one, two three]'
    )


def test_context_command_shadows_global(tmp_path) -> None:
    global_ping = RecordingCommand("ping")
    local_ping = RecordingCommand("ping")
    dispatcher, _ = _dispatcher(tmp_path, [global_ping], FakeContext(commands=[local_ping]), prefix=">>")

    result, _ = _send(dispatcher, ">>ping")

    assert result.command is local_ping
    assert len(local_ping.calls) == 1
    assert global_ping.calls == []


def test_alternate_name_runs_same_command(tmp_path) -> None:
    hello = RecordingCommand("sayhello", alternate_names=("hello",))
    dispatcher, _ = _dispatcher(tmp_path, context=FakeContext(commands=[hello]), prefix=">>")

    result, _ = _send(dispatcher, ">>Hello")

    assert result.command is hello
    assert result.command.name == "sayhello"


def test_unknown_command(tmp_path) -> None:
    dispatcher, _ = _dispatcher(tmp_path, prefix=">>")

    result, message = _send(dispatcher, ">>nope")

    assert result.outcome is DispatchOutcome.REJECTED
    assert result.reason is RejectionReason.UNKNOWN_COMMAND
    assert message.channel.texts == ["The command `nope` does not exist."]


def test_overlong_command_name(tmp_path) -> None:
    ping = RecordingCommand("a" * 33)
    dispatcher, _ = _dispatcher(tmp_path, [ping], prefix=">>")

    result, message = _send(dispatcher, ">>" + "a" * 33)

    assert result.reason is RejectionReason.TOO_LONG
    assert ping.calls == []
    assert message.channel.texts == ["The command you input is too long."]


def test_colour_codes_are_stripped_from_command_name(tmp_path) -> None:
    ping = RecordingCommand("ping")
    dispatcher, _ = _dispatcher(tmp_path, [ping], prefix=">>")

    result, _ = _send(dispatcher, ">>§apin§bg")

    assert result.command is ping


def test_required_level_is_inclusive(tmp_path) -> None:
    context = FakeContext()
    op_command = RecordingCommand("op", 63)
    dispatcher, permissions = _dispatcher(tmp_path, [op_command], context, prefix=">>")

    permissions.set(context, ALICE.id, 62)
    result, message = _send(dispatcher, ">>op")
    assert result.reason is RejectionReason.UNAUTHORIZED
    assert "`63`" in result.detail and "`62`" in result.detail
    assert message.channel.texts == [result.detail]
    assert op_command.calls == []

    permissions.set(context, ALICE.id, 63)
    result, _ = _send(dispatcher, ">>op")
    assert result.outcome is DispatchOutcome.COMPLETED


def test_malformed_permission_data_is_reported(tmp_path) -> None:
    context = FakeContext()
    dispatcher, permissions = _dispatcher(tmp_path, [RecordingCommand("ping")], context, prefix=">>")
    permissions.configurations.get(context, permissions.file_name).set(str(ALICE.id), "lots")

    result, _ = _send(dispatcher, ">>ping")

    assert result.reason is RejectionReason.DATA_ERROR


def test_wrong_channel_suggests_another(tmp_path) -> None:
    bound = ChannelBoundCommand("post", FakeChannel(99, "bot-spam"))
    dispatcher, _ = _dispatcher(tmp_path, [bound], prefix=">>")

    result, _ = _send(dispatcher, ">>post")

    assert result.reason is RejectionReason.WRONG_CHANNEL
    assert result.detail == "Not here. Try using it in <#99> instead."
    assert bound.calls == []


def test_command_error_is_reported_to_invoker(tmp_path) -> None:
    failing = FailingCommand("fail", "command")
    dispatcher, _ = _dispatcher(tmp_path, [failing], prefix=">>")

    result, message = _send(dispatcher, ">>fail")

    assert result.outcome is DispatchOutcome.REJECTED
    assert result.reason is RejectionReason.COMMAND_ERROR
    assert message.channel.texts == ["Failed to issue command `fail`: bad input"]


def test_cancelled_command_is_aborted_silently(tmp_path) -> None:
    cancelled = FailingCommand("slow", asyncio.CancelledError())
    dispatcher, _ = _dispatcher(tmp_path, [cancelled], prefix=">>")

    result, message = _send(dispatcher, ">>slow")

    assert result.outcome is DispatchOutcome.ABORTED
    assert message.channel.sent == []


class CancelledChannel(FakeChannel):
    async def send(self, content=None, *, embed=None):
        raise asyncio.CancelledError()


def test_cancelled_while_replying_is_aborted(tmp_path) -> None:
    dispatcher, _ = _dispatcher(tmp_path, prefix=">>")
    dispatcher.logger = MagicMock()
    message = FakeMessage(">>nosuchcommand", ALICE, GUILD, CancelledChannel())

    result = asyncio.run(dispatcher.handle_message(message))

    assert result.outcome is DispatchOutcome.ABORTED
    assert message.channel.sent == []
    dispatcher.logger.warning.assert_called_once()


def test_unexpected_errors_propagate(tmp_path) -> None:
    broken = FailingCommand("broken", RuntimeError("disk on fire"))
    dispatcher, _ = _dispatcher(tmp_path, [broken], prefix=">>")
    dispatcher.logger = MagicMock()

    with pytest.raises(RuntimeError):
        _send(dispatcher, ">>broken")
    dispatcher.logger.error.assert_called_once()


def test_console_uses_global_commands_only(tmp_path) -> None:
    global_ping = RecordingCommand("ping")
    local_only = RecordingCommand("local")
    dispatcher, _ = _dispatcher(tmp_path, [global_ping], FakeContext(commands=[local_only]), prefix=">>")

    result = asyncio.run(dispatcher.handle_console_command("ping a b"))
    assert result.outcome is DispatchOutcome.COMPLETED
    assert global_ping.calls == [(None, None, None, ["a", "b"], "a b")]

    result = asyncio.run(dispatcher.handle_console_command(">>local"))
    assert result.reason is RejectionReason.UNKNOWN_COMMAND
    assert local_only.calls == []


def test_console_skips_permission_checks(tmp_path) -> None:
    top = RecordingCommand("top", 255)
    dispatcher, _ = _dispatcher(tmp_path, [top], prefix=">>")

    result = asyncio.run(dispatcher.handle_console_command("top"))

    assert result.outcome is DispatchOutcome.COMPLETED


def test_first_consuming_handler_stops_the_rest(tmp_path) -> None:
    log = []
    handlers = [
        RecordingHandler("charlie", True, log),
        RecordingHandler("alpha", False, log),
        RecordingHandler("bravo", True, log),
    ]
    dispatcher, _ = _dispatcher(tmp_path, context=FakeContext(handlers=handlers), prefix=">>")

    result, _ = _send(dispatcher, "just chatting")

    assert log == ["alpha", "bravo"]
    assert result.outcome is DispatchOutcome.HANDLED
    assert result.command.name == "bravo"


def test_no_consuming_handler_is_unhandled(tmp_path) -> None:
    log = []
    handlers = [RecordingHandler("alpha", False, log), RecordingHandler("bravo", False, log)]
    dispatcher, _ = _dispatcher(tmp_path, context=FakeContext(handlers=handlers), prefix=">>")

    result, _ = _send(dispatcher, "just chatting")

    assert log == ["alpha", "bravo"]
    assert result.outcome is DispatchOutcome.UNHANDLED


def test_virtual_contexts_skip_passive_handlers(tmp_path) -> None:
    log = []
    context = FakeContext(handlers=[RecordingHandler("alpha", True, log)])
    dispatcher, _ = _dispatcher(tmp_path, context=context, prefix=">>")
    stranger_guild = FakeGuild(777, "Elsewhere", [ALICE])

    result, _ = _send(dispatcher, "just chatting", guild=stranger_guild)

    assert result.outcome is DispatchOutcome.UNHANDLED
    assert log == []


def test_commands_work_in_virtual_contexts(tmp_path) -> None:
    ping = RecordingCommand("ping")
    dispatcher, _ = _dispatcher(tmp_path, [ping], prefix=">>")

    result, _ = _send(dispatcher, ">>ping", guild=FakeGuild(777, "Elsewhere", [ALICE]))

    assert result.outcome is DispatchOutcome.COMPLETED
    assert ping.calls[0][0].is_virtual
