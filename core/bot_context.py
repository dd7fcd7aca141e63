"""Server contexts: user-defined ones registered at startup, virtual ones made on demand."""
import threading
from typing import Dict, Iterable, List, Optional, Type, TypeVar, Union

import discord

from core.command import Command, PassiveHandler
from utils.logger import setup_logger

CONTEXT_EMBED_COLOUR = discord.Colour.from_rgb(0, 255, 127)


class BotContext:
    """One Discord server as the bot sees it.

    Subclasses set ``name``, ``data_persistence_name`` (a file-system safe
    name for the context's data directory) and ``server_id``, and override
    the ``create_*`` hooks to supply their own commands, passive handlers and
    default permission levels.
    """

    name: str = ""
    data_persistence_name: str = ""
    server_id: int = 0
    is_virtual: bool = False

    def __init__(self):
        self.logger = setup_logger(__name__)
        self.server: Optional[discord.Guild] = None
        self.commands: List[Command] = list(self.create_commands())
        self.handlers: List[PassiveHandler] = sorted(self.create_handlers(), key=lambda h: h.sort_key())
        self.default_permissions: Dict[int, int] = dict(self.create_default_permissions())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} server_id={self.server_id}>"

    def create_commands(self) -> Iterable[Command]:
        return ()

    def create_handlers(self) -> Iterable[PassiveHandler]:
        return ()

    def create_default_permissions(self) -> Dict[int, int]:
        """User id to level, used when nothing is stored for that user"""
        return {}

    def after_context_initialized(self) -> None:
        """Called once every context has been registered"""
        pass

    def bind_server(self, server: discord.Guild) -> None:
        self.server = server

    def find_command(self, name: str) -> Optional[Command]:
        for command in self.commands:
            if command.matches(name):
                return command
        return None

    def find_handler(self, name: str) -> Optional[PassiveHandler]:
        lowered = name.lower()
        for handler in self.handlers:
            if handler.name.lower() == lowered:
                return handler
        return None

    @property
    def bot_role(self) -> Optional[discord.Role]:
        """The integration role Discord manages for the bot, if it has one"""
        if self.server is None or self.server.me is None:
            return None
        for role in self.server.me.roles:
            if role.managed:
                return role
        return None

    def _server_label(self) -> str:
        if self.server is None:
            return f"{self.server_id} (not connected)"
        return f"{self.server_id} ({self.server.name})"

    def _role_label(self) -> str:
        role = self.bot_role
        if role is None:
            return "N/A"
        return f"{role.id} ({role.name})"

    def to_console_string(self) -> str:
        return (
            "BotContext Information\n"
            f"> Context Name: {self.name}\n"
            f"> Data Persistence Name: {self.data_persistence_name}\n"
            f"> Target Server: {self._server_label()}\n"
            f"> Bot Role: {self._role_label()}\n"
            f"> Is Virtual Context: {self.is_virtual}"
        )

    def to_embed(self) -> discord.Embed:
        embed = discord.Embed(title="**BotContext Information Dump**", colour=CONTEXT_EMBED_COLOUR)
        embed.add_field(
            name="Context Object Information",
            value=(
                f"**Context Display Name:** {self.name}\n"
                f"**Data Persistence Name:** {self.data_persistence_name}\n"
                f"**Is Virtual:** {self.is_virtual}"
            ),
            inline=False,
        )
        embed.add_field(
            name="Context Target Information",
            value=f"**Target Server:** {self._server_label()}\n**Integrated Role:** {self._role_label()}",
            inline=False,
        )
        return embed


class VirtualBotContext(BotContext):
    """Stand-in context for a server that has no user-defined context.

    Virtual contexts have no commands or passive handlers of their own.
    """

    is_virtual = True

    def __init__(self, server_id: int, name: str = ""):
        super().__init__()
        self.server_id = server_id
        self.name = name or str(server_id)
        self.data_persistence_name = f"VirtualContext-{server_id}"


C = TypeVar("C", bound=BotContext)


class ContextRegistry:
    """Resolves a server to exactly one context.

    User-defined contexts win; otherwise a virtual context is created on the
    first lookup and reused for the lifetime of the registry.
    """

    def __init__(self):
        self.logger = setup_logger(__name__)
        self._user_defined: List[BotContext] = []
        self._virtual: Dict[int, VirtualBotContext] = {}
        self._lock = threading.Lock()

    def register(self, context: BotContext) -> None:
        if context.is_virtual:
            raise ValueError("Virtual contexts are created by the registry and cannot be registered")
        if not context.data_persistence_name:
            raise ValueError(f"{type(context).__name__} has no data_persistence_name")
        with self._lock:
            for existing in self._user_defined:
                if existing.server_id == context.server_id:
                    raise ValueError(
                        f"Server {context.server_id} already belongs to context {existing.name!r}"
                    )
            self._user_defined.append(context)
        self.logger.debug(f"Registered context {type(context).__name__} for server {context.server_id}")

    @property
    def user_defined_contexts(self) -> List[BotContext]:
        with self._lock:
            return list(self._user_defined)

    @property
    def virtual_contexts(self) -> List[VirtualBotContext]:
        with self._lock:
            return list(self._virtual.values())

    @property
    def all_contexts(self) -> List[BotContext]:
        with self._lock:
            return self._user_defined + list(self._virtual.values())

    def get_context(self, server: Union[discord.Guild, int]) -> BotContext:
        """Context for a guild or a raw server id, creating a virtual one if needed"""
        server_id = getattr(server, "id", server)
        guild = None if isinstance(server, int) else server

        with self._lock:
            for context in self._user_defined:
                if context.server_id == server_id:
                    if guild is not None and context.server is None:
                        context.bind_server(guild)
                    return context

            context = self._virtual.get(server_id)
            if context is None:
                self.logger.debug(f"No context found for server {server_id}. Creating a virtual context.")
                context = VirtualBotContext(server_id, getattr(guild, "name", ""))
                self._virtual[server_id] = context
            if guild is not None and context.server is None:
                context.bind_server(guild)
            return context

    def get_user_defined(self, context_type: Type[C]) -> Optional[C]:
        with self._lock:
            for context in self._user_defined:
                if type(context) is context_type:
                    return context
        return None

    def initialize_all(self) -> None:
        for context in self.user_defined_contexts:
            try:
                context.after_context_initialized()
                self.logger.debug(f"Initialized context {type(context).__name__}")
            except Exception as e:
                self.logger.error(f"Error initializing context {context.name}: {str(e)}", exc_info=True)
