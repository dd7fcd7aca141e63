"""Wires the registries, stores, dispatcher and modules into one bot."""
import threading
from typing import Any, Callable, Dict, List, Optional

from config.settings import Settings
from core.bot_context import BotContext, ContextRegistry
from core.command import ArchonCommand, Command
from core.command_registry import CommandRegistry
from core.configuration import ConfigMirror, ConfigStore, ConfigurationRegistry
from core.dispatcher import CommandDispatcher
from core.member import MemberRegistry
from core.module_interface import ModuleInterface
from core.module_manager import ModuleManager
from core.permissions import PermissionStore
from modules.commands import build_builtin_commands
from modules.commands.archon import build_archon_commands
from utils.logger import setup_logger

ShutdownHook = Callable[[], Any]


class BotSystem:
    """Owns everything one running bot needs.

    Nothing here is process-global; tests build a fresh system per case.
    Register contexts, commands and modules first, then call
    ``initialize_contexts()`` and ``start_modules()``.
    """

    def __init__(self, data_dir: Optional[str] = None, mirror_dir: Optional[str] = None,
                 command_prefix: str = Settings.COMMAND_PREFIX,
                 allow_spaces_after_prefix: bool = Settings.ALLOW_SPACES_AFTER_PREFIX,
                 default_permission_level: Optional[int] = Settings.DEFAULT_PERMISSION_LEVEL):
        self.logger = setup_logger(__name__)
        self.configurations = ConfigurationRegistry(data_dir or Settings.DATA_DIR)
        self.mirror_dir = mirror_dir if mirror_dir is not None else (Settings.MIRROR_DIR or None)
        self.contexts = ContextRegistry()
        self.permissions = PermissionStore(self.configurations, default_permission_level)
        self.members = MemberRegistry(self.permissions)
        self.commands: CommandRegistry[Command] = CommandRegistry(build_builtin_commands(self), kind="command")
        self.archon_commands: CommandRegistry[ArchonCommand] = CommandRegistry(
            build_archon_commands(self), kind="archon command"
        )
        self.dispatcher = CommandDispatcher(
            self.contexts, self.commands, self.members,
            prefix=command_prefix,
            allow_spaces_after_prefix=allow_spaces_after_prefix,
        )
        self.modules = ModuleManager()
        # Set by the Discord module once its event loop is running
        self.loop = None

        self._mirrors: Dict[int, ConfigMirror] = {}
        self._shutdown_hooks: List[ShutdownHook] = []
        self._shutdown_lock = threading.Lock()
        self._shutdown_done = threading.Event()
        self.exit_code: Optional[int] = None

    @property
    def bot_user_id(self) -> Optional[int]:
        return self.permissions.bot_user_id

    @bot_user_id.setter
    def bot_user_id(self, user_id: Optional[int]) -> None:
        self.permissions.bot_user_id = user_id

    def register_context(self, context: BotContext) -> BotContext:
        self.contexts.register(context)
        return context

    def register_command(self, command: Command) -> None:
        self.commands.register(command)

    def register_archon_command(self, command: ArchonCommand) -> None:
        self.archon_commands.register(command)

    def register_module(self, name: str, module: ModuleInterface) -> None:
        self.modules.register(name, module)

    def add_shutdown_hook(self, hook: ShutdownHook) -> None:
        self._shutdown_hooks.append(hook)

    def config_for(self, context: Any = None, file_name: str = Settings.CONFIG_FILE_NAME) -> ConfigStore:
        """The config store for a context (or the global one), mirrored when a mirror directory is set"""
        store = self.configurations.get(context, file_name)
        if self.mirror_dir and id(store) not in self._mirrors:
            self._mirrors[id(store)] = ConfigMirror(store, self.mirror_dir)
        return store

    def initialize_contexts(self) -> None:
        self.logger.info("Initializing user-defined bot contexts...")
        self.contexts.initialize_all()

    def start_modules(self) -> bool:
        return self.modules.initialize(self)

    @property
    def is_shut_down(self) -> bool:
        return self._shutdown_done.is_set()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._shutdown_done.wait(timeout)

    def shutdown(self, code: int = 0) -> int:
        """Save state, run hooks and stop modules. Later calls return the first exit code."""
        with self._shutdown_lock:
            if self._shutdown_done.is_set():
                return self.exit_code
            self.exit_code = code
            self.logger.info("Bot shutdown requested. Tying up loose ends...")

            try:
                self.permissions.flush_all()
            except Exception as e:
                self.logger.error(f"Failed to save permissions during shutdown: {e}", exc_info=True)

            for context in self.contexts.all_contexts:
                for handler in context.handlers:
                    try:
                        handler.dispose()
                    except Exception as e:
                        self.logger.error(f"Error disposing passive handler {handler.name}: {e}")

            for hook in self._shutdown_hooks:
                try:
                    hook()
                except Exception as e:
                    self.logger.error(f"Shutdown hook {getattr(hook, '__name__', hook)} failed: {e}")

            self.modules.shutdown()
            self.logger.info("Finalizing shutdown.")
            self._shutdown_done.set()
            return code
