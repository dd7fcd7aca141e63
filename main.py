"""
Bastion - A Discord bot framework with per-server contexts and permission-gated commands
"""

# Standard library imports
import signal
import sys
from typing import Optional

# Local application imports
from config.discord_config import DiscordConfig
from config.settings import Settings
from contexts.example_server import ExampleServerContext
from core.bot_system import BotSystem
from modules.console import ConsoleModule
from modules.discord import DiscordModule
from utils.logger import set_debug_logging, setup_logger


class BastionApplication:
    # Exit status constants
    EXIT_SUCCESS = 0
    EXIT_INIT_FAILURE = 1
    EXIT_RUNTIME_ERROR = 2
    EXIT_KEYBOARD_INTERRUPT = 3

    def __init__(self, system: Optional[BotSystem] = None):
        self.logger = setup_logger(__name__)
        self.system = system or BotSystem()
        self.client: Optional[DiscordModule] = None

        # Initialize signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def initialize(self) -> bool:
        """Register contexts and modules, then start them"""
        try:
            DiscordConfig.validate()
            if Settings.DEBUG:
                self.logger.info(f"Initializing Bastion {Settings.VERSION} in Debug Mode...")
                set_debug_logging(True)
            else:
                self.logger.info(f"Initializing Bastion {Settings.VERSION}...")

            self.system.register_context(ExampleServerContext())
            self.system.initialize_contexts()

            self.client = DiscordModule(DiscordConfig.DISCORD_TOKEN)
            self.system.register_module("discord", self.client)
            self.system.register_module("console", ConsoleModule())
            return self.system.start_modules()

        except Exception as e:
            self.logger.error(f"Failed to initialize Bastion: {str(e)}")
            return False

    def _signal_handler(self, signum, frame):
        if not self.system.is_shut_down:
            self.logger.info(f"Received signal {signum}, initiating shutdown...")
            self.system.shutdown(self.EXIT_SUCCESS)

    def start(self) -> bool:
        if not self.initialize():
            self.logger.error("Failed to start Bastion due to initialization error")
            return False

        self.logger.info("Connecting to Discord...")
        self.client.run_bot()
        return True

    def shutdown(self, status_code: int) -> int:
        """Run the shutdown sequence if nothing has yet, and return the final exit code"""
        try:
            return self.system.shutdown(status_code)
        except Exception as e:
            self.logger.error(f"Error during shutdown: {e}")
            return status_code


def main() -> None:
    app = BastionApplication()
    status_code = app.EXIT_SUCCESS

    try:
        if not app.start():
            status_code = app.EXIT_INIT_FAILURE
    except KeyboardInterrupt:
        app.logger.info("Received keyboard interrupt")
        status_code = app.EXIT_KEYBOARD_INTERRUPT
    except Exception as e:
        app.logger.error(f"Unhandled error: {str(e)}", exc_info=True)
        status_code = app.EXIT_RUNTIME_ERROR
    finally:
        status_code = app.shutdown(status_code)
    sys.exit(status_code)


if __name__ == "__main__":
    main()
