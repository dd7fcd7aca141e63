# modules/console/console_module.py
import asyncio
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from core.module_interface import ModuleInterface
from utils.logger import setup_logger


class ConsoleModule(ModuleInterface):
    """Reads commands from stdin and runs them on the bot's event loop.

    Input is read on a daemon thread, one line per command, with no line
    editing. Lines typed before the Discord client is connected are dropped.
    """

    def __init__(self, read_line: Callable[[], str] = input):
        self.logger = setup_logger(__name__)
        self.read_line = read_line
        self.system = None
        self.reader_thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def initialize(self, system) -> bool:
        """Initialize console module"""
        try:
            self.system = system
            self.reader_thread = threading.Thread(target=self._read_loop, name="bastion-console", daemon=True)
            self.reader_thread.start()
            self.logger.info("Console module initialized successfully")
            return True
        except Exception as e:
            self.logger.error(f"Error initializing console module: {str(e)}")
            return False

    def _read_loop(self) -> None:
        while not self._stop.is_set():
            try:
                line = self.read_line()
            except EOFError:
                self.logger.debug("Console input closed.")
                break
            except Exception as e:
                self.logger.error(f"Error reading console input: {str(e)}")
                break
            if line.strip():
                self.submit(line)

    def submit(self, line: str) -> Optional[Future]:
        """Schedule a console command on the bot's loop"""
        loop = self.system.loop
        if loop is None or loop.is_closed():
            self.logger.warning("The bot is not connected yet; ignoring console input.")
            return None
        future = asyncio.run_coroutine_threadsafe(self.system.dispatcher.handle_console_command(line), loop)
        future.add_done_callback(self._report_failure)
        return future

    def _report_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.logger.error(f"Console command failed: {error}")

    def shutdown(self) -> bool:
        """Stop reading input; the daemon thread exits with the process"""
        self._stop.set()
        return True
