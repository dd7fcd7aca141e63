# modules/discord/discord_module.py
import asyncio
from typing import Optional

import discord

from core.module_interface import ModuleInterface
from utils.logger import setup_logger
from config.discord_config import DiscordConfig
from config.logging_config import LoggingConfig


class DiscordModule(discord.Client, ModuleInterface):
    """Discord gateway client that feeds guild messages into the dispatcher"""

    def __init__(self, token: Optional[str] = None):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        super().__init__(intents=intents)

        self.logger = setup_logger(
            'discord_module',
            log_format=LoggingConfig.LOG_FORMAT,
            max_bytes=10485760,
            backup_count=5,
            env='discord'
        )
        self.token = token or DiscordConfig.DISCORD_TOKEN
        self.system = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def initialize(self, system) -> bool:
        """Initialize Discord module"""
        try:
            if not self.token:
                DiscordConfig.validate()
            self.system = system
            self.logger.info("Discord module initialized successfully")
            return True
        except Exception as e:
            self.logger.error(f"Error initializing Discord module: {str(e)}")
            return False

    async def setup_hook(self):
        """Record the running loop so other threads can schedule work on it"""
        self._loop = asyncio.get_running_loop()
        self.system.loop = self._loop

    async def on_ready(self):
        """Handle bot ready event"""
        self.logger.info(f"Discord bot logged in as {self.user}")
        self.system.bot_user_id = self.user.id
        for guild in self.guilds:
            context = self.system.contexts.get_context(guild)
            self.logger.debug(f"Guild {guild.name} ({guild.id}) uses context {context.name}")

    async def on_guild_join(self, guild: discord.Guild):
        context = self.system.contexts.get_context(guild)
        self.logger.info(f"Joined guild {guild.name} ({guild.id}); using context {context.name}")

    async def on_message(self, message: discord.Message):
        """Handle incoming messages"""
        if message.author.id == self.user.id:
            return
        if DiscordConfig.IGNORE_OTHER_BOTS and message.author.bot:
            return
        # Direct messages have no context
        if message.guild is None:
            return

        self.logger.debug(f"Message from {message.author} in {message.guild}/{message.channel}: {message.content[:100]}...")

        try:
            result = await self.system.dispatcher.handle_message(message)
            self.logger.debug(f"Dispatch result: {result.outcome.name}")
        except Exception as e:
            self.logger.error(f"Error processing message: {str(e)}")
            if self.system.dispatcher.is_command(message.content):
                await message.channel.send("I encountered an error processing your command.")

    def run_bot(self) -> None:
        """Connect and block until the client is closed"""
        self.run(self.token, log_handler=None)

    def shutdown(self) -> bool:
        """Shutdown Discord module"""
        try:
            if self._loop is not None and not self._loop.is_closed() and not self.is_closed():
                asyncio.run_coroutine_threadsafe(self.close(), self._loop)
            self.logger.info("Discord module shut down successfully")
            return True
        except Exception as e:
            self.logger.error(f"Error shutting down Discord module: {str(e)}")
            return False
