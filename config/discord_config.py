"""
Discord bot configuration settings.
"""
from dotenv import load_dotenv
import os

load_dotenv()

class DiscordConfig:
    """Configuration settings for the Discord front-end."""

    # Bot settings
    DISCORD_TOKEN: str = os.getenv('DISCORD_TOKEN', '')
    IGNORE_OTHER_BOTS: bool = True

    # Message settings
    MAX_RESPONSE_LENGTH: int = 2000

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration settings."""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN must be set in .env file")
        return True
