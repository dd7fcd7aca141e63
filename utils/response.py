"""Replying to a message, or to the console when there is no message."""
import asyncio
from typing import Any, List, Optional

from config.discord_config import DiscordConfig
from utils.formatting import strip_color_formatting, strip_mass_pings
from utils.logger import setup_logger

logger = setup_logger(__name__)


def chunk_text(text: str, size: int = DiscordConfig.MAX_RESPONSE_LENGTH) -> List[str]:
    """Split text into pieces Discord will accept"""
    if not text:
        return []
    return [text[i:i + size] for i in range(0, len(text), size)]


async def respond_to(message: Optional[Any], text: str, allow_mass_pings: bool = False) -> List[Any]:
    """Send ``text`` to the channel ``message`` came from.

    ``message`` is None for console commands, in which case the text is
    written to the log instead with code fences removed.
    """
    if not allow_mass_pings:
        text = strip_mass_pings(text)
    text = strip_color_formatting(text)

    if message is None:
        logger.info(text.replace("```", ""))
        return []

    sent = []
    chunks = chunk_text(text)
    for i, chunk in enumerate(chunks):
        sent.append(await message.channel.send(chunk))
        if i < len(chunks) - 1:
            await asyncio.sleep(0.5)  # Rate limit prevention
    return sent


async def respond_with_embed(message: Optional[Any], embed: Any, console_text: Optional[str] = None) -> Optional[Any]:
    """Send an embed, or log its text form (``console_text`` if given) from the console"""
    if message is None:
        if console_text is None:
            parts = [embed.title or ""]
            parts.extend(f"{field.name}\n{field.value}" for field in embed.fields)
            console_text = "\n".join(part for part in parts if part)
        logger.info(strip_color_formatting(console_text))
        return None
    return await message.channel.send(embed=embed)
