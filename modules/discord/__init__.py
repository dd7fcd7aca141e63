from .discord_module import DiscordModule

"""
Discord integration module for Bastion.
"""

__all__ = ['DiscordModule']
