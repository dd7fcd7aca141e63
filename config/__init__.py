"""
Configuration package.
"""
from .settings import Settings
from .discord_config import DiscordConfig
from .constants import (
    PERMISSION_LEVEL_NONMEMBER,
    PERMISSION_LEVEL_BLACKLISTED,
    PERMISSION_LEVEL_STANDARD_USER,
    PERMISSION_LEVEL_TRUSTED_USER,
    PERMISSION_LEVEL_OPERATOR,
    PERMISSION_LEVEL_ADMINISTRATOR,
    PERMISSION_LEVEL_SERVER_OWNER,
    PERMISSION_LEVEL_BACKEND_CONSOLE,
)

__all__ = [
    'Settings',
    'DiscordConfig',
    'PERMISSION_LEVEL_NONMEMBER',
    'PERMISSION_LEVEL_BLACKLISTED',
    'PERMISSION_LEVEL_STANDARD_USER',
    'PERMISSION_LEVEL_TRUSTED_USER',
    'PERMISSION_LEVEL_OPERATOR',
    'PERMISSION_LEVEL_ADMINISTRATOR',
    'PERMISSION_LEVEL_SERVER_OWNER',
    'PERMISSION_LEVEL_BACKEND_CONSOLE',
]
