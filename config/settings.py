import os
from pathlib import Path
from dotenv import load_dotenv

from .constants import PERMISSION_LEVEL_STANDARD_USER

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# config/settings.py
class Settings:
    VERSION = "0.1.0"
    DEBUG = _env_flag("BASTION_DEBUG", False)

    # Paths
    DATA_DIR = os.getenv("BASTION_DATA_DIR", str(Path.home() / ".bastion"))
    MIRROR_DIR = os.getenv("BASTION_MIRROR_DIR", "")

    # Command handling
    COMMAND_PREFIX = os.getenv("BASTION_COMMAND_PREFIX", ">>")
    ALLOW_SPACES_AFTER_PREFIX = _env_flag("BASTION_ALLOW_SPACES_AFTER_PREFIX", True)
    MAX_COMMAND_NAME_LENGTH = 32

    # Permissions
    DEFAULT_PERMISSION_LEVEL = PERMISSION_LEVEL_STANDARD_USER

    # Data persistence file names
    CONFIG_FILE_NAME = "configuration.cfg"
    PERMISSIONS_FILE_NAME = "userPerms.permissions"
