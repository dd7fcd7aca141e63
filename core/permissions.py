"""Per-context permission levels backed by ``userPerms.permissions`` config stores."""
import threading
from typing import Any, Dict, Optional

from config.constants import MAX_PERMISSION_LEVEL, MIN_PERMISSION_LEVEL
from config.settings import Settings
from core.configuration import ConfigStore, ConfigurationRegistry
from core.exceptions import MalformedConfigDataError
from utils.logger import setup_logger


class PermissionStore:
    """Maps (context, user id) to a permission level from 0 to 255.

    Lookup order: an unsaved pending level, then the stored level, then the
    context's default override for the user, then ``default_level``, then 0
    when ``default_level`` is None.
    The bot's own account always reads as 255 and cannot be changed.
    """

    def __init__(self, configurations: ConfigurationRegistry,
                 default_level: Optional[int] = Settings.DEFAULT_PERMISSION_LEVEL,
                 file_name: str = Settings.PERMISSIONS_FILE_NAME,
                 bot_user_id: Optional[int] = None):
        self.logger = setup_logger(__name__)
        self.configurations = configurations
        self.default_level = default_level
        self.file_name = file_name
        self.bot_user_id = bot_user_id
        self._pending: Dict[Any, Dict[int, int]] = {}
        self._lock = threading.RLock()

    def _store(self, context: Any) -> ConfigStore:
        return self.configurations.get(context, self.file_name)

    def _fallback_level(self, context: Any, user_id: int) -> int:
        if context is not None:
            override = context.default_permissions.get(user_id)
            if override is not None:
                if override == MAX_PERMISSION_LEVEL:
                    self.logger.debug(
                        f"User {user_id} has level {MAX_PERMISSION_LEVEL} by default in {context.name}; "
                        "that level is meant for the console."
                    )
                return override
        if self.default_level is None:
            return MIN_PERMISSION_LEVEL
        return self.default_level

    def is_bot(self, user_id: int) -> bool:
        return self.bot_user_id is not None and user_id == self.bot_user_id

    def get(self, context: Any, user_id: int) -> int:
        """Current level of ``user_id`` in ``context``.

        Raises MalformedConfigDataError if the stored value is not a number;
        the bad entry is reset to the fallback level first.
        """
        if self.is_bot(user_id):
            return MAX_PERMISSION_LEVEL

        with self._lock:
            pending = self._pending.get(context, {})
            if user_id in pending:
                return pending[user_id]

            store = self._store(context)
            raw = store.get(str(user_id))
            if raw is None:
                return self._fallback_level(context, user_id)

            try:
                level = int(raw)
                if not MIN_PERMISSION_LEVEL <= level <= MAX_PERMISSION_LEVEL:
                    raise ValueError(raw)
                return level
            except ValueError:
                fallback = self._fallback_level(context, user_id)
                store.set(str(user_id), str(fallback))
                raise MalformedConfigDataError(
                    f"The stored permission level of user [{user_id}] is malformed: could not read "
                    f"`{raw}` as a level from {MIN_PERMISSION_LEVEL} to {MAX_PERMISSION_LEVEL}. "
                    f"It has been reset to {fallback}."
                )

    def set(self, context: Any, user_id: int, level: int, save_now: bool = True) -> bool:
        """Change a user's level. Returns False when nothing changed.

        With ``save_now=False`` the change is held in memory until
        ``flush(context)`` or ``flush_all()``.
        """
        if not MIN_PERMISSION_LEVEL <= level <= MAX_PERMISSION_LEVEL:
            raise ValueError(f"Permission level must be between {MIN_PERMISSION_LEVEL} and {MAX_PERMISSION_LEVEL}")
        if self.is_bot(user_id):
            self.logger.debug("Ignoring an attempt to change the bot's own permission level.")
            return False

        with self._lock:
            try:
                old_level = self.get(context, user_id)
            except MalformedConfigDataError as e:
                self.logger.warning(e.message)
                old_level = None

            if old_level == level:
                return False

            self._pending.setdefault(context, {})[user_id] = level
            context_name = context.name if context is not None else "global storage"
            self.logger.info(
                f"Permission level of user {user_id} in {context_name} changed from {old_level} to {level}."
            )
            if save_now:
                self.flush(context)
            return True

    def flush(self, context: Any) -> None:
        """Write the held changes for one context"""
        with self._lock:
            pending = self._pending.pop(context, None)
            if not pending:
                return
            store = self._store(context)
            for user_id, level in pending.items():
                store.set(str(user_id), str(level), save=False)
            store.save()

    def flush_all(self) -> None:
        with self._lock:
            for context in list(self._pending.keys()):
                self.flush(context)

    @property
    def has_pending_changes(self) -> bool:
        return any(self._pending.values())
