"""Line-oriented key/value configuration files, one store per (context, file)."""
import pathlib
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from config.constants import GLOBAL_STORAGE_NAME
from config.settings import Settings
from core.exceptions import MalformedConfigDataError
from utils.file_utils import DataDirectory
from utils.logger import setup_logger


@dataclass(frozen=True)
class ConfigChange:
    """Passed to listeners after a key changes. ``new_value`` is None when the key was removed."""
    context: Any
    key: str
    old_value: Optional[str]
    new_value: Optional[str]
    just_created: bool


ConfigListener = Callable[[ConfigChange], None]


def _format_value(value: Any) -> str:
    # Booleans are written lowercase so they read back the same way in listings
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _parse_value(raw: str, target_type: type) -> Any:
    if target_type is bool:
        lowered = raw.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ValueError(f"{raw!r} is not a boolean")
    return target_type(raw)


def _validate_entry(key: str, value: str) -> None:
    if not key or any(char.isspace() for char in key):
        raise ValueError(f"Config keys must be non-empty and contain no whitespace (got {key!r})")
    if "\n" in value or "\r" in value:
        raise ValueError(f"Config values cannot span multiple lines (key {key!r})")
    if value[:1].isspace():
        # The file separates key and value on the first run of whitespace
        raise ValueError(f"Config values cannot start with whitespace (key {key!r})")


class ConfigStore:
    """An ordered key/value map persisted as ``key value`` lines.

    Every mutation saves the whole file unless ``save=False`` is passed, in
    which case the caller must call ``save()`` later. Listeners receive a
    ``ConfigChange`` after each mutation; a failing listener is logged and
    never undoes the mutation.
    """

    def __init__(self, directory: DataDirectory, file_name: str = Settings.CONFIG_FILE_NAME,
                 context: Any = None):
        self.logger = setup_logger(__name__)
        self.directory = directory
        self.file_name = file_name
        self.context = context
        self._values: Dict[str, str] = {}
        self._listeners: List[ConfigListener] = []
        self._unsaved_changes = False
        self._lock = directory.lock_for(file_name)
        self._load()

    def __repr__(self) -> str:
        return f"<ConfigStore {self.persistence_name}/{self.file_name}>"

    @property
    def persistence_name(self) -> str:
        if self.context is None:
            return GLOBAL_STORAGE_NAME
        return self.context.data_persistence_name

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    def _load(self) -> None:
        for line in self.directory.read_lines(self.file_name):
            if not line.strip():
                continue
            parts = line.split(None, 1)
            key = parts[0]
            value = parts[1].rstrip("\r\n") if len(parts) > 1 else ""
            self._values[key] = value

    def reload(self) -> bool:
        """Re-read the backing file. Refused while deferred writes are unsaved."""
        with self._lock:
            if self._unsaved_changes:
                self.logger.warning(
                    f"Refusing to reload {self.file_name} for {self.persistence_name}: "
                    "there are unsaved changes made with save=False."
                )
                return False
            self._values.clear()
            self._load()
            return True

    def save(self) -> None:
        with self._lock:
            contents = "".join(f"{key} {value}\n" for key, value in self._values.items())
            self.directory.write_text(self.file_name, contents)
            self._unsaved_changes = False

    def add_listener(self, listener: ConfigListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ConfigListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, key: str, old_value: Optional[str], new_value: Optional[str],
                just_created: bool) -> None:
        change = ConfigChange(self.context, key, old_value, new_value, just_created)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                self.logger.error(f"Config change listener failed for key {key!r}: {str(e)}")

    def _write(self, key: str, value: str, save: bool) -> Optional[str]:
        _validate_entry(key, value)
        with self._lock:
            old_value = self._values.get(key)
            self._values[key] = value
            if save:
                self.save()
            else:
                self._unsaved_changes = True
        return old_value

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value for ``key``.

        An absent key with a non-None ``default`` is written back with that
        default, so it shows up in later listings.
        """
        with self._lock:
            if key in self._values:
                return self._values[key]
            if default is None:
                return None
            default = _format_value(default)
            self._write(key, default, save=True)
        self._notify(key, None, default, just_created=True)
        return default

    def set(self, key: str, value: Any, save: bool = True) -> None:
        value = _format_value(value)
        old_value = self._write(key, value, save)
        self._notify(key, old_value, value, just_created=old_value is None)

    def remove(self, key: str, save: bool = True) -> bool:
        with self._lock:
            if key not in self._values:
                return False
            old_value = self._values.pop(key)
            if save:
                self.save()
            else:
                self._unsaved_changes = True
        self._notify(key, old_value, None, just_created=False)
        return True

    def contains(self, key: str) -> bool:
        return key in self._values

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._values.keys())

    def items(self) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._values.items())

    def format_listing(self) -> str:
        """Code-block listing of every entry, used by ``config list``"""
        lines = [f"{key}={value}" for key, value in self.items()]
        return "```\n" + "\n".join(lines) + "\n```"

    def try_get_type(self, key: str, default: Any) -> Any:
        """Read ``key`` as the type of ``default``.

        Missing or unparseable values are replaced with ``default`` without complaint.
        """
        raw = self.get(key, _format_value(default))
        try:
            return _parse_value(raw, type(default))
        except (TypeError, ValueError):
            self.set(key, default)
            return default

    def get_and_mandate_type(self, key: str, default: Any) -> Any:
        """Like ``try_get_type``, but raises MalformedConfigDataError after resetting a bad value."""
        raw = self.get(key, _format_value(default))
        try:
            return _parse_value(raw, type(default))
        except (TypeError, ValueError):
            self.set(key, default)
            raise MalformedConfigDataError(
                f"Config key `{key}` could not be read: `{raw}` is not a valid "
                f"{type(default).__name__}. It has been reset to its default value of {_format_value(default)}."
            )


class ConfigMirror:
    """Copies a store's whole backing file into another directory tree after every change."""

    def __init__(self, source: ConfigStore, mirror_root: Union[str, pathlib.Path]):
        self.logger = setup_logger(__name__)
        self.source = source
        self.mirror_root = pathlib.Path(mirror_root)
        self.target = DataDirectory(self.mirror_root / source.persistence_name)
        source.add_listener(self._on_change)

    def _on_change(self, change: ConfigChange) -> None:
        self.mirror_now()

    def mirror_now(self) -> bool:
        try:
            self.source.directory.copy_to(self.source.file_name, self.target)
            self.logger.debug(f"Mirrored {self.source.file_name} to {self.target.base_path}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to mirror {self.source.file_name} to {self.target.base_path}: {str(e)}")
            return False

    def detach(self) -> None:
        self.source.remove_listener(self._on_change)


class ConfigurationRegistry:
    """Caches one ConfigStore per (context, file name). ``None`` is the global store."""

    def __init__(self, data_root: Union[str, pathlib.Path] = None):
        self.logger = setup_logger(__name__)
        self.data_root = pathlib.Path(data_root or Settings.DATA_DIR)
        self._stores: Dict[Tuple[str, str], ConfigStore] = {}
        self._lock = threading.Lock()

    def directory_for(self, context: Any = None) -> DataDirectory:
        return DataDirectory.for_context(self.data_root, context)

    def get(self, context: Any = None, file_name: str = Settings.CONFIG_FILE_NAME) -> ConfigStore:
        name = GLOBAL_STORAGE_NAME if context is None else context.data_persistence_name
        cache_key = (name, file_name)
        with self._lock:
            store = self._stores.get(cache_key)
            if store is None:
                self.logger.debug(f"Loading config store {name}/{file_name}")
                store = ConfigStore(self.directory_for(context), file_name, context)
                self._stores[cache_key] = store
            return store

    def all_stores(self) -> List[ConfigStore]:
        with self._lock:
            return list(self._stores.values())
