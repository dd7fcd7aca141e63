import os
import shutil
import pathlib
import tempfile
import threading
from typing import Dict, List, Union
from config.constants import GLOBAL_STORAGE_NAME
from utils.logger import setup_logger

class FileHandlingError(Exception):
    """Custom exception for file handling operations"""
    pass

class DataDirectory:
    """A directory holding the persisted files of one context (or the global store).

    Every file name passed to the methods below is relative to ``base_path``.
    Writers to the same absolute path share one lock for the whole process.
    """

    _locks: Dict[str, threading.RLock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, base_path: Union[str, pathlib.Path]):
        self.logger = setup_logger(__name__)
        self.base_path = pathlib.Path(base_path)
        self._ensure_directories()

    def __repr__(self) -> str:
        return f"DataDirectory({str(self.base_path)!r})"

    @classmethod
    def for_context(cls, root: Union[str, pathlib.Path], context=None, sub_dir: str = "") -> "DataDirectory":
        """Directory for a context under ``root``; ``None`` selects the global store"""
        name = GLOBAL_STORAGE_NAME if context is None else context.data_persistence_name
        path = pathlib.Path(root) / name
        if sub_dir:
            path = path / sub_dir
        return cls(path)

    @classmethod
    def custom(cls, root: Union[str, pathlib.Path], name: str) -> "DataDirectory":
        return cls(pathlib.Path(root) / "customdata" / name)

    def _ensure_directories(self) -> None:
        """Ensure required directories exist"""
        try:
            os.makedirs(self.base_path, exist_ok=True)
        except OSError as e:
            raise FileHandlingError(f"Error creating directory {self.base_path}: {str(e)}") from e

    def path_for(self, name: str) -> pathlib.Path:
        return self.base_path / name

    def lock_for(self, name: str) -> threading.RLock:
        """The writer lock shared by everything that writes this file"""
        key = os.path.abspath(self.path_for(name))
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read_text(self, name: str) -> str:
        """Read a whole file; a missing file reads as empty"""
        filepath = self.path_for(name)
        if not filepath.is_file():
            return ""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise FileHandlingError(f"Error loading file {filepath}: {str(e)}") from e

    def read_lines(self, name: str) -> List[str]:
        return self.read_text(name).splitlines()

    def write_text(self, name: str, contents: str) -> None:
        """Replace a file's contents atomically"""
        filepath = self.path_for(name)
        with self.lock_for(name):
            try:
                os.makedirs(filepath.parent, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                        f.write(contents)
                    os.replace(tmp_path, filepath)
                except BaseException:
                    if os.path.exists(tmp_path):
                        os.remove(tmp_path)
                    raise
            except OSError as e:
                raise FileHandlingError(f"Error saving file {filepath}: {str(e)}") from e

    def delete(self, name: str) -> bool:
        filepath = self.path_for(name)
        with self.lock_for(name):
            if not filepath.is_file():
                return False
            try:
                os.remove(filepath)
            except OSError as e:
                raise FileHandlingError(f"Error deleting file {filepath}: {str(e)}") from e
            return True

    def create_directory(self, name: str) -> pathlib.Path:
        """Create a sub-directory if it doesn't exist"""
        dirpath = self.path_for(name)
        try:
            os.makedirs(dirpath, exist_ok=True)
        except OSError as e:
            raise FileHandlingError(f"Error creating directory: {str(e)}") from e
        return dirpath

    def copy_to(self, name: str, destination: "DataDirectory", dest_name: str = None) -> None:
        """Copy one file into another directory, replacing what is there"""
        target_name = dest_name or name
        source = self.path_for(name)
        target = destination.path_for(target_name)
        with self.lock_for(name), destination.lock_for(target_name):
            try:
                os.makedirs(target.parent, exist_ok=True)
                if source.is_file():
                    shutil.copyfile(source, target)
                else:
                    target.write_text("", encoding='utf-8')
            except OSError as e:
                raise FileHandlingError(f"Error copying {source} to {target}: {str(e)}") from e
