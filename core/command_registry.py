"""Global command lists: built-in entries plus user-registered ones."""
import threading
from typing import Generic, Iterable, List, Optional, TypeVar

from utils.logger import setup_logger

T = TypeVar("T")


class CommandRegistry(Generic[T]):
    """Holds a fixed set of built-in entries and a mutable set of user entries.

    ``entries`` is the merged view, sorted by each entry's ``sort_key``.
    Mutations only invalidate the view; it is rebuilt on the next read. The
    rebuild works from scratch, so a race on the dirty flag costs at most a
    redundant sort.
    """

    def __init__(self, builtins: Iterable[T] = (), kind: str = "command"):
        self.logger = setup_logger(__name__)
        self.kind = kind
        self._builtins: List[T] = list(builtins)
        self._user_entries: List[T] = []
        self._merged: List[T] = []
        self._needs_sort = True
        self._lock = threading.Lock()

    @property
    def builtins(self) -> List[T]:
        return list(self._builtins)

    @property
    def user_entries(self) -> List[T]:
        return list(self._user_entries)

    @user_entries.setter
    def user_entries(self, entries: Iterable[T]) -> None:
        with self._lock:
            self._user_entries = list(entries)
            self._needs_sort = True

    def register(self, entry: T) -> None:
        with self._lock:
            self._user_entries.append(entry)
            self._needs_sort = True

    def unregister(self, entry: T) -> bool:
        with self._lock:
            try:
                self._user_entries.remove(entry)
            except ValueError:
                return False
            self._needs_sort = True
            return True

    def invalidate(self) -> None:
        with self._lock:
            self._needs_sort = True

    def _ensure_sorted(self) -> List[T]:
        with self._lock:
            if self._needs_sort:
                self.logger.debug(f"{self.kind} list referenced but not sorted. Sorting now...")
                merged = self._builtins + self._user_entries
                self._merged = sorted(merged, key=lambda entry: entry.sort_key())
                self._needs_sort = False
                self.logger.debug(f"Found {len(self._merged)} {self.kind}s.")
            return self._merged

    @property
    def entries(self) -> List[T]:
        return list(self._ensure_sorted())

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._ensure_sorted())

    def find(self, name: str) -> Optional[T]:
        """First entry whose name or alternate name matches, case-insensitively"""
        for entry in self._ensure_sorted():
            if entry.matches(name):
                return entry
        return None
