"""Exception types raised by commands, stores and lookups.

All of these are caught at the dispatch boundary and turned into a
``DispatchResult``; none of them should reach the Discord event loop.
"""
from typing import Any, List, Sequence


class CommandError(Exception):
    """Malformed command usage, like incorrect input or invalid arguments."""

    def __init__(self, command: Any, message: str):
        super().__init__(message)
        self.command = command
        self.message = message


class ArchonCommandError(Exception):
    """Malformed usage of an archon sub-command."""

    def __init__(self, command: Any, message: str):
        super().__init__(message)
        self.command = command
        self.message = message


class MalformedConfigDataError(Exception):
    """Stored data could not be parsed into the type the caller asked for."""

    def __init__(self, message: str = "Malformed configuration value."):
        super().__init__(message)
        self.message = message


class AmbiguousResultError(Exception):
    """A lookup matched more than one candidate."""

    def __init__(self, message: str, candidates: Sequence[Any] = ()):
        super().__init__(message)
        self.message = message
        self.candidates: List[Any] = list(candidates)
