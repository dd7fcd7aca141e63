"""
Core functionality package.
"""
from .argument_splitter import CommandLine, split_args, split_command_line
from .command import ArchonCommand, Command, PassiveHandler, UsagePermissionPacket
from .exceptions import (
    AmbiguousResultError,
    ArchonCommandError,
    CommandError,
    MalformedConfigDataError,
)

__all__ = [
    'CommandLine',
    'split_args',
    'split_command_line',
    'ArchonCommand',
    'Command',
    'PassiveHandler',
    'UsagePermissionPacket',
    'AmbiguousResultError',
    'ArchonCommandError',
    'CommandError',
    'MalformedConfigDataError',
]
