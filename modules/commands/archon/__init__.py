"""
Archon commands: low-level operational commands reached through ``archoncmd``.
"""
from .help import ArchonHelpCommand
from .current_context import CurrentContextCommand
from .force_perms import ForcePermsCommand
from .debug_logging import DebugLoggingCommand


def build_archon_commands(system):
    """The stock archon commands, bound to ``system``"""
    return [
        ArchonHelpCommand(system),
        CurrentContextCommand(),
        ForcePermsCommand(system),
        DebugLoggingCommand(),
    ]


__all__ = [
    'ArchonHelpCommand',
    'CurrentContextCommand',
    'ForcePermsCommand',
    'DebugLoggingCommand',
    'build_archon_commands',
]
