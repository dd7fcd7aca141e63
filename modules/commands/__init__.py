"""
Built-in chat commands available in every context.
"""
from .help_command import HelpCommand, format_command_help
from .config_command import ConfigCommand
from .perms_commands import GetPermsCommand, SetPermsCommand
from .listhandlers_command import ListHandlersCommand
from .shutdown_command import ShutdownCommand
from .archon_command import ArchonCommandRunner


def build_builtin_commands(system):
    """The stock global commands, bound to ``system``"""
    return [
        ArchonCommandRunner(system),
        ConfigCommand(system),
        GetPermsCommand(system),
        HelpCommand(system),
        ListHandlersCommand(),
        SetPermsCommand(system),
        ShutdownCommand(system),
    ]


__all__ = [
    'HelpCommand',
    'ConfigCommand',
    'GetPermsCommand',
    'SetPermsCommand',
    'ListHandlersCommand',
    'ShutdownCommand',
    'ArchonCommandRunner',
    'build_builtin_commands',
    'format_command_help',
]
