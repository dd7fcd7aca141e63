from .console_module import ConsoleModule

"""
Backend console input for Bastion.
"""

__all__ = ['ConsoleModule']
