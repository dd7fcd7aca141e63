"""
Utility functions and helper modules.
"""
from .logger import setup_logger
from .file_utils import DataDirectory, FileHandlingError
from .formatting import strip_color_formatting, strip_mass_pings

__all__ = [
    'setup_logger',
    'DataDirectory',
    'FileHandlingError',
    'strip_color_formatting',
    'strip_mass_pings',
]
