"""
User-defined server contexts.
"""
from .example_server import ExampleServerContext

__all__ = ['ExampleServerContext']
