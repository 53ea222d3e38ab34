# funcbind/utils/__init__.py
"""
Utility functions for funcbind.

Logging setup and logger access shared across the package.
"""

from .logging import setup_logging, get_logger

__all__ = ['setup_logging', 'get_logger']
