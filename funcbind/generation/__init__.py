# funcbind/generation/__init__.py
"""
Edits applied to generated function projects.
"""
from .rewriter import rewrite_function_text, rewrite_function_file
from .settings import merge_connection_string
from .binding import BindingService, SqlBindingInjector

__all__ = [
    'rewrite_function_text',
    'rewrite_function_file',
    'merge_connection_string',
    'BindingService',
    'SqlBindingInjector',
]
