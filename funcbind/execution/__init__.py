# funcbind/execution/__init__.py
"""
External command execution.
"""
from .engine import ExecutionEngine

__all__ = ['ExecutionEngine']
