# funcbind/__init__.py
"""
funcbind: scaffold Azure Functions projects with SQL bindings.
"""

__version__ = '0.1.0'
