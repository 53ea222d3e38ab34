# funcbind/toolchain/__init__.py
"""
Integrations with external developer tooling.
"""
from .package_managers import DotnetPackageManager
from .functions import (
    FunctionsApi, ExtensionApiProvider, CoreToolsApi, CoreToolsProvider
)

__all__ = [
    'DotnetPackageManager',
    'FunctionsApi',
    'ExtensionApiProvider',
    'CoreToolsApi',
    'CoreToolsProvider',
]
