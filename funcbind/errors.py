# funcbind/errors.py
"""
Exception types raised by funcbind.
"""
from typing import Optional


class FuncBindError(Exception):
    """Base class for all funcbind errors."""
    pass


class ExtensionUnavailableError(FuncBindError):
    """Raised when the Azure Functions tooling cannot be resolved."""
    pass


class ProjectNotOpenError(FuncBindError):
    """Raised when no Azure Functions project is open in the workspace."""
    pass


class ProcessExecutionError(FuncBindError):
    """Exception raised when an external command fails."""

    def __init__(
        self,
        message: str,
        command: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = ""
    ):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class MalformedSettingsError(FuncBindError):
    """Raised when local.settings.json cannot be parsed or lacks a Values section."""
    pass


class BindingInjectionError(FuncBindError):
    """Raised when a SQL binding cannot be added to a function."""
    pass


class FileWatchTimeoutError(FuncBindError):
    """Raised when a configured watch timeout elapses before a file appears."""
    pass
