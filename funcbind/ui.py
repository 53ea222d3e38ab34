# funcbind/ui.py
"""
Terminal interaction: user-facing messages and prompts.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt


class Notifier(ABC):
    """Receives user-facing messages."""

    @abstractmethod
    def show_error(self, message: str) -> None:
        ...


class ConsoleNotifier(Notifier):
    """Shows user-facing messages on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def show_error(self, message: str) -> None:
        self._console.print(Panel(message, title="Error", border_style="red", expand=False))


class FunctionNamePrompt:
    """Asks the user for the name of the new function."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    async def __call__(self, default: str) -> str:
        # Prompt.ask blocks on stdin, so keep it off the event loop
        return await asyncio.to_thread(
            Prompt.ask, "Function name", default=default, console=self._console
        )


class FixedFunctionName:
    """Answers the function name prompt with a preset value."""

    def __init__(self, name: str):
        self.name = name

    async def __call__(self, default: str) -> str:
        return self.name
