"""Interactive terminal adapters: rich prompts and the system browser."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt


class ConsolePrompt:
    """Blocking prompt on the terminal; no timeout."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask(self, question: str) -> str:
        return Prompt.ask(escape(question), console=self.console, default="", show_default=False)


class SystemBrowser:
    """Open URLs in the user's default browser."""

    def open(self, url: str) -> None:
        typer.launch(url)
