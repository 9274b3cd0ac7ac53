"""Terminal-facing ports: prompts, browser and command echo."""

from typing import Optional, Protocol


class PromptProtocol(Protocol):
    """Ask the user a question and return the raw answer."""

    def ask(self, question: str) -> str:
        ...


class BrowserProtocol(Protocol):
    def open(self, url: str) -> None:
        ...


class ReporterProtocol(Protocol):
    """
    User-facing output of the dispatcher.

    Kept separate from logging: these lines are the tool's transparency
    contract (every mutating command is echoed before it runs).
    """

    def command(self, line: str) -> None:
        """Echo a command line about to run (`=> git ...`)."""
        ...

    def info(self, line: str) -> None:
        ...

    def warning(self, line: str) -> None:
        ...

    def error(self, message: str, hint: Optional[str] = None) -> None:
        ...
