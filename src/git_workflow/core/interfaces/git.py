"""
Git Client Protocol

Port between the workflow dispatcher and the git executable. The dispatcher
only ever reads a RepositoryContext and asks for fixed command lines to be
run; everything else (locking, refs, remotes) belongs to git.
"""

from dataclasses import dataclass
from typing import List, Protocol

from git_workflow.core.domain.models import RepositoryContext


@dataclass
class GitResult:
    """
    Outcome of one git invocation.

    Attributes:
        args: Arguments passed to git (without the leading `git`)
        returncode: Process exit status (0 on success, also 0 for dry runs)
        stdout: Captured standard output (empty when streamed to the terminal)
        stderr: Captured standard error
    """

    args: List[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return format_command(self.args)


def format_command(args: List[str]) -> str:
    """Render git arguments the way a user would type them."""
    rendered = []
    for arg in args:
        if not arg or any(ch.isspace() for ch in arg) or "'" in arg:
            rendered.append("'" + arg.replace("'", "'\\''") + "'")
        else:
            rendered.append(arg)
    return " ".join(["git", *rendered])


class GitClientProtocol(Protocol):
    """Read repository state and run git commands."""

    def load_context(self) -> RepositoryContext:
        """
        Locate the repository and snapshot its current state.

        Raises:
            NoRepositoryError: If no `.git` exists up to the filesystem root
        """
        ...

    def run(self, args: List[str]) -> GitResult:
        """Run a git command with output going straight to the terminal."""
        ...

    def list_branches(self) -> List[str]:
        """Local branch names."""
        ...

    def list_tags(self) -> List[str]:
        ...
