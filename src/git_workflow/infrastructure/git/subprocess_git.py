"""
Git client backed by the `git` executable.

Queries capture their output; mutating commands inherit the terminal so the
user sees git's own progress and messages.
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

import structlog

from git_workflow.core.domain.errors import GitCommandError, NoRepositoryError, WorkflowError
from git_workflow.core.domain.models import RepositoryContext
from git_workflow.core.interfaces.git import GitResult, format_command

logger = structlog.get_logger()


def find_repository_root(start: Optional[Path] = None) -> Path:
    """
    Walk up from `start` until a directory containing `.git` is found.

    `.git` may be a directory or a file (worktrees and submodules use a
    file pointing at the real metadata).

    Raises:
        NoRepositoryError: If the filesystem root is reached without a match
    """
    origin = Path(start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        if (directory / ".git").exists():
            return directory
    raise NoRepositoryError(str(origin))


class SubprocessGitClient:
    """GitClientProtocol implementation that shells out to git."""

    def __init__(self, cwd: Optional[Path] = None, remote: str = "origin", timeout: Optional[float] = None):
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.remote = remote
        self.timeout = timeout
        self._root: Optional[Path] = None
        self.logger = logger.bind(component="subprocess_git")

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = find_repository_root(self.cwd)
        return self._root

    def _git(self) -> str:
        git_path = shutil.which("git")
        if git_path is None:
            raise WorkflowError(
                "Git not found in PATH.",
                hint="Please install Git and retry.",
            )
        return git_path

    def _capture(self, args: List[str]) -> GitResult:
        cmd = [self._git(), *args]
        self.logger.debug("git_query", command=format_command(args), cwd=str(self.root))
        completed = subprocess.run(
            cmd,
            cwd=str(self.root),
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        return GitResult(
            args=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout.strip(),
            stderr=completed.stderr.strip(),
        )

    def _lines(self, args: List[str]) -> List[str]:
        result = self._capture(args)
        if not result.ok:
            raise GitCommandError(result.command, result.returncode, result.stderr)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def current_branch(self) -> str:
        result = self._capture(["rev-parse", "--abbrev-ref", "HEAD"])
        if result.ok and result.stdout:
            return result.stdout
        # Unborn branch (no commits yet): rev-parse fails but HEAD still names it.
        result = self._capture(["symbolic-ref", "--short", "HEAD"])
        if not result.ok:
            raise GitCommandError(result.command, result.returncode, result.stderr)
        return result.stdout

    def remote_url(self) -> Optional[str]:
        result = self._capture(["remote", "get-url", self.remote])
        if not result.ok or not result.stdout:
            self.logger.debug("remote_missing", remote=self.remote)
            return None
        return result.stdout

    def load_context(self) -> RepositoryContext:
        return RepositoryContext(
            root=self.root,
            current_branch=self.current_branch(),
            remote_url=self.remote_url(),
        )

    def run(self, args: List[str]) -> GitResult:
        cmd = [self._git(), *args]
        self.logger.debug("git_command_start", command=format_command(args), cwd=str(self.root))
        completed = subprocess.run(cmd, cwd=str(self.root), timeout=self.timeout)
        return GitResult(args=list(args), returncode=completed.returncode)

    def list_branches(self) -> List[str]:
        return self._lines(["for-each-ref", "--format=%(refname:short)", "refs/heads"])

    def list_tags(self) -> List[str]:
        return self._lines(["tag", "--list"])
