"""Shared fixtures: fake ports for the workflow service."""

import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
import structlog

from git_workflow.application.workflow import WorkflowService
from git_workflow.config.settings import WorkflowSettings
from git_workflow.core.domain.errors import NoRepositoryError
from git_workflow.core.domain.models import RepositoryContext
from git_workflow.core.interfaces.git import GitResult, format_command


class FakeGitClient:
    """GitClientProtocol fake that records every command it is asked to run."""

    def __init__(
        self,
        branch: str = "development",
        remote_url: Optional[str] = "git@example.com:acme/widgets.git",
        branches: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        failing: Optional[Dict[str, int]] = None,
        has_repo: bool = True,
    ):
        self.branch = branch
        self.remote_url = remote_url
        self.branches = branches if branches is not None else ["development", "main"]
        self.tags = tags or []
        self.failing = failing or {}
        self.has_repo = has_repo
        self.commands: List[List[str]] = []
        self.context_loads = 0

    def load_context(self) -> RepositoryContext:
        self.context_loads += 1
        if not self.has_repo:
            raise NoRepositoryError("/tmp/not-a-repo")
        return RepositoryContext(root=Path("/repo"), current_branch=self.branch, remote_url=self.remote_url)

    def run(self, args: List[str]) -> GitResult:
        self.commands.append(list(args))
        returncode = self.failing.get(format_command(args), 0)
        return GitResult(args=list(args), returncode=returncode, stderr="boom" if returncode else "")

    def list_branches(self) -> List[str]:
        return list(self.branches)

    def list_tags(self) -> List[str]:
        return list(self.tags)


class FakePrompt:
    """Answers prompts from a canned list and records the questions."""

    def __init__(self, answers: Optional[List[str]] = None):
        self.answers = list(answers or [])
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else ""


class FakeBrowser:
    def __init__(self):
        self.opened: List[str] = []

    def open(self, url: str) -> None:
        self.opened.append(url)


class RecordingReporter:
    def __init__(self):
        self.lines: List[str] = []
        self.errors: List[Tuple[str, Optional[str]]] = []

    def command(self, line: str) -> None:
        self.lines.append(f"=> {line}")

    def info(self, line: str) -> None:
        self.lines.append(line)

    def warning(self, line: str) -> None:
        self.lines.append(f"WARNING {line}")

    def error(self, message: str, hint: Optional[str] = None) -> None:
        self.errors.append((message, hint))


FIXED_NOW = datetime(2021, 1, 27, 11, 4)


@pytest.fixture
def git():
    return FakeGitClient()


@pytest.fixture
def prompt():
    return FakePrompt()


@pytest.fixture
def browser():
    return FakeBrowser()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def make_service(git, prompt, browser, reporter):
    """Build a WorkflowService around the fakes; keyword args become settings."""

    def _make(**settings_kwargs) -> WorkflowService:
        return WorkflowService(
            git=git,
            prompt=prompt,
            browser=browser,
            reporter=reporter,
            settings=WorkflowSettings(**settings_kwargs),
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep GIT_WORKFLOW_* variables and the user's home config out of tests."""
    for key in list(os.environ):
        if key.startswith("GIT_WORKFLOW_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield
    # CLI invocations configure structlog against the runner's stderr.
    structlog.reset_defaults()
