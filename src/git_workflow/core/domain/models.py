"""
Core Domain Models

Branch types, the workflow rule table and the per-invocation repository
context. Nothing here talks to git: the context is filled in once by the git
adapter and handed to the dispatcher.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from git_workflow.core.domain.errors import WorkflowError
from git_workflow.core.domain.naming import BRANCH_TYPE_SEPARATOR, branch_type_of
from git_workflow.core.domain.remote import RepoLocation, parse_remote_url

PRODUCTION_BRANCH_NAMES = ("main", "master")


class BranchType(str, Enum):
    """Fixed vocabulary of workflow branch prefixes."""

    FEATURE = "feature"
    BUG = "bug"
    REFACTOR = "refactor"
    RELEASE = "release"
    HOTFIX = "hotfix"


class BugSource(str, Enum):
    """Where `bug/*` branches are allowed to start from."""

    DEVELOPMENT = "development"
    RELEASE = "release"


@dataclass(frozen=True)
class WorkflowRule:
    """
    Allowed source and target branches for one branch type.

    Attributes:
        branch_type: Branch type this rule applies to
        sources: Branch names (or `<type>/*` patterns) a new branch may start from
        targets: Branches a finished branch may be merged into
        deploys_to: Human description of where the work ends up
    """

    branch_type: BranchType
    sources: Tuple[str, ...]
    targets: Tuple[str, ...]
    deploys_to: str

    def allows_source(self, branch: str) -> bool:
        for source in self.sources:
            if source.endswith(BRANCH_TYPE_SEPARATOR + "*"):
                if branch.startswith(source[:-1]) and len(branch) > len(source) - 1:
                    return True
            elif branch == source:
                return True
        return False

    @property
    def source_label(self) -> str:
        return " or ".join(self.sources)

    @property
    def target_label(self) -> str:
        return "/".join(self.targets)


def build_workflow_rules(
    development: str = "development",
    production: str = "main",
    bug_source: BugSource = BugSource.DEVELOPMENT,
) -> Dict[BranchType, WorkflowRule]:
    """Build the rule table for the configured development/production branch names."""
    production_sources = tuple(dict.fromkeys((production, *PRODUCTION_BRANCH_NAMES)))
    if bug_source == BugSource.RELEASE:
        bug_sources: Tuple[str, ...] = (f"{BranchType.RELEASE.value}/*",)
        bug_targets: Tuple[str, ...] = (development, f"{BranchType.RELEASE.value}/*")
    else:
        bug_sources = (development,)
        bug_targets = (development,)

    return {
        BranchType.FEATURE: WorkflowRule(
            BranchType.FEATURE, (development,), (development,), "deploy to development/test"
        ),
        BranchType.BUG: WorkflowRule(BranchType.BUG, bug_sources, bug_targets, "deploy to development"),
        BranchType.REFACTOR: WorkflowRule(
            BranchType.REFACTOR, (development,), (development,), "deploy to development"
        ),
        BranchType.RELEASE: WorkflowRule(
            BranchType.RELEASE, (development,), (development, production), "deploy to production"
        ),
        BranchType.HOTFIX: WorkflowRule(
            BranchType.HOTFIX,
            production_sources,
            (development, production),
            "deploy to development/production",
        ),
    }


@dataclass
class RepositoryContext:
    """
    Snapshot of repository state taken once per command invocation.

    Attributes:
        root: Directory containing the `.git` metadata
        current_branch: Checked-out branch (`HEAD` when detached)
        remote_url: URL of the configured remote, if any
    """

    root: Path
    current_branch: str
    remote_url: Optional[str] = None
    production_branches: Tuple[str, ...] = field(default=PRODUCTION_BRANCH_NAMES)

    @property
    def branch_type(self) -> str:
        """Type prefix of the current branch; raises InvalidBranchNameError without one."""
        return branch_type_of(self.current_branch)

    @property
    def location(self) -> RepoLocation:
        if not self.remote_url:
            raise WorkflowError(
                "no remote configured for this repository.",
                hint="Add one with: git remote add origin git@<host>:<owner>/<repo>.git",
            )
        return parse_remote_url(self.remote_url)

    @property
    def on_production(self) -> bool:
        return self.current_branch in self.production_branches
