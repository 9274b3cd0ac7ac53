"""
Workflow Command Dispatcher

One method per workflow verb. Every verb follows the same shape:

1. Validate arguments (missing name/message)
2. Snapshot the repository through the git port (RepositoryContext)
3. Check the workflow precondition for the verb
4. Echo the equivalent git command line, then run it

The service holds no state between verbs other than its injected ports and
settings, so a fresh instance is built for every CLI invocation.
"""

import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from git_workflow import __release_date__, __version__
from git_workflow.config.settings import WorkflowSettings
from git_workflow.core.domain.errors import (
    GitCommandError,
    InvalidBranchTypeError,
    MissingMessageError,
    MissingNameError,
    ProtectedBranchError,
    WrongBranchError,
    WrongSourceBranchError,
)
from git_workflow.core.domain.models import (
    BranchType,
    RepositoryContext,
    WorkflowRule,
    build_workflow_rules,
)
from git_workflow.core.domain.naming import branch_name, join_words, timestamp
from git_workflow.core.domain.remote import compare_url
from git_workflow.core.interfaces.git import GitClientProtocol, GitResult, format_command
from git_workflow.core.interfaces.io import BrowserProtocol, PromptProtocol, ReporterProtocol

CONFIRM_PATTERN = re.compile(r"^[Yy]$")
CONFIRM_QUESTION = "Are you sure? (Y/N)"

# Branch types allowed to open a pull request without naming a target.
TYPED_PULL_REQUEST_TYPES = (
    BranchType.FEATURE,
    BranchType.BUG,
    BranchType.REFACTOR,
    BranchType.RELEASE,
)


class WorkflowService:
    """
    Branch, commit, pull-request, tag and delete verbs over a git port.

    All dependencies are injected so the rules can be exercised with a fake
    git client and canned prompt answers.
    """

    def __init__(
        self,
        git: GitClientProtocol,
        prompt: PromptProtocol,
        browser: BrowserProtocol,
        reporter: ReporterProtocol,
        settings: Optional[WorkflowSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.git = git
        self.prompt = prompt
        self.browser = browser
        self.reporter = reporter
        self.settings = settings or WorkflowSettings()
        self.clock = clock
        self.rules = build_workflow_rules(
            development=self.settings.development_branch,
            production=self.settings.production_branch,
            bug_source=self.settings.bug_source,
        )
        self.logger = structlog.get_logger().bind(component="workflow_service")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def development(self) -> str:
        return self.settings.development_branch

    @property
    def production(self) -> str:
        return self.settings.production_branch

    def _context(self) -> RepositoryContext:
        context = self.git.load_context()
        context.production_branches = self.settings.production_branches
        self.logger.debug(
            "repository_context",
            root=str(context.root),
            branch=context.current_branch,
            remote_url=context.remote_url,
        )
        return context

    def _execute(self, args: List[str], check: bool = True) -> GitResult:
        """Echo a git command, then run it unless this is a dry run."""
        line = format_command(args)
        self.reporter.command(line)
        if self.settings.dry_run:
            self.logger.info("git_command_skipped", command=line, reason="dry_run")
            return GitResult(args=list(args))

        result = self.git.run(args)
        self.logger.info("git_command_result", command=line, returncode=result.returncode)
        if check and not result.ok:
            raise GitCommandError(line, result.returncode, result.stderr)
        return result

    def _confirm(self, question: str = CONFIRM_QUESTION) -> bool:
        if self.settings.auto_confirm:
            self.reporter.info(f"{question} Y (auto-confirmed)")
            return True
        answer = self.prompt.ask(question)
        confirmed = bool(CONFIRM_PATTERN.match((answer or "").strip()))
        self.logger.debug("confirmation", question=question, confirmed=confirmed)
        return confirmed

    def _open(self, url: str) -> str:
        self.logger.info("browser_open", url=url)
        self.browser.open(url)
        return url

    @staticmethod
    def _require_name(name: Optional[str], kind: str, usage: str) -> str:
        if not name or not name.strip():
            raise MissingNameError(kind, usage=usage)
        return name.strip()

    # ------------------------------------------------------------------
    # Create branches
    # ------------------------------------------------------------------

    def create_branch(self, branch_type: BranchType, words: Iterable[str]) -> str:
        """
        Create `<type>/<slug>` from the source branch the workflow rules allow.

        Args:
            branch_type: Type of branch to create
            words: Words making up the branch name (joined with hyphens)

        Returns:
            Name of the created branch

        Raises:
            MissingNameError: If no words were given
            WrongSourceBranchError: If the current branch is not an allowed source
        """
        words = list(words)
        if not join_words(words):
            raise MissingNameError("branch", usage=f"{branch_type.value} <name>")

        context = self._context()
        rule = self.rules[branch_type]
        if not rule.allows_source(context.current_branch):
            self.logger.info(
                "wrong_source_branch",
                branch_type=branch_type.value,
                required=rule.source_label,
                current=context.current_branch,
            )
            if all(source.endswith("/*") for source in rule.sources):
                checkout_hint = "a " + " or ".join(f"'{s[:-1]}...'" for s in rule.sources) + " branch"
            else:
                checkout_hint = f"the '{rule.sources[0]}' branch"
            required = " or ".join(f"'{source}'" for source in rule.sources)
            raise WrongSourceBranchError(branch_type.value, required, context.current_branch, checkout_hint)

        source = context.current_branch
        new_branch = branch_name(branch_type.value, words)
        self.reporter.info(f"* Repo: {context.remote_url or context.root}")
        self.reporter.info(f"* From: {source}")
        self.reporter.info(f"*   To: {new_branch}")
        self._execute(["checkout", "-b", new_branch, source])
        return new_branch

    def create_feature(self, words: Iterable[str]) -> str:
        return self.create_branch(BranchType.FEATURE, words)

    def create_bug(self, words: Iterable[str]) -> str:
        return self.create_branch(BranchType.BUG, words)

    def create_refactor(self, words: Iterable[str]) -> str:
        return self.create_branch(BranchType.REFACTOR, words)

    def create_release(self, words: Iterable[str]) -> str:
        return self.create_branch(BranchType.RELEASE, words)

    def create_hotfix(self, words: Iterable[str]) -> str:
        return self.create_branch(BranchType.HOTFIX, words)

    def create_plain_branch(self, words: Iterable[str]) -> str:
        """Create an untyped branch from the current branch, no workflow check."""
        new_branch = join_words(words)
        if not new_branch:
            raise MissingNameError("branch", usage="branch <name>")

        context = self._context()
        self.reporter.info(f"* Repo: {context.remote_url or context.root}")
        self.reporter.info(f"* From: {context.current_branch}")
        self.reporter.info(f"*   To: {new_branch}")
        self._execute(["checkout", "-b", new_branch])
        return new_branch

    # ------------------------------------------------------------------
    # Read branches
    # ------------------------------------------------------------------

    def list_branches(self) -> List[Dict[str, Any]]:
        context = self._context()
        return [
            {"name": name, "current": name == context.current_branch}
            for name in self.git.list_branches()
        ]

    def checkout(self, name: Optional[str]) -> GitResult:
        name = self._require_name(name, "branch", "checkout <branch>")
        self._context()
        return self._execute(["checkout", name])

    def go_to_development(self) -> GitResult:
        return self.checkout(self.development)

    def list_tags(self) -> List[str]:
        self._context()
        return self.git.list_tags()

    def pull(self) -> GitResult:
        self._context()
        return self._execute(["pull"])

    def status(self) -> GitResult:
        self._context()
        return self._execute(["status"])

    # ------------------------------------------------------------------
    # Commit & publish
    # ------------------------------------------------------------------

    def commit_and_push(self, message: Optional[str]) -> str:
        """
        Stage everything, commit and push the current branch.

        The upstream tracking branch is created on first push.

        Raises:
            MissingMessageError: If the message is empty
            ProtectedBranchError: If the current branch is a production branch
            GitCommandError: On the first git step that fails
        """
        if not message or not message.strip():
            raise MissingMessageError()

        context = self._context()
        if context.on_production:
            raise ProtectedBranchError("commit code directly", context.current_branch)

        branch = context.current_branch
        self._execute(["add", "."])
        self._execute(["commit", "-m", message])
        self._execute(["push", "--set-upstream", self.settings.remote, branch])
        return branch

    def open_pull_request(self, target: Optional[str] = None) -> str:
        """Open the compare URL proposing the current branch into `target`."""
        context = self._context()
        if context.on_production:
            raise ProtectedBranchError("submit a pull request", context.current_branch)

        target = target or self.development
        url = compare_url(context.location, target, context.current_branch)
        self.reporter.info(f"=> submitting Pull Request to {target} (opens browser)...")
        return self._open(url)

    def pull_request_target(self, branch_type: str) -> str:
        """Fixed pull-request target for a branch type."""
        if branch_type == BranchType.RELEASE.value:
            return self.production
        if branch_type in {t.value for t in TYPED_PULL_REQUEST_TYPES}:
            return self.development
        raise InvalidBranchTypeError(branch_type, [t.value for t in TYPED_PULL_REQUEST_TYPES])

    def open_typed_pull_request(self) -> Optional[str]:
        """
        Open a pull request whose target is derived from the branch type.

        feature/bug/refactor go to development. A release goes to production
        and must be confirmed first; merging the release back into development
        is the separate `merge_release` step.

        Returns:
            The opened URL, or None if the user declined
        """
        context = self._context()
        if context.on_production:
            raise ProtectedBranchError("submit a pull request", context.current_branch)

        target = self.pull_request_target(context.branch_type)
        if context.branch_type == BranchType.RELEASE.value:
            question = f"Open a pull request from {context.current_branch} into {target}? (Y/N)"
            if not self._confirm(question):
                self.reporter.info("Canceling pull request; nothing was opened.")
                return None

        url = compare_url(context.location, target, context.current_branch)
        self.reporter.info(f"=> submitting Pull Request to {target} (opens browser)...")
        return self._open(url)

    def merge_release(self) -> bool:
        """
        Merge the current release branch into development (`--no-ff`).

        Returns:
            True if the merge ran, False if the user declined
        """
        context = self._context()
        if context.branch_type != BranchType.RELEASE.value:
            raise InvalidBranchTypeError(
                context.branch_type, [BranchType.RELEASE.value], action="merge into development"
            )

        release = context.current_branch
        if not self._confirm(f"Merge {release} into {self.development}? (Y/N)"):
            self.reporter.info("Canceling merge; nothing was merged.")
            return False

        self._execute(["checkout", self.development])
        self._execute(["merge", "--no-ff", release])
        return True

    def deploy(self) -> str:
        """Open the development -> production compare URL with a timestamped title."""
        context = self._context()
        if context.on_production:
            raise ProtectedBranchError("deploy", context.current_branch)
        if context.current_branch != self.development:
            raise WrongBranchError(
                f"deploy to {self.production}", self.development, context.current_branch
            )

        title = f"Deploy:{timestamp(self.clock())}"
        url = compare_url(context.location, self.production, self.development, title=title)
        self.reporter.info(f"=> submitting Pull Request to {self.production} (opens browser)...")
        return self._open(url)

    def commit_and_deploy(self, message: Optional[str]) -> str:
        self.commit_and_push(message)
        return self.deploy()

    # ------------------------------------------------------------------
    # Tagging
    # ------------------------------------------------------------------

    def create_tag(self) -> str:
        """Prompt for a version and message, create an annotated tag and push it."""
        context = self._context()
        version = (self.prompt.ask("* Release tag version:") or "").strip()
        if not version:
            raise MissingNameError("tag", usage="tag (enter a version when prompted)")
        message = self.prompt.ask("* Release tag message:") or ""

        self.reporter.info(f"* Tagging {context.current_branch}...")
        self._execute(["tag", "-a", version, "-m", message])
        self.reporter.info("* Pushing tag to remote...")
        self._execute(["push", self.settings.remote, version])
        return version

    # ------------------------------------------------------------------
    # Delete branches and tags
    # ------------------------------------------------------------------

    def delete_local_branch(self, name: Optional[str], check: bool = True) -> GitResult:
        name = self._require_name(name, "branch", "delete-local-branch <branch>")
        self._context()
        return self._execute(["branch", "-d", name], check=check)

    def delete_remote_branch(self, name: Optional[str], check: bool = True) -> GitResult:
        name = self._require_name(name, "branch", "delete-remote-branch <branch>")
        self._context()
        return self._execute(["push", self.settings.remote, "--delete", name], check=check)

    def delete_branch(self, name: Optional[str]) -> bool:
        """
        Delete a branch locally and on the remote after confirmation.

        Protected branches are refused without prompting. Both deletions are
        attempted even if the first fails; nothing is rolled back.

        Returns:
            True if deletion ran, False if the user cancelled
        """
        name = self._require_name(name, "branch", "delete-branch <branch>")
        if name in self.settings.all_protected_branches:
            raise ProtectedBranchError("delete branch", name, reason="a protected branch")
        self._context()

        if not self._confirm():
            self.reporter.info("Canceling delete; no branches were deleted.")
            return False

        self.reporter.info("Deleting branch from both local and remote repos")
        results = [
            self.delete_local_branch(name, check=False),
            self.delete_remote_branch(name, check=False),
        ]
        self._raise_first_failure(results)
        return True

    def delete_local_tag(self, name: Optional[str], check: bool = True) -> GitResult:
        name = self._require_name(name, "tag", "delete-local-tag <tag>")
        self._context()
        return self._execute(["tag", "-d", name], check=check)

    def delete_remote_tag(self, name: Optional[str], check: bool = True) -> GitResult:
        name = self._require_name(name, "tag", "delete-remote-tag <tag>")
        self._context()
        return self._execute(["push", self.settings.remote, f":refs/tags/{name}"], check=check)

    def delete_tag(self, name: Optional[str]) -> bool:
        name = self._require_name(name, "tag", "delete-tag <tag>")
        self._context()

        if not self._confirm():
            self.reporter.info("Canceling delete; no tags were deleted.")
            return False

        self.reporter.info("* Deleting tag from both local and remote repos")
        results = [
            self.delete_local_tag(name, check=False),
            self.delete_remote_tag(name, check=False),
        ]
        self._raise_first_failure(results)
        return True

    def _raise_first_failure(self, results: List[GitResult]) -> None:
        failures = [result for result in results if not result.ok]
        for failure in failures:
            self.reporter.warning(f"{failure.command} exited with {failure.returncode}")
        if failures:
            first = failures[0]
            raise GitCommandError(first.command, first.returncode, first.stderr)

    # ------------------------------------------------------------------
    # Help / version
    # ------------------------------------------------------------------

    @staticmethod
    def version() -> str:
        return f"{__version__} / {__release_date__}"

    def workflow_rules(self) -> List[WorkflowRule]:
        return list(self.rules.values())
