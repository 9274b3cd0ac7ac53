"""
Unit tests for WorkflowService.

Tests use fake git/prompt/browser ports to verify:
- Branch creation preconditions and the git command issued
- Missing-argument errors never reach git
- Production branch protection for commit, pull-request and deploy
- Confirmation-gated deletes and partial-failure reporting
- Tagging, dry runs and auto-confirm
"""

import pytest
from structlog.testing import capture_logs

from git_workflow.core.domain.errors import (
    GitCommandError,
    InvalidBranchNameError,
    InvalidBranchTypeError,
    MissingMessageError,
    MissingNameError,
    NoRepositoryError,
    ProtectedBranchError,
    WrongBranchError,
    WrongSourceBranchError,
)
from git_workflow.core.domain.models import BranchType


class TestCreateBranch:
    """Tests for the typed branch creation verbs."""

    def test_feature_from_development(self, make_service, git, reporter):
        """Test feature branch is created from development."""
        service = make_service()

        new_branch = service.create_feature(["add login"])

        assert new_branch == "feature/add-login"
        assert git.commands == [["checkout", "-b", "feature/add-login", "development"]]
        assert "=> git checkout -b feature/add-login development" in reporter.lines
        assert "* From: development" in reporter.lines
        assert "*   To: feature/add-login" in reporter.lines
        assert "* Repo: git@example.com:acme/widgets.git" in reporter.lines

    @pytest.mark.parametrize(
        "method,prefix",
        [
            ("create_feature", "feature"),
            ("create_bug", "bug"),
            ("create_refactor", "refactor"),
            ("create_release", "release"),
        ],
    )
    def test_development_sourced_types(self, make_service, git, method, prefix):
        """Test every development-sourced type creates <type>/<slug>."""
        service = make_service()

        assert getattr(service, method)(["a", "b", "c"]) == f"{prefix}/a-b-c"
        assert git.commands == [["checkout", "-b", f"{prefix}/a-b-c", "development"]]

    @pytest.mark.parametrize("branch_type", list(BranchType))
    def test_wrong_source_creates_nothing(self, make_service, git, branch_type):
        """Test a wrong source branch raises and issues no git command."""
        git.branch = "feature/x" if branch_type != BranchType.FEATURE else "bug/y"
        service = make_service()

        with pytest.raises(WrongSourceBranchError):
            service.create_branch(branch_type, ["something"])

        assert git.commands == []

    def test_hotfix_from_feature_names_production(self, make_service, git):
        """Test hotfix from a feature branch names main/master as the required source."""
        git.branch = "feature/x"
        service = make_service()

        with pytest.raises(WrongSourceBranchError) as exc_info:
            service.create_hotfix(["urgent fix"])

        assert "'main'" in exc_info.value.required
        assert "'master'" in exc_info.value.required
        assert "Hotfix branches must branch from" in exc_info.value.message
        assert git.commands == []

    def test_wrong_source_logged_at_info(self, make_service, git):
        """Test a rejected source branch is an info event, not a warning."""
        git.branch = "feature/x"

        with capture_logs() as logs:
            service = make_service()
            with pytest.raises(WrongSourceBranchError):
                service.create_hotfix(["urgent fix"])

        events = [entry for entry in logs if entry["event"] == "wrong_source_branch"]
        assert len(events) == 1
        assert events[0]["log_level"] == "info"
        assert events[0]["current"] == "feature/x"

    @pytest.mark.parametrize("production", ["main", "master"])
    def test_hotfix_from_production(self, make_service, git, production):
        """Test hotfix branches start from whichever production branch is checked out."""
        git.branch = production
        service = make_service()

        assert service.create_hotfix(["urgent fix"]) == "hotfix/urgent-fix"
        assert git.commands == [["checkout", "-b", "hotfix/urgent-fix", production]]

    def test_feature_from_main_is_refused(self, make_service, git):
        """Test feature branches cannot start from production."""
        git.branch = "main"
        service = make_service()

        with pytest.raises(WrongSourceBranchError) as exc_info:
            service.create_feature(["x"])

        assert exc_info.value.required == "'development'"
        assert "'development' branch" in exc_info.value.hint

    @pytest.mark.parametrize("words", [[], [""], ["   "]])
    def test_missing_name(self, make_service, git, words):
        """Test empty words raise MissingNameError before touching the repository."""
        service = make_service()

        with pytest.raises(MissingNameError):
            service.create_feature(words)

        assert git.commands == []
        assert git.context_loads == 0

    def test_no_repository(self, make_service, git):
        """Test a missing repository is reported."""
        git.has_repo = False
        service = make_service()

        with pytest.raises(NoRepositoryError) as exc_info:
            service.create_feature(["x"])

        assert "git init" in exc_info.value.hint

    def test_custom_development_branch(self, make_service, git):
        """Test a configured development branch name is honoured."""
        git.branch = "develop"
        service = make_service(development_branch="develop")

        assert service.create_feature(["x"]) == "feature/x"
        assert git.commands == [["checkout", "-b", "feature/x", "develop"]]


class TestBugSourcePolicy:
    """Tests for the configurable bug branch source."""

    def test_bug_from_release_policy(self, make_service, git):
        """Test bug branches start from the current release branch under the release policy."""
        git.branch = "release/2.3.0"
        service = make_service(bug_source="release")

        assert service.create_bug(["broken header"]) == "bug/broken-header"
        assert git.commands == [["checkout", "-b", "bug/broken-header", "release/2.3.0"]]

    def test_release_policy_refuses_development(self, make_service, git):
        """Test development is not a valid bug source under the release policy."""
        service = make_service(bug_source="release")

        with pytest.raises(WrongSourceBranchError) as exc_info:
            service.create_bug(["x"])

        assert "'release/...'" in exc_info.value.hint
        assert git.commands == []

    def test_development_policy_refuses_release(self, make_service, git):
        """Test the default policy refuses bug branches from a release branch."""
        git.branch = "release/2.3.0"
        service = make_service()

        with pytest.raises(WrongSourceBranchError):
            service.create_bug(["x"])


class TestPlainBranchAndReads:
    """Tests for the untyped branch verb and read-only verbs."""

    def test_plain_branch_from_anywhere(self, make_service, git):
        """Test `branch` has no workflow precondition."""
        git.branch = "feature/x"
        service = make_service()

        assert service.create_plain_branch(["spike", "idea"]) == "spike-idea"
        assert git.commands == [["checkout", "-b", "spike-idea"]]

    def test_list_branches_marks_current(self, make_service, git):
        """Test the current branch is flagged."""
        git.branches = ["development", "feature/x", "main"]
        git.branch = "feature/x"
        service = make_service()

        assert service.list_branches() == [
            {"name": "development", "current": False},
            {"name": "feature/x", "current": True},
            {"name": "main", "current": False},
        ]

    def test_checkout(self, make_service, git, reporter):
        """Test checkout switches branch and echoes the command."""
        service = make_service()

        service.checkout("feature/x")

        assert git.commands == [["checkout", "feature/x"]]
        assert "=> git checkout feature/x" in reporter.lines

    def test_checkout_missing_name(self, make_service, git):
        """Test checkout without a name raises MissingNameError."""
        service = make_service()

        with pytest.raises(MissingNameError):
            service.checkout("")

        assert git.commands == []

    def test_go_to_development(self, make_service, git):
        """Test the development shortcut."""
        git.branch = "feature/x"
        service = make_service()

        service.go_to_development()

        assert git.commands == [["checkout", "development"]]

    def test_list_tags(self, make_service, git):
        """Test tags are listed from git."""
        git.tags = ["v1.0.0", "v1.1.0"]
        service = make_service()

        assert service.list_tags() == ["v1.0.0", "v1.1.0"]
        assert git.commands == []

    def test_pull_and_status(self, make_service, git):
        """Test the gp/gs aliases."""
        service = make_service()

        service.pull()
        service.status()

        assert git.commands == [["pull"], ["status"]]


class TestCommitAndPush:
    """Tests for commit_and_push."""

    def test_commit_sequence(self, make_service, git, reporter):
        """Test add, commit and push with upstream tracking."""
        git.branch = "feature/x"
        service = make_service()

        service.commit_and_push("fix typo")

        assert git.commands == [
            ["add", "."],
            ["commit", "-m", "fix typo"],
            ["push", "--set-upstream", "origin", "feature/x"],
        ]
        assert "=> git commit -m 'fix typo'" in reporter.lines

    @pytest.mark.parametrize("production", ["main", "master"])
    def test_protected_production(self, make_service, git, production):
        """Test commits on production fail without any git mutation."""
        git.branch = production
        service = make_service()

        with pytest.raises(ProtectedBranchError):
            service.commit_and_push("fix typo")

        assert git.commands == []

    @pytest.mark.parametrize("message", [None, "", "   "])
    def test_missing_message(self, make_service, git, message):
        """Test an empty message raises MissingMessageError."""
        service = make_service()

        with pytest.raises(MissingMessageError):
            service.commit_and_push(message)

        assert git.commands == []

    def test_stops_at_first_failure(self, make_service, git):
        """Test a failing commit does not push."""
        git.branch = "feature/x"
        git.failing = {"git commit -m 'fix typo'": 1}
        service = make_service()

        with pytest.raises(GitCommandError) as exc_info:
            service.commit_and_push("fix typo")

        assert exc_info.value.exit_code == 1
        assert ["push", "--set-upstream", "origin", "feature/x"] not in git.commands

    def test_custom_remote(self, make_service, git):
        """Test the configured remote is used for push."""
        git.branch = "feature/x"
        service = make_service(remote="upstream")

        service.commit_and_push("msg")

        assert git.commands[-1] == ["push", "--set-upstream", "upstream", "feature/x"]


class TestPullRequest:
    """Tests for pull request verbs."""

    def test_default_target_is_development(self, make_service, git, browser):
        """Test the compare URL targets development by default."""
        git.branch = "feature/add-login"
        service = make_service()

        url = service.open_pull_request()

        assert url == "https://example.com/acme/widgets/compare/development...feature/add-login?expand=1"
        assert browser.opened == [url]
        assert git.commands == []

    def test_explicit_target(self, make_service, git, browser):
        """Test an explicit target branch."""
        git.branch = "bug/y"
        service = make_service()

        service.open_pull_request("release/2.3.0")

        assert browser.opened == [
            "https://example.com/acme/widgets/compare/release/2.3.0...bug/y?expand=1"
        ]

    def test_protected_production(self, make_service, git, browser):
        """Test pull requests from production fail without opening the browser."""
        git.branch = "main"
        service = make_service()

        with pytest.raises(ProtectedBranchError):
            service.open_pull_request()

        assert browser.opened == []

    @pytest.mark.parametrize("branch", ["feature/x", "bug/x", "refactor/x"])
    def test_typed_targets_development(self, make_service, git, browser, branch):
        """Test feature/bug/refactor pull requests target development."""
        git.branch = branch
        service = make_service()

        service.open_typed_pull_request()

        assert browser.opened == [f"https://example.com/acme/widgets/compare/development...{branch}?expand=1"]

    def test_typed_release_requires_confirmation(self, make_service, git, browser, prompt):
        """Test release pull requests target production after confirmation."""
        git.branch = "release/2.3.0"
        prompt.answers = ["y"]
        service = make_service()

        url = service.open_typed_pull_request()

        assert url == "https://example.com/acme/widgets/compare/main...release/2.3.0?expand=1"
        assert browser.opened == [url]
        assert "release/2.3.0 into main" in prompt.questions[0]
        assert git.commands == []

    def test_typed_release_declined(self, make_service, git, browser, prompt, reporter):
        """Test declining the release confirmation opens nothing."""
        git.branch = "release/2.3.0"
        prompt.answers = ["n"]
        service = make_service()

        assert service.open_typed_pull_request() is None
        assert browser.opened == []
        assert any("Canceling pull request" in line for line in reporter.lines)

    @pytest.mark.parametrize("branch", ["hotfix/x", "spike/x"])
    def test_typed_invalid_type(self, make_service, git, browser, branch):
        """Test other branch types cannot use the typed pull request."""
        git.branch = branch
        service = make_service()

        with pytest.raises(InvalidBranchTypeError):
            service.open_typed_pull_request()

        assert browser.opened == []

    def test_typed_untyped_branch(self, make_service, git):
        """Test a branch without a type prefix raises InvalidBranchNameError."""
        git.branch = "my-branch"
        service = make_service()

        with pytest.raises(InvalidBranchNameError):
            service.open_typed_pull_request()


class TestMergeRelease:
    """Tests for the separate merge-release step."""

    def test_merges_with_no_fast_forward(self, make_service, git, prompt):
        """Test checkout development then merge --no-ff."""
        git.branch = "release/2.3.0"
        prompt.answers = ["Y"]
        service = make_service()

        assert service.merge_release() is True
        assert git.commands == [["checkout", "development"], ["merge", "--no-ff", "release/2.3.0"]]

    def test_declined(self, make_service, git, prompt):
        """Test declining leaves the repository untouched."""
        git.branch = "release/2.3.0"
        prompt.answers = ["no"]
        service = make_service()

        assert service.merge_release() is False
        assert git.commands == []

    def test_only_from_release(self, make_service, git):
        """Test merge-release from a feature branch is refused."""
        git.branch = "feature/x"
        service = make_service()

        with pytest.raises(InvalidBranchTypeError):
            service.merge_release()


class TestDeploy:
    """Tests for deploy."""

    def test_deploy_from_development(self, make_service, browser):
        """Test deploy opens development -> main with a timestamped title."""
        service = make_service()

        url = service.deploy()

        assert url == (
            "https://example.com/acme/widgets/compare/main...development"
            "?expand=1&title=Deploy:2021-01-27T11:04"
        )
        assert browser.opened == [url]

    def test_deploy_from_production(self, make_service, git, browser):
        """Test deploy from main is refused."""
        git.branch = "main"
        service = make_service()

        with pytest.raises(ProtectedBranchError):
            service.deploy()

        assert browser.opened == []

    def test_deploy_from_feature(self, make_service, git, browser):
        """Test deploy only works from development."""
        git.branch = "feature/x"
        service = make_service()

        with pytest.raises(WrongBranchError) as exc_info:
            service.deploy()

        assert exc_info.value.required == "development"
        assert browser.opened == []

    def test_commit_and_deploy(self, make_service, git, browser):
        """Test cad commits on development then opens the deploy URL."""
        service = make_service()

        service.commit_and_deploy("ship it")

        assert git.commands[-1] == ["push", "--set-upstream", "origin", "development"]
        assert len(browser.opened) == 1


class TestTagging:
    """Tests for create_tag."""

    def test_create_and_push_tag(self, make_service, git, prompt, reporter):
        """Test annotated tag creation and push."""
        prompt.answers = ["v2.3.0", "Release 2.3.0"]
        service = make_service()

        assert service.create_tag() == "v2.3.0"
        assert git.commands == [
            ["tag", "-a", "v2.3.0", "-m", "Release 2.3.0"],
            ["push", "origin", "v2.3.0"],
        ]
        assert "* Tagging development..." in reporter.lines

    def test_any_version_string_accepted(self, make_service, git, prompt):
        """Test the version format is not validated."""
        prompt.answers = ["not-semver", ""]
        service = make_service()

        assert service.create_tag() == "not-semver"
        assert git.commands[0] == ["tag", "-a", "not-semver", "-m", ""]

    def test_empty_version(self, make_service, git, prompt):
        """Test an empty version is refused."""
        prompt.answers = [""]
        service = make_service()

        with pytest.raises(MissingNameError):
            service.create_tag()

        assert git.commands == []


class TestDeleteBranches:
    """Tests for branch deletion verbs."""

    def test_delete_local_branch(self, make_service, git):
        """Test non-forced local delete."""
        service = make_service()

        service.delete_local_branch("old-feature")

        assert git.commands == [["branch", "-d", "old-feature"]]

    def test_delete_remote_branch(self, make_service, git):
        """Test remote delete."""
        service = make_service()

        service.delete_remote_branch("old-feature")

        assert git.commands == [["push", "origin", "--delete", "old-feature"]]

    @pytest.mark.parametrize(
        "method", ["delete_local_branch", "delete_remote_branch", "delete_branch"]
    )
    def test_missing_name(self, make_service, git, prompt, method):
        """Test missing names raise before any prompt or git call."""
        service = make_service()

        with pytest.raises(MissingNameError):
            getattr(service, method)(None)

        assert git.commands == []
        assert prompt.questions == []

    def test_delete_branch_confirmed(self, make_service, git, prompt):
        """Test confirmed delete runs local then remote deletion."""
        prompt.answers = ["Y"]
        service = make_service()

        assert service.delete_branch("old-feature") is True
        assert prompt.questions == ["Are you sure? (Y/N)"]
        assert git.commands == [
            ["branch", "-d", "old-feature"],
            ["push", "origin", "--delete", "old-feature"],
        ]

    @pytest.mark.parametrize("answer", ["N", "n", "", "yes", "YY", "q"])
    def test_delete_branch_cancelled(self, make_service, git, prompt, reporter, answer):
        """Test any answer other than Y/y cancels with no git call."""
        prompt.answers = [answer]
        service = make_service()

        assert service.delete_branch("old-feature") is False
        assert git.commands == []
        assert "Canceling delete; no branches were deleted." in reporter.lines

    @pytest.mark.parametrize("name", ["development", "main", "master"])
    def test_protected_branches_refused_without_prompt(self, make_service, git, prompt, name):
        """Test protected branches are refused before prompting."""
        service = make_service()

        with pytest.raises(ProtectedBranchError):
            service.delete_branch(name)

        assert prompt.questions == []
        assert git.commands == []

    def test_configured_protected_branch(self, make_service, prompt):
        """Test extra protected branches from settings."""
        service = make_service(protected_branches=["staging"])

        with pytest.raises(ProtectedBranchError):
            service.delete_branch("staging")

        with pytest.raises(ProtectedBranchError):
            service.delete_branch("development")

    def test_partial_failure_still_runs_both(self, make_service, git, prompt, reporter):
        """Test a failing local delete still attempts the remote delete."""
        prompt.answers = ["y"]
        git.failing = {"git branch -d old-feature": 1}
        service = make_service()

        with pytest.raises(GitCommandError) as exc_info:
            service.delete_branch("old-feature")

        assert exc_info.value.command == "git branch -d old-feature"
        assert git.commands == [
            ["branch", "-d", "old-feature"],
            ["push", "origin", "--delete", "old-feature"],
        ]
        assert "WARNING git branch -d old-feature exited with 1" in reporter.lines

    def test_single_delete_failure_raises(self, make_service, git):
        """Test a failing single delete reports git's exit code."""
        git.failing = {"git push origin --delete gone": 128}
        service = make_service()

        with pytest.raises(GitCommandError) as exc_info:
            service.delete_remote_branch("gone")

        assert exc_info.value.exit_code == 128


class TestDeleteTags:
    """Tests for tag deletion verbs."""

    def test_delete_local_tag(self, make_service, git):
        """Test local tag delete."""
        service = make_service()

        service.delete_local_tag("v1.0.0")

        assert git.commands == [["tag", "-d", "v1.0.0"]]

    def test_delete_remote_tag(self, make_service, git):
        """Test remote tag delete uses an empty refspec source."""
        service = make_service()

        service.delete_remote_tag("v1.0.0")

        assert git.commands == [["push", "origin", ":refs/tags/v1.0.0"]]

    def test_delete_tag_confirmed(self, make_service, git, prompt):
        """Test confirmed tag delete removes both copies."""
        prompt.answers = ["y"]
        service = make_service()

        assert service.delete_tag("v1.0.0") is True
        assert git.commands == [["tag", "-d", "v1.0.0"], ["push", "origin", ":refs/tags/v1.0.0"]]

    def test_delete_tag_cancelled(self, make_service, git, prompt, reporter):
        """Test declining leaves tags untouched."""
        prompt.answers = ["N"]
        service = make_service()

        assert service.delete_tag("v1.0.0") is False
        assert git.commands == []
        assert "Canceling delete; no tags were deleted." in reporter.lines

    def test_delete_tag_missing_name(self, make_service, prompt):
        """Test the name is checked before prompting."""
        service = make_service()

        with pytest.raises(MissingNameError):
            service.delete_tag("")

        assert prompt.questions == []


class TestExecutionModes:
    """Tests for dry-run and auto-confirm settings."""

    def test_dry_run_echoes_without_running(self, make_service, git, reporter):
        """Test dry runs print commands but never call git."""
        git.branch = "feature/x"
        service = make_service(dry_run=True)

        service.commit_and_push("fix typo")

        assert git.commands == []
        assert reporter.lines == [
            "=> git add .",
            "=> git commit -m 'fix typo'",
            "=> git push --set-upstream origin feature/x",
        ]

    def test_auto_confirm_skips_prompt(self, make_service, git, prompt):
        """Test auto_confirm answers yes without asking."""
        service = make_service(auto_confirm=True)

        assert service.delete_branch("old-feature") is True
        assert prompt.questions == []
        assert len(git.commands) == 2

    def test_context_loaded_per_verb(self, make_service, git):
        """Test each verb takes a fresh repository snapshot."""
        service = make_service()

        service.checkout("a")
        git.branch = "main"

        with pytest.raises(ProtectedBranchError):
            service.commit_and_push("msg")


class TestHelp:
    def test_version(self, make_service):
        """Test the version string format."""
        assert make_service().version() == "2.3.0 / 2021-01-27"

    def test_workflow_rules(self, make_service):
        """Test the rules are exposed in branch type order."""
        rules = make_service().workflow_rules()
        assert [rule.branch_type for rule in rules] == list(BranchType)
