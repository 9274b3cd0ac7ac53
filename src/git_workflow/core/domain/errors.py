"""
Workflow Errors

Every precondition the dispatcher checks maps to one error class. Each class
carries a distinct exit code so scripts can tell failures apart, and an
optional one-line hint telling the user how to recover.
"""

from typing import List, Optional


class WorkflowError(Exception):
    """
    Base class for all user-facing workflow failures.

    Attributes:
        message: What went wrong, printed after the error prefix
        hint: Optional remediation line printed below the message
    """

    exit_code = 1

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class NoRepositoryError(WorkflowError):
    """No `.git` directory between the working directory and the filesystem root."""

    exit_code = 2

    def __init__(self, path: str):
        super().__init__(
            f"no '.git' directory found in: '{path}'",
            hint="If this is a new repo, initiate it with: git init",
        )
        self.path = path


class MissingArgumentError(WorkflowError):
    exit_code = 3


class MissingNameError(MissingArgumentError):
    """A branch or tag name was required but not given."""

    def __init__(self, kind: str = "branch", usage: Optional[str] = None):
        super().__init__(
            f"No {kind} name given!",
            hint=f"Usage: {usage}" if usage else None,
        )
        self.kind = kind


class MissingMessageError(MissingArgumentError):
    def __init__(self, usage: str = "commit <message>"):
        super().__init__("Must provide a commit message!", hint=f"Usage: {usage}")


class InvalidBranchNameError(WorkflowError):
    """The branch has no `<type>/` prefix but a type-derived operation needs one."""

    exit_code = 4

    def __init__(self, branch: str):
        super().__init__(
            f"invalid branch name '{branch}'; no '/' found in branch name.",
        )
        self.branch = branch


class WrongSourceBranchError(WorkflowError):
    """Branch creation attempted from a branch the workflow rules do not allow."""

    exit_code = 5

    def __init__(self, branch_type: str, required: str, current: str, checkout_hint: Optional[str] = None):
        super().__init__(
            f"{branch_type.capitalize()} branches must branch from the {required} branch "
            f"(current branch: '{current}').",
            hint=(
                "Stash or commit your local changes then checkout "
                f"{checkout_hint or 'the ' + required + ' branch'}."
            ),
        )
        self.branch_type = branch_type
        self.required = required
        self.current = current


class ProtectedBranchError(WorkflowError):
    """Mutating operation attempted on a production or otherwise protected branch."""

    exit_code = 6

    def __init__(self, action: str, branch: str, reason: str = "the production branch"):
        super().__init__(f"cannot {action}: '{branch}' is {reason}!")
        self.action = action
        self.branch = branch


class InvalidBranchTypeError(WorkflowError):
    exit_code = 7

    def __init__(self, branch_type: str, allowed: List[str], action: str = "submit a pull request"):
        super().__init__(
            f"cannot {action} from a '{branch_type}' branch.",
            hint=f"Allowed branch types: {', '.join(allowed)}",
        )
        self.branch_type = branch_type


class WrongBranchError(WorkflowError):
    """Operation is only valid from one specific branch."""

    exit_code = 8

    def __init__(self, action: str, required: str, current: str):
        super().__init__(
            f"can only {action} from the '{required}' branch (current branch: '{current}').",
            hint=f"Checkout the '{required}' branch first.",
        )
        self.required = required
        self.current = current


class InvalidRemoteUrlError(WorkflowError):
    exit_code = 9

    def __init__(self, url: str):
        super().__init__(
            f"cannot parse remote url '{url}'; expected 'git@<host>:<owner>/<repo>.git'.",
        )
        self.url = url


class GitCommandError(WorkflowError):
    """git itself exited non-zero; the exit code is passed through."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"'{command}' failed with exit code {returncode}{detail}")
        self.command = command
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1
