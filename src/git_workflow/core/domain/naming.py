"""Branch naming helpers: slugs and `<type>/<slug>` splitting."""

from datetime import datetime
from typing import Iterable, Optional, Tuple

from git_workflow.core.domain.errors import InvalidBranchNameError

BRANCH_TYPE_SEPARATOR = "/"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M"


def join_words(words: Iterable[str]) -> str:
    """
    Join caller-supplied words into a hyphenated slug.

    Every word is split on whitespace, so quoted multi-word arguments and
    separate arguments give the same result:

        >>> join_words(["multi word", "token"])
        'multi-word-token'
    """
    tokens = [token for word in words for token in word.split()]
    return "-".join(tokens).strip("-")


def branch_name(branch_type: str, words: Iterable[str]) -> str:
    return f"{branch_type}{BRANCH_TYPE_SEPARATOR}{join_words(words)}"


def split_branch_name(branch: str) -> Tuple[str, str]:
    """Split `<type>/<name>` on the first separator."""
    if BRANCH_TYPE_SEPARATOR not in branch:
        raise InvalidBranchNameError(branch)
    branch_type, _, name = branch.partition(BRANCH_TYPE_SEPARATOR)
    return branch_type, name


def branch_type_of(branch: str) -> str:
    return split_branch_name(branch)[0]


def timestamp(now: Optional[datetime] = None) -> str:
    """`YYYY-MM-DDTHH:MM`, e.g. 2021-01-27T11:04."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
