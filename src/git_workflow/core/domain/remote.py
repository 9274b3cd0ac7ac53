"""
Remote URL parsing and compare-URL construction.

The canonical remote form is the SSH shorthand `git@<host>:<owner>/<repo>.git`.
`ssh://` and `https://` remotes are accepted as well since hosting services
hand out both.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode

from git_workflow.core.domain.errors import InvalidRemoteUrlError

_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$")
_URL_LIKE = re.compile(
    r"^(?:ssh|https?|git)://(?:[^@/]+@)?(?P<host>[\w.-]+)(?::\d+)?/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True)
class RepoLocation:
    """Host, owner and repository name of the `origin` remote."""

    host: str
    owner: str
    repo: str

    @property
    def web_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}"

    @property
    def compare_base_url(self) -> str:
        return f"{self.web_url}/compare"


def parse_remote_url(url: str) -> RepoLocation:
    """
    Parse a remote URL into its host, owner and repository name.

    Args:
        url: Remote URL as printed by `git ls-remote --get-url`

    Returns:
        RepoLocation for the remote

    Raises:
        InvalidRemoteUrlError: If the URL matches none of the supported forms
    """
    candidate = (url or "").strip()
    match = _URL_LIKE.match(candidate) or _SCP_LIKE.match(candidate)
    if not match:
        raise InvalidRemoteUrlError(candidate)
    return RepoLocation(host=match["host"], owner=match["owner"], repo=match["repo"])


def compare_url(location: RepoLocation, target: str, source: str, title: Optional[str] = None) -> str:
    """
    Build the compare URL proposing to merge `source` into `target`.

    >>> compare_url(RepoLocation("example.com", "acme", "widgets"), "development", "feature/x")
    'https://example.com/acme/widgets/compare/development...feature/x?expand=1'
    """
    params = {"expand": "1"}
    if title:
        params["title"] = title
    refs = f"{quote(target, safe='/')}...{quote(source, safe='/')}"
    return f"{location.compare_base_url}/{refs}?{urlencode(params, safe=':')}"
