"""
GitHub URL parsing.

Accepted: any string containing ``github.com/<owner>/<repo>``, e.g.
  https://github.com/owner/repo
  https://github.com/owner/repo.git
  github.com/owner/repo/tree/main/src
  https://www.github.com/owner/repo?tab=readme

A trailing ``.git`` on the repo segment is stripped. Anything else raises
``InvalidUrlError`` with a human-readable message.
"""

from __future__ import annotations

import re

from readmegen.errors import InvalidUrlError
from readmegen.models import GithubRef

_GITHUB_URL_RE = re.compile(
    r"github\.com/"
    r"(?P<owner>[^/\s?#]+)/"
    r"(?P<repo>[^/\s?#]+)"
)


def parse_github_url(url: str) -> GithubRef:
    """Return the ``GithubRef`` named by a GitHub URL.

    Raises ``InvalidUrlError`` when no owner/repo pair can be extracted.
    """
    if not url or not url.strip():
        raise InvalidUrlError("Please enter a GitHub repository URL")

    url = url.strip()

    match = _GITHUB_URL_RE.search(url)
    if not match:
        raise InvalidUrlError(
            f"Invalid GitHub repository URL: '{url}'. "
            "Expected format: https://github.com/owner/repo"
        )

    owner = match.group("owner")
    repo = re.sub(r"\.git$", "", match.group("repo"))
    if not repo:
        raise InvalidUrlError(f"Invalid GitHub repository URL: '{url}'. Missing repository name.")
    return GithubRef(owner=owner, repo=repo)
