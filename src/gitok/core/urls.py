"""Parse GitHub and GitLab web URLs into a RepoRef.

Supports:
  https://github.com/owner/repo[.git]
  https://github.com/owner/repo/tree/branch/path/to/dir
  https://gitlab.com/group/project[.git]
  https://gitlab.com/group/project/-/tree/branch/path/to/dir
"""

from __future__ import annotations

import re

from gitok.core.models import RepoRef

_EXPECTED = (
    "Invalid Git URL format. Expected: https://github.com/owner/repo, "
    "https://gitlab.com/owner/repo, or their respective tree URLs"
)

_PATTERNS: list[tuple[str, str, re.Pattern[str]]] = [
    ("github", "github.com", re.compile(
        r"^https://github\.com/([^/]+)/([^/]+?)(?:\.git)?$")),
    ("github", "github.com", re.compile(
        r"^https://github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.+)$")),
    ("gitlab", "gitlab.com", re.compile(
        r"^https://gitlab\.com/([^/]+)/([^/]+?)(?:\.git)?$")),
    ("gitlab", "gitlab.com", re.compile(
        r"^https://gitlab\.com/([^/]+)/([^/]+)/-/tree/([^/]+)/(.+)$")),
]


def parse_git_url(url: str) -> RepoRef:
    """Classify *url* into platform/owner/repo/branch/subpath.

    Raises ValueError for anything outside the four supported shapes.
    """
    if not url or not isinstance(url, str):
        raise ValueError(_EXPECTED)

    url = url.strip()
    if url.endswith("/"):
        url = url[:-1]

    if "?" in url or "#" in url:
        raise ValueError(
            "Invalid Git URL format. URLs with query parameters or fragments are not supported"
        )

    for platform, host, pattern in _PATTERNS:
        m = pattern.match(url)
        if not m:
            continue
        owner, repo, *rest = m.groups()
        branch, subpath = rest if rest else (None, "")
        return RepoRef(
            platform=platform,
            host=host,
            owner=owner,
            repo=re.sub(r"\.git$", "", repo),
            branch=branch,
            subpath=subpath.strip("/"),
        )

    raise ValueError(_EXPECTED)
