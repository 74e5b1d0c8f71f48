"""GitHub repository URL parsing."""

import re
from dataclasses import dataclass
from typing import Optional

from src.scout.analysis.errors import InvalidRepositoryURLError


GITHUB_URL_PATTERN = re.compile(r"https?://github\.com/([^/?#]+)/([^/?#]+)(?:[/?#].*)?")


@dataclass(frozen=True)
class RepositoryRef:
    """Owner and name of a GitHub repository."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_repository_url(url: Optional[str]) -> RepositoryRef:
    """Parse a GitHub repository URL into owner and repository name.

    Accepts `http(s)://github.com/<owner>/<repo>` optionally followed by a
    path, query string or fragment (e.g., `/issues`, `?tab=readme`), and strips
    a trailing `.git` from the repository segment. Surrounding whitespace is
    ignored.

    Args:
        url: The URL submitted by the user.

    Returns:
        RepositoryRef with owner and repository name.

    Raises:
        InvalidRepositoryURLError: If the URL is empty or does not point to a
            github.com repository.
    """
    if not url or not url.strip():
        raise InvalidRepositoryURLError("Repository URL is required")

    match = GITHUB_URL_PATTERN.fullmatch(url.strip())
    if match is None:
        raise InvalidRepositoryURLError()

    owner, repo = match.groups()
    repo = re.sub(r"\.git\Z", "", repo)
    if not repo:
        raise InvalidRepositoryURLError()

    return RepositoryRef(owner=owner, repo=repo)
