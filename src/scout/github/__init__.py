"""GitHub API client for repository analysis.

This module provides an async wrapper around the GitHub REST API for:
- Fetching repository metadata
- Listing open issues
- Fetching the raw README
"""

from src.scout.github.client import (
    GitHubAPIError,
    GitHubClient,
    RateLimitError,
    RepositoryNotFoundError,
)
from src.scout.github.models import (
    GitHubAssignee,
    GitHubIssue,
    GitHubLabel,
    GitHubRepository,
)

__all__ = [
    "GitHubAPIError",
    "GitHubAssignee",
    "GitHubClient",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubRepository",
    "RateLimitError",
    "RepositoryNotFoundError",
]
