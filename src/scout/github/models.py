"""GitHub REST API payload models.

These models capture the subset of GitHub's issue and repository payloads the
scout needs. They are immutable: issues and repositories are sourced from the
API and never modified locally. Unknown fields in the payload are ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GitHubLabel(BaseModel):
    """A label attached to an issue.

    Attributes:
        id: GitHub label ID.
        name: Label name as shown in the GitHub UI.
        color: Six hex digit colour without the leading '#', or empty.
        description: Optional label description.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    color: str = Field(default="", pattern=r"^([0-9a-fA-F]{6})?$")
    description: Optional[str] = None


class GitHubAssignee(BaseModel):
    """A user assigned to an issue."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str
    avatar_url: str = ""
    html_url: str = ""


class GitHubIssue(BaseModel):
    """An issue as returned by `GET /repos/{owner}/{repo}/issues`.

    Attributes:
        id: Global GitHub issue ID.
        number: Issue number within the repository.
        title: Issue title text.
        body: Issue body text; None when the issue has no description.
        html_url: Browser URL of the issue.
        state: Issue state ("open" for every issue the scout fetches).
        labels: Labels in the order GitHub returns them.
        created_at: ISO 8601 creation timestamp, passed through verbatim.
        updated_at: ISO 8601 last-update timestamp, passed through verbatim.
        assignees: Users currently assigned to the issue.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    number: int = Field(..., gt=0)
    title: str
    body: Optional[str] = None
    html_url: str
    state: str = "open"
    labels: list[GitHubLabel] = Field(default_factory=list)
    created_at: str
    updated_at: str
    assignees: list[GitHubAssignee] = Field(default_factory=list)

    @property
    def body_length(self) -> int:
        """Character count of the body, 0 when absent."""
        return len(self.body) if self.body else 0

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]


class GitHubRepository(BaseModel):
    """Repository metadata as returned by `GET /repos/{owner}/{repo}`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: Optional[str] = None
    html_url: str
    stargazers_count: int = 0
    language: Optional[str] = None
