"""Analysis response models.

These models define the JSON returned by the analysis endpoint. Python
attribute names are snake_case; serialization aliases give the camelCase
names the presentation layer consumes (dump with ``by_alias=True``).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.scout.classifier.models import ClassificationResult, Difficulty
from src.scout.github.models import (
    GitHubAssignee,
    GitHubIssue,
    GitHubLabel,
    GitHubRepository,
)


NO_REPOSITORY_DESCRIPTION = "No description available"
UNKNOWN_LANGUAGE = "Unknown"


class RepositorySnapshot(BaseModel):
    """Repository summary returned alongside the issues.

    Attributes:
        name: Repository name.
        description: Repository description or a placeholder.
        url: Browser URL of the repository.
        star_count: Stargazer count (wire name ``stars``).
        primary_language: Primary language or "Unknown" (wire name
            ``language``).
        raw_readme: Raw README text, None when absent (wire name ``readme``).
        contributing_excerpt: Contributing section of the README, None when
            absent (wire name ``contributingGuide``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = NO_REPOSITORY_DESCRIPTION
    url: str
    star_count: int = Field(default=0, ge=0, serialization_alias="stars")
    primary_language: str = Field(
        default=UNKNOWN_LANGUAGE,
        serialization_alias="language",
    )
    raw_readme: Optional[str] = Field(default=None, serialization_alias="readme")
    contributing_excerpt: Optional[str] = Field(
        default=None,
        serialization_alias="contributingGuide",
    )

    @model_validator(mode="after")
    def validate_excerpt_in_readme(self) -> "RepositorySnapshot":
        """The contributing excerpt must come from the README."""
        if self.contributing_excerpt is not None:
            if self.raw_readme is None or self.contributing_excerpt not in self.raw_readme:
                raise ValueError("contributing_excerpt must be a substring of raw_readme")
        return self

    @classmethod
    def from_github(
        cls,
        repository: GitHubRepository,
        readme: Optional[str],
        contributing_excerpt: Optional[str],
    ) -> "RepositorySnapshot":
        """Build a snapshot from GitHub metadata and README text."""
        return cls(
            name=repository.name,
            description=repository.description or NO_REPOSITORY_DESCRIPTION,
            url=repository.html_url,
            star_count=repository.stargazers_count,
            primary_language=repository.language or UNKNOWN_LANGUAGE,
            raw_readme=readme,
            contributing_excerpt=contributing_excerpt,
        )


class EnrichedIssue(BaseModel):
    """An issue with its classification, as returned to the presentation layer.

    Attributes:
        ai: Provenance flag; True when the summary (and possibly the time
            estimate) came from the completion service.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    title: str
    body: Optional[str] = None
    url: str
    number: int
    state: str
    labels: list[GitHubLabel] = Field(default_factory=list)
    summary: str
    difficulty: Difficulty
    suggested_files: list[str] = Field(
        default_factory=list,
        serialization_alias="suggestedFiles",
    )
    created_at: str = Field(serialization_alias="createdAt")
    updated_at: str = Field(serialization_alias="updatedAt")
    assignees: list[GitHubAssignee] = Field(default_factory=list)
    estimated_time: str = Field(serialization_alias="estimatedTime")
    ai: bool = False

    @classmethod
    def from_classification(
        cls,
        issue: GitHubIssue,
        result: ClassificationResult,
        ai: bool,
    ) -> "EnrichedIssue":
        """Combine a raw issue with its classification result."""
        return cls(
            id=issue.id,
            title=issue.title,
            body=issue.body,
            url=issue.html_url,
            number=issue.number,
            state=issue.state,
            labels=list(issue.labels),
            summary=result.summary,
            difficulty=result.difficulty,
            suggested_files=list(result.suggested_files),
            created_at=issue.created_at,
            updated_at=issue.updated_at,
            assignees=list(issue.assignees),
            estimated_time=result.estimated_time,
            ai=ai,
        )


class AnalysisResult(BaseModel):
    """Full analysis of a repository (wire shape ``{repoData, issues}``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repo_data: RepositorySnapshot = Field(serialization_alias="repoData")
    issues: list[EnrichedIssue] = Field(default_factory=list)

    def to_response(self) -> dict:
        """Serialize to the JSON-compatible response body."""
        return self.model_dump(mode="json", by_alias=True)
