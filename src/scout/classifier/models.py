"""Issue classification models for the scout.

This module defines the difficulty enumeration and the classification result
structure shared by the keyword classifier and the AI reconciler.

The models use Pydantic for validation, consistent with the GitHub payload
models in github/models.py.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


SUMMARY_LIMIT = 200
ELLIPSIS = "..."
MAX_SUGGESTED_FILES = 3


class Difficulty(str, Enum):
    """Coarse contribution-effort bucket for an issue.

    Attributes:
        EASY: Suitable for a first contribution (docs, typos, labelled
              beginner-friendly).
        MEDIUM: Default when no easy or hard signal is present.
        HARD: Bugs, features, refactors, and core or performance work.
    """

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ClassificationResult(BaseModel):
    """Result of classifying a single issue.

    Attributes:
        summary: Contributor-facing summary, at most SUMMARY_LIMIT characters
            plus an ellipsis marker when truncated.
        difficulty: The difficulty bucket.
        suggested_files: Up to MAX_SUGGESTED_FILES path hints, in trigger
            order.
        estimated_time: Coarse duration such as "<1 hour" or "3–6 hours".
    """

    model_config = ConfigDict(frozen=True)

    summary: str = Field(
        ...,
        max_length=SUMMARY_LIMIT + len(ELLIPSIS),
        description="Contributor-facing summary of the issue",
    )

    difficulty: Difficulty = Field(
        ...,
        description="Difficulty bucket of the issue",
    )

    suggested_files: list[str] = Field(
        default_factory=list,
        max_length=MAX_SUGGESTED_FILES,
        description="Path hints for where the change likely lives",
    )

    estimated_time: str = Field(
        ...,
        min_length=1,
        description="Coarse time estimate for the contribution",
    )

    @field_validator("estimated_time")
    @classmethod
    def validate_estimated_time(cls, v: str) -> str:
        """Reject blank estimates; the field is never left empty."""
        if not v.strip():
            raise ValueError("estimated_time cannot be blank")
        return v


class ReconciledClassification(BaseModel):
    """A classification paired with its provenance.

    Attributes:
        result: The merged classification.
        ai: True when the summary came from the completion service, False
            when the deterministic path produced the whole result.
    """

    model_config = ConfigDict(frozen=True)

    result: ClassificationResult
    ai: bool = False
