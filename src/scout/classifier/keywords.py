"""Deterministic keyword classifier for GitHub issues.

This module classifies issues without any network access. It derives:
- Difficulty from label names and keywords in the title and body
- A summary from the issue body
- Suggested file paths from trigger words
- A time estimate via the estimator module

The classifier is the fallback path for every issue the completion service
does not summarize, and the sole source of difficulty and file hints for the
ones it does.
"""

from typing import Iterable, Optional

from src.scout.classifier.estimator import estimate_time
from src.scout.classifier.models import (
    ELLIPSIS,
    MAX_SUGGESTED_FILES,
    SUMMARY_LIMIT,
    ClassificationResult,
    Difficulty,
)
from src.scout.github.models import GitHubIssue


NO_DESCRIPTION = "No description provided."

EASY_LABEL_MARKERS = ("good first issue", "beginner", "easy", "help wanted")

EASY_KEYWORDS = (
    "typo",
    "documentation",
    "readme",
    "comment",
    "formatting",
    "style",
    "lint",
    "spelling",
)

HARD_LABEL_MARKERS = ("bug", "enhancement", "feature", "core")

HARD_KEYWORDS = (
    "bug",
    "fix",
    "refactor",
    "performance",
    "optimization",
    "security",
    "core",
    "architecture",
)

# Evaluated in order; hints accumulate and are truncated afterwards.
FILE_HINT_RULES = (
    (("readme", "documentation"), ("README.md", "docs/")),
    (("test", "spec"), ("test/", "__tests__/", "*.test.js", "*.spec.js")),
    (("component", "ui"), ("components/", "src/components/")),
    (("api", "endpoint"), ("api/", "routes/", "controllers/")),
    (("config", "setting"), ("config/", "*.config.js", "package.json")),
)


def build_haystack(title: str, body: Optional[str]) -> str:
    """Lowercased title and body joined by a space."""
    return f"{title} {body or ''}".lower()


def _any_label_contains(label_names: Iterable[str], markers: Iterable[str]) -> bool:
    return any(marker in name for name in label_names for marker in markers)


def _contains_any(haystack: str, keywords: Iterable[str]) -> bool:
    return any(keyword in haystack for keyword in keywords)


def determine_difficulty(haystack: str, label_names: Iterable[str]) -> Difficulty:
    """Pick the difficulty bucket from keywords and label names.

    The easy signals (labels, then keywords) are checked before the hard
    signals, so a "good first issue" label wins over any hard keyword.

    Args:
        haystack: Lowercased title and body.
        label_names: Label names attached to the issue (any case).

    Returns:
        The difficulty bucket, MEDIUM when nothing matches.
    """
    names = {name.lower() for name in label_names}

    if _any_label_contains(names, EASY_LABEL_MARKERS) or _contains_any(
        haystack, EASY_KEYWORDS
    ):
        return Difficulty.EASY

    if _any_label_contains(names, HARD_LABEL_MARKERS) or _contains_any(
        haystack, HARD_KEYWORDS
    ):
        return Difficulty.HARD

    return Difficulty.MEDIUM


def truncate_summary(text: str) -> str:
    """Cut text to SUMMARY_LIMIT characters, marking the cut with an ellipsis."""
    if len(text) > SUMMARY_LIMIT:
        return text[:SUMMARY_LIMIT] + ELLIPSIS
    return text


def summarize_body(body: Optional[str]) -> str:
    """Summary for the deterministic path: the (truncated) body or a placeholder."""
    if not body:
        return NO_DESCRIPTION
    return truncate_summary(body)


def suggest_files(haystack: str) -> list[str]:
    """Collect path hints for every trigger found, keeping the first three."""
    hints: list[str] = []
    for triggers, paths in FILE_HINT_RULES:
        if _contains_any(haystack, triggers):
            hints.extend(paths)
    return hints[:MAX_SUGGESTED_FILES]


def classify(issue: GitHubIssue) -> ClassificationResult:
    """Classify an issue using keyword heuristics only.

    This is a total function: every issue yields a result, and identical
    input always yields an identical result.

    Args:
        issue: The issue to classify.

    Returns:
        ClassificationResult with summary, difficulty, file hints, and time.
    """
    haystack = build_haystack(issue.title, issue.body)
    difficulty = determine_difficulty(haystack, issue.label_names)

    return ClassificationResult(
        summary=summarize_body(issue.body),
        difficulty=difficulty,
        suggested_files=suggest_files(haystack),
        estimated_time=estimate_time(issue.body_length, difficulty),
    )
