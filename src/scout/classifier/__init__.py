"""Issue classification for first-time contributors.

This module classifies GitHub issues to determine:
- Difficulty (easy, medium, hard) from labels and keywords
- Suggested files from trigger words
- A coarse time estimate from difficulty and body length
- A contributor-facing summary, optionally written by an LLM

LLM output never changes difficulty or file hints.
"""

from src.scout.classifier.estimator import TIME_BUCKETS, estimate_for_issue, estimate_time
from src.scout.classifier.keywords import classify
from src.scout.classifier.models import (
    ClassificationResult,
    Difficulty,
    ReconciledClassification,
)
from src.scout.classifier.reconciler import AIReconciler, merge_completion

__all__ = [
    "AIReconciler",
    "ClassificationResult",
    "classify",
    "Difficulty",
    "estimate_for_issue",
    "estimate_time",
    "merge_completion",
    "ReconciledClassification",
    "TIME_BUCKETS",
]
