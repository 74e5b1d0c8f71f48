"""Heuristic time estimates for issues.

The estimate depends only on the difficulty bucket and the length of the
issue body: each bucket has a body-length threshold, and bodies at or above
it move to the longer duration.
"""

from src.scout.classifier.models import Difficulty
from src.scout.github.models import GitHubIssue


LESS_THAN_ONE_HOUR = "<1 hour"
ONE_TO_TWO_HOURS = "1–2 hours"
ONE_TO_THREE_HOURS = "1–3 hours"
THREE_TO_SIX_HOURS = "3–6 hours"
SIX_PLUS_HOURS = "6+ hours"

TIME_BUCKETS = (
    LESS_THAN_ONE_HOUR,
    ONE_TO_TWO_HOURS,
    ONE_TO_THREE_HOURS,
    THREE_TO_SIX_HOURS,
    SIX_PLUS_HOURS,
)

# difficulty -> (body length threshold, below threshold, at or above threshold)
_ESTIMATE_RULES = {
    Difficulty.EASY: (300, LESS_THAN_ONE_HOUR, ONE_TO_TWO_HOURS),
    Difficulty.MEDIUM: (500, ONE_TO_THREE_HOURS, THREE_TO_SIX_HOURS),
    Difficulty.HARD: (800, THREE_TO_SIX_HOURS, SIX_PLUS_HOURS),
}


def estimate_time(body_length: int, difficulty: Difficulty) -> str:
    """Map a body length and difficulty to a duration bucket.

    Args:
        body_length: Character count of the raw issue body (0 if absent).
        difficulty: The issue's difficulty bucket.

    Returns:
        One of TIME_BUCKETS.
    """
    threshold, short, long = _ESTIMATE_RULES[Difficulty(difficulty)]
    return short if body_length < threshold else long


def estimate_for_issue(issue: GitHubIssue, difficulty: Difficulty) -> str:
    """Estimate the time for an issue at the given difficulty."""
    return estimate_time(issue.body_length, difficulty)
