"""Pytest configuration for all tests."""

import pytest


SCOUT_ENV_VARS = (
    "GITHUB_TOKEN",
    "GROQ_API_KEY",
    "SCOUT_GITHUB_TOKEN",
    "SCOUT_COMPLETION_API_KEY",
    "SCOUT_GITHUB_BASE_URL",
    "SCOUT_COMPLETION_BASE_URL",
    "SCOUT_COMPLETION_MODEL",
    "SCOUT_AI_ISSUE_LIMIT",
    "SCOUT_ISSUES_PER_PAGE",
    "SCOUT_PORT",
    "SCOUT_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable ScoutSettings reads from the environment."""
    for name in SCOUT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def issue_payload(
    number: int = 1,
    title: str = "Improve widget",
    body=None,
    labels=None,
    assignees=None,
) -> dict:
    """GitHub issue JSON as returned by the issues endpoint."""
    return {
        "id": 1000 + number,
        "number": number,
        "title": title,
        "body": body,
        "html_url": f"https://github.com/acme/widgets/issues/{number}",
        "state": "open",
        "labels": [
            {"id": 10 + i, "name": name, "color": "a2eeef", "description": None}
            for i, name in enumerate(labels or [])
        ],
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-02-01T00:00:00Z",
        "assignees": assignees or [],
        "comments": 0,
    }


@pytest.fixture
def make_issue_payload():
    return issue_payload
