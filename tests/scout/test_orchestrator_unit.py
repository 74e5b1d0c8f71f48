"""Unit tests for the RepositoryAnalyzer.

The GitHub client and reconciler are mocked so the tests focus on ordering,
concurrency, the AI/keyword partition, and the mapping of upstream failures.
"""

import asyncio
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage
from prometheus_client import CollectorRegistry
from pydantic import ValidationError

from src.scout.analysis.errors import (
    AnalysisFailedError,
    InvalidRepositoryURLError,
    RateLimitedError,
    RepositoryUnavailableError,
)
from src.scout.analysis.orchestrator import RepositoryAnalyzer
from src.scout.classifier.keywords import classify
from src.scout.classifier.models import ClassificationResult, Difficulty, ReconciledClassification
from src.scout.classifier.reconciler import AIReconciler
from src.scout.github.client import (
    GitHubAPIError,
    RateLimitError,
    RepositoryNotFoundError,
)
from src.scout.github.models import GitHubIssue, GitHubRepository
from src.scout.metrics import ScoutMetrics


README = "# Widgets\n\n## Contributing\n\nOpen a PR.\n\n## License\nMIT\n"


def run_async(coro):
    return asyncio.run(coro)


def _make_issue(number: int, title: Optional[str] = None) -> GitHubIssue:
    return GitHubIssue(
        id=1000 + number,
        number=number,
        title=title or f"Issue {number}",
        body=f"Body of issue {number}",
        html_url=f"https://github.com/acme/widgets/issues/{number}",
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-02T00:00:00Z",
    )


def _make_repository(**overrides) -> GitHubRepository:
    data = {
        "name": "widgets",
        "description": "Widgets for everyone",
        "html_url": "https://github.com/acme/widgets",
        "stargazers_count": 12,
        "language": "Python",
    }
    data.update(overrides)
    return GitHubRepository(**data)


def _github_client(
    issues: Optional[List[GitHubIssue]] = None,
    readme: Optional[str] = README,
    repository: Optional[GitHubRepository] = None,
) -> MagicMock:
    client = MagicMock()
    client.get_repository = AsyncMock(return_value=repository or _make_repository())
    client.list_open_issues = AsyncMock(return_value=issues or [])
    client.get_readme = AsyncMock(return_value=readme)
    return client


def _ai_reconciler() -> MagicMock:
    """A reconciler whose completions always succeed with a fixed summary."""

    async def reconcile(issue: GitHubIssue) -> ReconciledClassification:
        keyword = classify(issue)
        result = ClassificationResult(
            summary=f"AI summary {issue.number}",
            difficulty=keyword.difficulty,
            suggested_files=keyword.suggested_files,
            estimated_time="2 hours",
        )
        return ReconciledClassification(result=result, ai=True)

    reconciler = MagicMock()
    reconciler.reconcile = AsyncMock(side_effect=reconcile)
    return reconciler


class TestOrdering:
    """Reconciled issues come first, each group in fetch order."""

    def test_first_five_are_reconciled(self):
        issues = [_make_issue(n) for n in range(1, 8)]
        reconciler = _ai_reconciler()
        analyzer = RepositoryAnalyzer(_github_client(issues), reconciler)

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert [issue.number for issue in result.issues] == list(range(1, 8))
        assert [issue.ai for issue in result.issues] == [True] * 5 + [False] * 2
        assert reconciler.reconcile.await_count == 5
        assert result.issues[0].summary == "AI summary 1"
        assert result.issues[5].summary == "Body of issue 6"

    def test_fewer_issues_than_limit(self):
        issues = [_make_issue(n) for n in range(1, 3)]
        reconciler = _ai_reconciler()
        analyzer = RepositoryAnalyzer(_github_client(issues), reconciler)

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert [issue.ai for issue in result.issues] == [True, True]
        assert reconciler.reconcile.await_count == 2

    def test_zero_limit_skips_reconciliation(self):
        issues = [_make_issue(n) for n in range(1, 4)]
        reconciler = _ai_reconciler()
        analyzer = RepositoryAnalyzer(
            _github_client(issues), reconciler, ai_issue_limit=0
        )

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert not any(issue.ai for issue in result.issues)
        reconciler.reconcile.assert_not_awaited()

    def test_no_issues(self):
        analyzer = RepositoryAnalyzer(_github_client([]), _ai_reconciler())

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert result.issues == []

    def test_disabled_reconciler_marks_nothing_as_ai(self):
        issues = [_make_issue(n, title="Fix typo in docs") for n in range(1, 8)]
        analyzer = RepositoryAnalyzer(_github_client(issues), AIReconciler(api_key=None))

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert [issue.number for issue in result.issues] == list(range(1, 8))
        assert not any(issue.ai for issue in result.issues)
        assert all(issue.difficulty == Difficulty.EASY for issue in result.issues)


class TestRequests:
    """Requests made to GitHub for a valid URL."""

    def test_fetches_with_parsed_owner_and_repo(self):
        client = _github_client()
        analyzer = RepositoryAnalyzer(client, _ai_reconciler(), issues_per_page=25)

        run_async(analyzer.analyze("https://github.com/vercel/next.js.git"))

        client.get_repository.assert_awaited_once_with("vercel", "next.js")
        client.list_open_issues.assert_awaited_once_with("vercel", "next.js", per_page=25)
        client.get_readme.assert_awaited_once_with("vercel", "next.js")

    @pytest.mark.parametrize("url", ["", "not-a-url", "https://gitlab.com/a/b"])
    def test_invalid_url_makes_no_requests(self, url):
        client = _github_client()
        analyzer = RepositoryAnalyzer(client, _ai_reconciler())

        with pytest.raises(InvalidRepositoryURLError):
            run_async(analyzer.analyze(url))

        client.get_repository.assert_not_called()
        client.list_open_issues.assert_not_called()
        client.get_readme.assert_not_called()


class TestSnapshot:
    """Repository data assembled from the fetches."""

    def test_snapshot_fields(self):
        analyzer = RepositoryAnalyzer(_github_client(), _ai_reconciler())

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))
        snapshot = result.repo_data

        assert snapshot.name == "widgets"
        assert snapshot.star_count == 12
        assert snapshot.primary_language == "Python"
        assert snapshot.raw_readme == README
        assert snapshot.contributing_excerpt == "## Contributing\n\nOpen a PR."

    def test_missing_readme_has_no_excerpt(self):
        analyzer = RepositoryAnalyzer(_github_client(readme=None), _ai_reconciler())

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert result.repo_data.raw_readme is None
        assert result.repo_data.contributing_excerpt is None

    def test_missing_description_and_language_use_placeholders(self):
        repository = _make_repository(description=None, language=None)
        analyzer = RepositoryAnalyzer(
            _github_client(repository=repository), _ai_reconciler()
        )

        result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert result.repo_data.description == "No description available"
        assert result.repo_data.primary_language == "Unknown"


class TestErrorMapping:
    """Upstream failures map to user-facing analysis errors."""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (RepositoryNotFoundError("GitHub API error: 404", status_code=404), RepositoryUnavailableError),
            (RateLimitError("GitHub API error: 403", status_code=403), RateLimitedError),
            (RateLimitError("GitHub API error: 429", status_code=429), RateLimitedError),
            (GitHubAPIError("GitHub API error: 502", status_code=502), AnalysisFailedError),
            (GitHubAPIError("GitHub request failed"), AnalysisFailedError),
            (ValueError("bad json"), AnalysisFailedError),
        ],
    )
    def test_repository_failures(self, error, expected):
        client = _github_client()
        client.get_repository = AsyncMock(side_effect=error)
        analyzer = RepositoryAnalyzer(client, _ai_reconciler())

        with pytest.raises(expected):
            run_async(analyzer.analyze("https://github.com/acme/widgets"))

    def test_issue_fetch_failure_aborts(self):
        client = _github_client()
        client.list_open_issues = AsyncMock(
            side_effect=RateLimitError("GitHub API error: 403", status_code=403)
        )
        reconciler = _ai_reconciler()
        analyzer = RepositoryAnalyzer(client, reconciler)

        with pytest.raises(RateLimitedError) as exc_info:
            run_async(analyzer.analyze("https://github.com/acme/widgets"))

        assert exc_info.value.message == "Rate limit exceeded. Please try again later."
        reconciler.reconcile.assert_not_awaited()

    def test_payload_validation_error_is_analysis_failure(self):
        with pytest.raises(ValidationError) as exc_info:
            GitHubRepository.model_validate({"name": "widgets"})
        client = _github_client()
        client.get_repository = AsyncMock(side_effect=exc_info.value)
        analyzer = RepositoryAnalyzer(client, _ai_reconciler())

        with pytest.raises(AnalysisFailedError):
            run_async(analyzer.analyze("https://github.com/acme/widgets"))


def test_classifications_are_counted():
    registry = CollectorRegistry()
    metrics = ScoutMetrics(registry=registry)
    issues = [_make_issue(n) for n in range(1, 8)]
    analyzer = RepositoryAnalyzer(_github_client(issues), _ai_reconciler(), metrics=metrics)

    run_async(analyzer.analyze("https://github.com/acme/widgets"))

    ai_count = registry.get_sample_value(
        "scout_issue_classifications_total", {"source": "ai"}
    )
    keyword_count = registry.get_sample_value(
        "scout_issue_classifications_total", {"source": "heuristic"}
    )
    assert ai_count == 5
    assert keyword_count == 2


class TestConcurrency:
    """Fetches and reconciliations run concurrently."""

    def test_github_fetches_overlap(self):
        async def scenario():
            all_started = asyncio.Event()
            started = []

            async def wait_for_peers(name, result):
                started.append(name)
                if len(started) == 3:
                    all_started.set()
                await asyncio.wait_for(all_started.wait(), timeout=1.0)
                return result

            async def get_repository(owner, repo):
                return await wait_for_peers("repository", _make_repository())

            async def list_open_issues(owner, repo, per_page):
                return await wait_for_peers("issues", [_make_issue(1)])

            async def get_readme(owner, repo):
                return await wait_for_peers("readme", README)

            client = _github_client()
            client.get_repository = AsyncMock(side_effect=get_repository)
            client.list_open_issues = AsyncMock(side_effect=list_open_issues)
            client.get_readme = AsyncMock(side_effect=get_readme)
            analyzer = RepositoryAnalyzer(client, _ai_reconciler())

            result = await analyzer.analyze("https://github.com/acme/widgets")
            return started, result

        started, result = run_async(scenario())

        assert sorted(started) == ["issues", "readme", "repository"]
        assert [issue.number for issue in result.issues] == [1]

    def test_first_fetch_failure_does_not_wait_for_the_others(self):
        async def scenario():
            never_set = asyncio.Event()

            async def hang(*args, **kwargs):
                await never_set.wait()

            client = _github_client()
            client.get_repository = AsyncMock(side_effect=hang)
            client.get_readme = AsyncMock(side_effect=hang)
            client.list_open_issues = AsyncMock(
                side_effect=RepositoryNotFoundError("GitHub API error: 404", status_code=404)
            )
            analyzer = RepositoryAnalyzer(client, _ai_reconciler())

            await asyncio.wait_for(
                analyzer.analyze("https://github.com/acme/widgets"), timeout=1.0
            )

        with pytest.raises(RepositoryUnavailableError):
            run_async(scenario())

    def test_reconciliations_overlap(self):
        async def scenario():
            all_started = asyncio.Event()
            started = []
            summarize = _ai_reconciler().reconcile.side_effect

            async def reconcile(issue):
                started.append(issue.number)
                if len(started) == 5:
                    all_started.set()
                await asyncio.wait_for(all_started.wait(), timeout=1.0)
                return await summarize(issue)

            reconciler = MagicMock()
            reconciler.reconcile = AsyncMock(side_effect=reconcile)
            issues = [_make_issue(n) for n in range(1, 8)]
            analyzer = RepositoryAnalyzer(_github_client(issues), reconciler)

            return await analyzer.analyze("https://github.com/acme/widgets")

        result = run_async(scenario())

        assert [issue.ai for issue in result.issues] == [True] * 5 + [False] * 2


def test_one_failed_summary_only_affects_its_issue():
    async def ainvoke(messages):
        if "Title: Issue 2\n" in messages[1].content:
            raise RuntimeError("completion service unavailable")
        return AIMessage(content="A short summary. 2 hours")

    reconciler = AIReconciler(api_key="gsk_test")
    reconciler._llm = MagicMock()
    reconciler._llm.ainvoke = AsyncMock(side_effect=ainvoke)
    issues = [_make_issue(n) for n in range(1, 8)]
    analyzer = RepositoryAnalyzer(_github_client(issues), reconciler)

    result = run_async(analyzer.analyze("https://github.com/acme/widgets"))

    assert [issue.number for issue in result.issues] == list(range(1, 8))
    assert [issue.ai for issue in result.issues] == [True, False, True, True, True, False, False]
    failed = result.issues[1]
    assert failed.summary == classify(issues[1]).summary
    assert failed.estimated_time == classify(issues[1]).estimated_time
    for issue in (result.issues[0], *result.issues[2:5]):
        assert issue.summary == "A short summary."
        assert issue.estimated_time == "2 hours"
