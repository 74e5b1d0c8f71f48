"""Repository analysis orchestrator.

Drives one analysis request end to end:
URL parsing → concurrent GitHub fetches → contributing extraction →
classification (LLM-reconciled for the leading issues, keyword-only for the
rest) → response assembly.

The three GitHub fetches run concurrently and the first failure aborts the
analysis. The reconciliations also run concurrently, but each one falls back
on its own, so a failing summary never affects another issue.
"""

import asyncio
from typing import Optional

import structlog

from src.scout.analysis.contributing import extract_contributing_section
from src.scout.analysis.errors import (
    AnalysisFailedError,
    RateLimitedError,
    RepositoryUnavailableError,
)
from src.scout.analysis.models import AnalysisResult, EnrichedIssue, RepositorySnapshot
from src.scout.analysis.url import RepositoryRef, parse_repository_url
from src.scout.classifier.keywords import classify
from src.scout.classifier.reconciler import AIReconciler
from src.scout.github.client import (
    GitHubAPIError,
    GitHubClient,
    RateLimitError,
    RepositoryNotFoundError,
)
from src.scout.github.models import GitHubIssue, GitHubRepository
from src.scout.metrics import ScoutMetrics


logger = structlog.get_logger(__name__)


class RepositoryAnalyzer:
    """Analyzes a GitHub repository for first-contribution issues.

    Accepts its collaborators via constructor injection.

    Attributes:
        github_client: GitHub API client for metadata, issues, and README.
        reconciler: Summarizes the leading issues with the completion service.
        ai_issue_limit: Number of leading issues sent to the reconciler.
        issues_per_page: Number of open issues fetched.
        metrics: Optional metrics sink for classification provenance.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        reconciler: AIReconciler,
        ai_issue_limit: int = 5,
        issues_per_page: int = 30,
        metrics: Optional[ScoutMetrics] = None,
    ):
        self.github_client = github_client
        self.reconciler = reconciler
        self.ai_issue_limit = ai_issue_limit
        self.issues_per_page = issues_per_page
        self.metrics = metrics

    async def analyze(self, repo_url: str) -> AnalysisResult:
        """Analyze the repository at the given URL.

        Args:
            repo_url: GitHub repository URL submitted by the user.

        Returns:
            AnalysisResult with the repository snapshot and enriched issues,
            reconciled issues first, then keyword-classified issues, each
            group in fetch order.

        Raises:
            InvalidRepositoryURLError: If the URL is not a GitHub repository
                URL. No request is made.
            RepositoryUnavailableError: If GitHub answers 404.
            RateLimitedError: If GitHub answers 403 or 429.
            AnalysisFailedError: On any other upstream or network failure.
        """
        ref = parse_repository_url(repo_url)

        logger.info("Analyzing repository", repository=ref.full_name)

        repository, issues, readme = await self._fetch(ref)

        snapshot = RepositorySnapshot.from_github(
            repository,
            readme=readme,
            contributing_excerpt=extract_contributing_section(readme),
        )

        enriched = await self._classify_issues(issues)

        logger.info(
            "Repository analyzed",
            repository=ref.full_name,
            issues=len(enriched),
            ai_summaries=sum(1 for issue in enriched if issue.ai),
            has_readme=readme is not None,
            has_contributing_guide=snapshot.contributing_excerpt is not None,
        )

        return AnalysisResult(repo_data=snapshot, issues=enriched)

    async def _fetch(
        self,
        ref: RepositoryRef,
    ) -> tuple[GitHubRepository, list[GitHubIssue], Optional[str]]:
        """Fetch metadata, open issues, and README concurrently.

        Raises:
            AnalysisError: Mapped from the first upstream failure.
        """
        try:
            repository, issues, readme = await asyncio.gather(
                self.github_client.get_repository(ref.owner, ref.repo),
                self.github_client.list_open_issues(
                    ref.owner, ref.repo, per_page=self.issues_per_page
                ),
                self.github_client.get_readme(ref.owner, ref.repo),
            )
        except RepositoryNotFoundError as e:
            raise RepositoryUnavailableError() from e
        except RateLimitError as e:
            raise RateLimitedError() from e
        except GitHubAPIError as e:
            logger.error(
                "Repository fetch failed",
                repository=ref.full_name,
                status_code=e.status_code,
                error=e.message,
            )
            raise AnalysisFailedError() from e
        except ValueError as e:
            # Malformed JSON or a payload that does not match the models
            logger.error(
                "Unexpected GitHub payload",
                repository=ref.full_name,
                error=str(e),
            )
            raise AnalysisFailedError() from e

        return repository, issues, readme

    async def _classify_issues(self, issues: list[GitHubIssue]) -> list[EnrichedIssue]:
        """Reconcile the leading issues and keyword-classify the rest."""
        ai_batch = issues[: self.ai_issue_limit]
        remainder = issues[self.ai_issue_limit :]

        reconciled = await asyncio.gather(
            *(self.reconciler.reconcile(issue) for issue in ai_batch)
        )

        enriched = [
            EnrichedIssue.from_classification(issue, item.result, ai=item.ai)
            for issue, item in zip(ai_batch, reconciled)
        ]
        enriched.extend(
            EnrichedIssue.from_classification(issue, classify(issue), ai=False)
            for issue in remainder
        )

        if self.metrics is not None:
            for issue in enriched:
                self.metrics.record_classification(issue.ai)

        return enriched
