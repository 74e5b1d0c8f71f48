"""Async GitHub REST client for repository analysis.

This module provides an async wrapper around the three GitHub API calls the
scout makes for each analysis:
- Repository metadata (`GET /repos/{owner}/{repo}`)
- Open issues, most recently updated first (`GET /repos/{owner}/{repo}/issues`)
- Raw README text (`GET /repos/{owner}/{repo}/readme`)

Every request is attempted exactly once. Failures are surfaced as typed
exceptions so callers can map them to user-facing messages; there is no
retry or backoff. The token is optional and only raises the rate limit.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from src.scout.github.models import GitHubIssue, GitHubRepository


logger = structlog.get_logger(__name__)


JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"


class GitHubAPIError(Exception):
    """Raised when a GitHub API request fails.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code from the response, None for
            transport failures (DNS, connection reset, timeout).
        response_body: Response body from GitHub API.
        request_url: The URL that was requested.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url
        super().__init__(message)


class RepositoryNotFoundError(GitHubAPIError):
    """Raised when GitHub answers 404 (missing or private repository)."""


class RateLimitError(GitHubAPIError):
    """Raised when GitHub refuses a request with 403 or 429.

    Attributes:
        reset_at: Unix timestamp when the rate limit resets, if reported.
        remaining: Requests remaining in the current window, if reported.
    """

    def __init__(
        self,
        message: str,
        reset_at: Optional[int] = None,
        remaining: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.reset_at = reset_at
        self.remaining = remaining


class GitHubClient:
    """Async GitHub API client for the scout's read-only calls.

    Attributes:
        token: Optional GitHub API token (PAT or GitHub App token).
        base_url: Base URL for GitHub API (default: https://api.github.com).
        timeout: Request timeout in seconds.

    Example:
        >>> async with GitHubClient(token="ghp_xxx") as client:
        ...     repo = await client.get_repository("vercel", "next.js")
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub API token. None sends unauthenticated requests.
            base_url: Base URL for GitHub API. Use this to support
                      GitHub Enterprise Server endpoints.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used to stub the API in tests.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._default_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": JSON_MEDIA_TYPE,
            "User-Agent": "first-issue-scout/1.0",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _parse_int_header(
        self,
        headers: httpx.Headers,
        name: str,
    ) -> Optional[int]:
        """Parse an integer header value, None if absent or invalid."""
        value = headers.get(name)
        if value is not None:
            try:
                return int(value)
            except ValueError:
                pass
        return None

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        accept: Optional[str] = None,
    ) -> httpx.Response:
        """Make a single GET request and raise on any non-success status.

        Args:
            path: API path (e.g., /repos/owner/repo).
            params: Optional query parameters.
            accept: Optional Accept header overriding the JSON default.

        Returns:
            The successful HTTP response.

        Raises:
            RepositoryNotFoundError: On 404.
            RateLimitError: On 403 or 429.
            GitHubAPIError: On any other error status or transport failure.
        """
        headers = {"Accept": accept} if accept else None

        try:
            response = await self.client.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(
                "GitHub request failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GitHubAPIError(
                message=f"GitHub request failed: {e}",
                request_url=f"{self.base_url}{path}",
            ) from e

        if response.status_code < 400:
            return response

        error_body = response.text
        request_url = str(response.url)

        if response.status_code == 404:
            logger.info("GitHub resource not found", path=path)
            raise RepositoryNotFoundError(
                message=f"GitHub API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
                request_url=request_url,
            )

        if response.status_code in (403, 429):
            reset_at = self._parse_int_header(response.headers, "x-ratelimit-reset")
            remaining = self._parse_int_header(
                response.headers, "x-ratelimit-remaining"
            )
            logger.warning(
                "GitHub API rate limit exceeded",
                path=path,
                status_code=response.status_code,
                reset_at=reset_at,
                remaining=remaining,
            )
            raise RateLimitError(
                message=f"GitHub API error: {response.status_code}",
                reset_at=reset_at,
                remaining=remaining,
                status_code=response.status_code,
                response_body=error_body,
                request_url=request_url,
            )

        logger.error(
            "GitHub API error",
            status_code=response.status_code,
            path=path,
            response_body=error_body[:500],
        )
        raise GitHubAPIError(
            message=f"GitHub API error: {response.status_code}",
            status_code=response.status_code,
            response_body=error_body,
            request_url=request_url,
        )

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository:
        """Fetch repository metadata.

        Raises:
            GitHubAPIError: If the request fails.
        """
        response = await self._get(f"/repos/{owner}/{repo}")
        return GitHubRepository.model_validate(response.json())

    async def list_open_issues(
        self,
        owner: str,
        repo: str,
        per_page: int = 30,
    ) -> List[GitHubIssue]:
        """Fetch the most recently updated open issues.

        Only the first page is requested. GitHub's issues endpoint also lists
        pull requests; they are returned as-is.

        Raises:
            GitHubAPIError: If the request fails.
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/issues",
            params={"state": "open", "per_page": per_page, "sort": "updated"},
        )
        issues = [GitHubIssue.model_validate(item) for item in response.json()]
        logger.debug(
            "Fetched open issues",
            owner=owner,
            repo=repo,
            count=len(issues),
        )
        return issues

    async def get_readme(self, owner: str, repo: str) -> Optional[str]:
        """Fetch the README as raw text.

        A repository without a README (or any other error status on this
        endpoint) yields None. Transport failures still propagate.

        Raises:
            GitHubAPIError: If the request could not be sent at all.
        """
        try:
            response = await self._get(
                f"/repos/{owner}/{repo}/readme",
                accept=RAW_MEDIA_TYPE,
            )
        except GitHubAPIError as e:
            if e.status_code is None:
                raise
            logger.debug(
                "README unavailable",
                owner=owner,
                repo=repo,
                status_code=e.status_code,
            )
            return None
        return response.text
