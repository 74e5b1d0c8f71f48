"""User-facing analysis errors.

Each error carries the HTTP status the service answers with and the message
shown to the user. Upstream failures are mapped onto these by the
orchestrator; none of them is retried.
"""


class AnalysisError(Exception):
    """Base class for errors reported to the caller of an analysis.

    Attributes:
        message: Human-readable error shown to the user.
        status_code: HTTP status returned by the service.
        metric_label: Result label recorded in the analyses counter.
    """

    status_code = 500
    metric_label = "error"
    default_message = "Failed to analyze repository. Please try again."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRepositoryURLError(AnalysisError):
    """The input is not a GitHub repository URL. No request was made."""

    status_code = 400
    metric_label = "invalid_url"
    default_message = "Invalid GitHub repository URL"


class RepositoryUnavailableError(AnalysisError):
    """GitHub reported the repository as missing (or private)."""

    status_code = 404
    metric_label = "not_found"
    default_message = "Repository not found or is private"


class RateLimitedError(AnalysisError):
    """GitHub refused the request because of rate limiting."""

    status_code = 429
    metric_label = "rate_limited"
    default_message = "Rate limit exceeded. Please try again later."


class AnalysisFailedError(AnalysisError):
    """Any other upstream or network failure."""
