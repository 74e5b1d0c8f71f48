"""FastAPI application entry point for the first-issue scout.

This module provides the HTTP service that analyzes a GitHub repository and
returns its open issues ranked for first-time contributors. It also exposes
liveness and Prometheus metrics endpoints.

Endpoints:
- POST /api/analyze-repo: `{"repoUrl": str}` → `{"repoData", "issues"}`
- GET /health: liveness probe
- GET /metrics: Prometheus metrics
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from src.scout.analysis.errors import AnalysisError, AnalysisFailedError
from src.scout.analysis.orchestrator import RepositoryAnalyzer
from src.scout.classifier.reconciler import AIReconciler
from src.scout.config import ScoutSettings, get_settings
from src.scout.github.client import GitHubClient
from src.scout.logging_config import configure_logging, redact_secret
from src.scout.metrics import ScoutMetrics


logger = structlog.get_logger(__name__)

# Global instances, initialized during lifespan startup
settings: Optional[ScoutSettings] = None
analyzer: Optional[RepositoryAnalyzer] = None
github_client: Optional[GitHubClient] = None
metrics = ScoutMetrics()


def _log_configuration(settings: ScoutSettings) -> None:
    """Log configuration values with secrets redacted."""
    logger.info(
        "Scout configuration",
        github_base_url=settings.github_base_url,
        github_token=redact_secret(settings.github_token),
        completion_base_url=settings.completion_base_url,
        completion_api_key=redact_secret(settings.completion_api_key),
        completion_model=settings.completion_model,
        ai_enabled=settings.ai_enabled,
        ai_issue_limit=settings.ai_issue_limit,
        issues_per_page=settings.issues_per_page,
        request_timeout_seconds=settings.request_timeout_seconds,
        host=settings.host,
        port=settings.port,
    )


def _build_analyzer(cfg: ScoutSettings, gh_client: GitHubClient) -> RepositoryAnalyzer:
    """Wire the analysis dependencies into a RepositoryAnalyzer."""
    return RepositoryAnalyzer(
        github_client=gh_client,
        reconciler=AIReconciler.from_settings(cfg),
        ai_issue_limit=cfg.ai_issue_limit,
        issues_per_page=cfg.issues_per_page,
        metrics=metrics,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown.

    Handles:
    - Configuration loading and validation
    - Logging configuration (with secrets redacted)
    - Dependency wiring for the repository analyzer
    - Closing the GitHub HTTP client on shutdown
    """
    global settings, analyzer, github_client

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    logger.info("Scout starting up")
    _log_configuration(settings)

    github_client = GitHubClient(
        token=settings.github_token,
        base_url=settings.github_base_url,
        timeout=settings.request_timeout_seconds,
    )
    analyzer = _build_analyzer(settings, github_client)

    logger.info("Scout started")

    yield

    logger.info("Scout shutting down")

    if github_client is not None:
        await github_client.close()

    logger.info("Scout shutdown complete")


app = FastAPI(
    title="First Issue Scout",
    description="Find approachable open issues in a GitHub repository",
    version="1.0.0",
    lifespan=lifespan,
)


def get_analyzer() -> Optional[RepositoryAnalyzer]:
    """Dependency returning the analyzer wired at startup, None before it."""
    return analyzer


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@app.post("/api/analyze-repo")
async def analyze_repo(
    request: Request,
    repo_analyzer: Optional[RepositoryAnalyzer] = Depends(get_analyzer),
):
    """Analyze a GitHub repository for first-contribution issues.

    Request body: `{"repoUrl": "https://github.com/<owner>/<repo>"}`.

    Returns:
        200 with `{"repoData": ..., "issues": [...]}`, or `{"error": ...}`
        with 400 (missing or invalid URL), 404 (repository not found or
        private), 429 (GitHub rate limit), 500 (any other failure), or 503
        (called before startup completed).
    """
    if repo_analyzer is None:
        return _error_response(503, "Service not initialized")

    try:
        payload = await request.json()
    except ValueError:
        metrics.record_analysis_failure("invalid_url")
        return _error_response(400, "Request body must be JSON")

    repo_url = payload.get("repoUrl") if isinstance(payload, dict) else None
    if not isinstance(repo_url, str) or not repo_url.strip():
        metrics.record_analysis_failure("invalid_url")
        return _error_response(400, "Repository URL is required")

    start_time = time.time()

    try:
        result = await repo_analyzer.analyze(repo_url)
    except AnalysisError as e:
        metrics.record_analysis_failure(e.metric_label)
        logger.warning(
            "Repository analysis rejected",
            repo_url=repo_url,
            status_code=e.status_code,
            error=e.message,
        )
        return _error_response(e.status_code, e.message)
    except Exception as e:
        metrics.record_analysis_failure("error")
        logger.error(
            "Unexpected error analyzing repository",
            repo_url=repo_url,
            error=str(e),
            exc_info=True,
        )
        return _error_response(500, AnalysisFailedError.default_message)

    metrics.record_analysis_success(time.time() - start_time)
    return result.to_response()


@app.get("/health")
async def health():
    """Liveness probe endpoint.

    Returns:
        dict: Status indicating the application is healthy, and whether
        LLM summaries are enabled.
    """
    return {
        "status": "healthy",
        "ai_enabled": settings.ai_enabled if settings is not None else False,
    }


@app.get("/metrics")
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    return Response(metrics.generate(), media_type=CONTENT_TYPE_LATEST)


def run() -> None:
    """Run the service with uvicorn using the configured host and port."""
    import uvicorn

    run_settings = get_settings()
    uvicorn.run(app, host=run_settings.host, port=run_settings.port)


if __name__ == "__main__":
    run()
