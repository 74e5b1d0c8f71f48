"""Prometheus metrics for the scout service.

Metrics Defined:
- scout_analyses_total: Counter of analysis requests by result
- scout_analysis_duration_seconds: Histogram of successful analysis time
- scout_issue_classifications_total: Counter of classified issues by source

Metrics are exposed at the `/metrics` endpoint in Prometheus format.
"""

from typing import Optional

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


# Analyses complete in a few seconds at most; the tail covers slow upstreams
DEFAULT_DURATION_BUCKETS = (0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0)

ANALYSIS_RESULTS = (
    "success",
    "invalid_url",
    "not_found",
    "rate_limited",
    "error",
)


class ScoutMetrics:
    """Container for all scout Prometheus metrics.

    Supports a custom registry so tests can create isolated instances.

    Attributes:
        registry: The Prometheus registry for these metrics.
        analyses_total: Counter for analysis requests, labelled by result.
        analysis_duration_seconds: Histogram for successful analysis time.
        issue_classifications_total: Counter for issues, labelled by source
            ("ai" or "heuristic").
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        self.analyses_total = Counter(
            "scout_analyses_total",
            "Total number of repository analysis requests",
            labelnames=["result"],
            registry=self.registry,
        )

        self.analysis_duration_seconds = Histogram(
            "scout_analysis_duration_seconds",
            "Time spent analyzing a repository",
            buckets=DEFAULT_DURATION_BUCKETS,
            registry=self.registry,
        )

        self.issue_classifications_total = Counter(
            "scout_issue_classifications_total",
            "Total number of classified issues by summary source",
            labelnames=["source"],
            registry=self.registry,
        )

    def record_analysis_success(self, duration: float) -> None:
        """Record a successful analysis and its duration."""
        self.analyses_total.labels(result="success").inc()
        self.analysis_duration_seconds.observe(duration)

    def record_analysis_failure(self, result: str) -> None:
        """Record a failed analysis under the given result label."""
        if result not in ANALYSIS_RESULTS:
            result = "error"
        self.analyses_total.labels(result=result).inc()

    def record_classification(self, ai: bool) -> None:
        """Record one classified issue by provenance."""
        source = "ai" if ai else "heuristic"
        self.issue_classifications_total.labels(source=source).inc()

    def generate(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)
