"""Repository analysis pipeline.

This module turns a GitHub repository URL into a ranked list of issues for
first-time contributors:
- Parses and validates the repository URL
- Fetches metadata, open issues, and README concurrently
- Extracts the README's Contributing section
- Classifies every issue and records its provenance
"""

from src.scout.analysis.contributing import extract_contributing_section
from src.scout.analysis.errors import (
    AnalysisError,
    AnalysisFailedError,
    InvalidRepositoryURLError,
    RateLimitedError,
    RepositoryUnavailableError,
)
from src.scout.analysis.models import AnalysisResult, EnrichedIssue, RepositorySnapshot
from src.scout.analysis.orchestrator import RepositoryAnalyzer
from src.scout.analysis.url import RepositoryRef, parse_repository_url

__all__ = [
    "AnalysisError",
    "AnalysisFailedError",
    "AnalysisResult",
    "EnrichedIssue",
    "extract_contributing_section",
    "InvalidRepositoryURLError",
    "parse_repository_url",
    "RateLimitedError",
    "RepositoryAnalyzer",
    "RepositoryRef",
    "RepositorySnapshot",
    "RepositoryUnavailableError",
]
