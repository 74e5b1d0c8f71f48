"""LLM summary reconciliation for GitHub issues.

This module implements the AIReconciler that asks an OpenAI-compatible chat
completion endpoint (Groq by default) for a contributor-facing summary and a
rough time estimate, then merges that free text with the keyword classifier.

The completion output is untrusted prose. It may only supply:
- The summary
- The time estimate, when a duration can be found in the text

Difficulty and suggested files always come from the keyword classifier. Any
failure of the completion call falls back to the keyword classifier for that
issue alone and is never raised to the caller.

The reconciler uses LangChain's ChatOpenAI client for inference.
"""

import re
from typing import Optional

import structlog
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from openai import APIStatusError

from src.scout.classifier.keywords import classify, truncate_summary
from src.scout.classifier.models import (
    ClassificationResult,
    ReconciledClassification,
)
from src.scout.config import ScoutSettings
from src.scout.github.models import GitHubIssue


logger = structlog.get_logger(__name__)


SUMMARY_SYSTEM_PROMPT = "You are a helpful assistant for open source contributors."

DURATION_PATTERN = re.compile(
    r"(\d+\s*-?\s*\d*\+?\s*hours?|<\s*\d+\s*hour)",
    re.IGNORECASE,
)

PREAMBLE_PATTERN = re.compile(r"^here is a summary[^:]*:\s*", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")


def build_summary_prompt(title: str, body: Optional[str]) -> str:
    """Build the single-turn user prompt for an issue summary.

    Args:
        title: The issue title.
        body: The issue body, None when absent.

    Returns:
        Prompt asking for a summary followed by a time estimate.
    """
    return (
        "Summarize the following GitHub issue for a new contributor. "
        "Only return the summary, do not preface with any explanation. "
        "Then estimate the time to complete (in hours, e.g. '<1 hour', "
        "'1-3 hours', '3+ hours').\n\n"
        f"Title: {title}\n\n"
        f"Body: {body or ''}"
    )


def extract_duration(text: str) -> tuple[Optional[str], str]:
    """Split the first duration mention out of completion text.

    Args:
        text: Raw completion text.

    Returns:
        Tuple of (duration with whitespace collapsed, remaining text). The
        duration is None and the text is returned unchanged when no
        duration is found.
    """
    match = DURATION_PATTERN.search(text)
    if match is None:
        return None, text

    duration = _WHITESPACE.sub(" ", match.group(0)).strip()
    remainder = text.replace(match.group(0), "", 1)
    remainder = _WHITESPACE.sub(" ", remainder, count=1).strip()
    return duration, remainder


def strip_preamble(text: str) -> str:
    """Remove a leading "Here is a summary ...:" preamble."""
    return PREAMBLE_PATTERN.sub("", text.strip(), count=1).strip()


def merge_completion(issue: GitHubIssue, completion_text: str) -> ClassificationResult:
    """Merge completion text with the keyword classification of an issue.

    The completion text can only affect the summary and the time estimate.
    When it contains no duration, the classifier's estimate is kept; when
    nothing is left of it after parsing, the classifier's summary is kept.

    Args:
        issue: The issue that was summarized.
        completion_text: Raw text returned by the completion service.

    Returns:
        ClassificationResult with the LLM summary and structural fields
        from the keyword classifier.
    """
    fallback = classify(issue)

    duration, remainder = extract_duration(completion_text)
    summary = strip_preamble(remainder)

    return ClassificationResult(
        summary=truncate_summary(summary) if summary else fallback.summary,
        difficulty=fallback.difficulty,
        suggested_files=fallback.suggested_files,
        estimated_time=duration or fallback.estimated_time,
    )


class AIReconciler:
    """Summarizes issues with a completion service, falling back to keywords.

    Without an API key the reconciler never makes a network call and every
    issue is classified deterministically. This is an expected degraded
    mode, not an error.

    Attributes:
        api_key: Completion service key, None to disable LLM summaries.
        base_url: URL of the OpenAI-compatible endpoint.
        model_name: Name of the model to use for inference.
        max_tokens: Upper bound on generated tokens.
        temperature: Sampling temperature for the LLM.
        timeout: Request timeout in seconds.

    Example:
        >>> reconciler = AIReconciler(api_key="gsk_xxx")
        >>> reconciled = await reconciler.reconcile(issue)
        >>> reconciled.ai
        True
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://api.groq.com/openai/v1",
        model_name: str = "llama3-8b-8192",
        max_tokens: int = 200,
        temperature: float = 0.7,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._llm: Optional[ChatOpenAI] = None

        if not self.enabled:
            logger.warning(
                "Completion API key not configured, using keyword classification"
            )

    @classmethod
    def from_settings(cls, settings: ScoutSettings) -> "AIReconciler":
        """Create a reconciler from the service settings."""
        return cls(
            api_key=settings.completion_api_key,
            base_url=settings.completion_base_url,
            model_name=settings.completion_model,
            max_tokens=settings.completion_max_tokens,
            temperature=settings.completion_temperature,
            timeout=settings.request_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def llm(self) -> ChatOpenAI:
        """Get the LLM client, creating it if necessary."""
        if self._llm is None:
            self._llm = ChatOpenAI(
                base_url=self.base_url,
                model=self.model_name,
                api_key=self.api_key,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._llm

    async def reconcile(self, issue: GitHubIssue) -> ReconciledClassification:
        """Classify an issue, using the completion service for the summary.

        Args:
            issue: The issue to classify.

        Returns:
            ReconciledClassification with ai=True when the completion service
            supplied the summary, ai=False when the keyword classifier was
            used for the whole result.
        """
        if not self.enabled:
            return ReconciledClassification(result=classify(issue), ai=False)

        try:
            completion_text = await self._complete(issue)
            result = merge_completion(issue, completion_text)
        except APIStatusError as e:
            logger.error(
                "Completion service returned an error status",
                status_code=e.status_code,
                issue_number=issue.number,
                response_body=str(e.body)[:500] if e.body is not None else None,
            )
            return ReconciledClassification(result=classify(issue), ai=False)
        except Exception as e:
            logger.error(
                "Issue summarization failed",
                error=str(e),
                error_type=type(e).__name__,
                issue_number=issue.number,
            )
            return ReconciledClassification(result=classify(issue), ai=False)

        logger.debug(
            "Issue summarized",
            issue_number=issue.number,
            difficulty=result.difficulty.value,
            estimated_time=result.estimated_time,
        )
        return ReconciledClassification(result=result, ai=True)

    async def _complete(self, issue: GitHubIssue) -> str:
        """Request a summary for one issue.

        Raises:
            APIStatusError: If the service answers with an error status.
            ValueError: If the response carries no text.
        """
        messages = [
            SystemMessage(content=SUMMARY_SYSTEM_PROMPT),
            HumanMessage(content=build_summary_prompt(issue.title, issue.body)),
        ]

        response = await self.llm.ainvoke(messages)
        content = response.content

        if not isinstance(content, str):
            raise ValueError(f"Unexpected response type: {type(content)}")
        if not content.strip():
            raise ValueError("Empty completion")

        return content
