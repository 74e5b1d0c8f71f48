"""Scout configuration using pydantic-settings.

This module defines the ScoutSettings class that reads configuration from
environment variables with the SCOUT_ prefix. Both credentials are optional:
without a GitHub token the service runs with unauthenticated rate limits, and
without a completion API key every issue takes the deterministic
classification path. Neither condition prevents startup.

The two credentials are also read from their conventional variable names
(GITHUB_TOKEN and GROQ_API_KEY) so existing deployments keep working.
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScoutSettings(BaseSettings):
    """Scout service configuration from environment variables.

    All environment variables are prefixed with SCOUT_ (e.g., SCOUT_PORT).

    Optional credentials:
    - github_token: GitHub API token (SCOUT_GITHUB_TOKEN or GITHUB_TOKEN)
    - completion_api_key: Key for the OpenAI-compatible completion service
      (SCOUT_COMPLETION_API_KEY or GROQ_API_KEY)
    """

    model_config = SettingsConfigDict(
        env_prefix="SCOUT_",
        case_sensitive=False,
        populate_by_name=True,
    )

    # -------------------------------------------------------------------------
    # GitHub Configuration
    # -------------------------------------------------------------------------
    # Token for GitHub REST API requests; absent means unauthenticated access
    github_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCOUT_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )

    # Base URL for GitHub API (supports GitHub Enterprise)
    github_base_url: str = "https://api.github.com"

    # Number of open issues fetched per analysis
    issues_per_page: int = 30

    # -------------------------------------------------------------------------
    # Completion Service Configuration
    # -------------------------------------------------------------------------
    # API key for the completion service; absent disables LLM summaries
    completion_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCOUT_COMPLETION_API_KEY", "GROQ_API_KEY"),
    )

    # Base URL of the OpenAI-compatible completion endpoint
    completion_base_url: str = "https://api.groq.com/openai/v1"

    # Model name for summaries
    completion_model: str = "llama3-8b-8192"

    # Upper bound on generated tokens per summary
    completion_max_tokens: int = 200

    # Sampling temperature for summaries
    completion_temperature: float = 0.7

    # Number of leading issues summarized by the completion service
    ai_issue_limit: int = 5

    # -------------------------------------------------------------------------
    # HTTP Configuration
    # -------------------------------------------------------------------------
    # Timeout in seconds for outbound requests
    request_timeout_seconds: float = 30.0

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    host: str = "0.0.0.0"

    port: int = 8080

    log_level: str = "INFO"

    # Render logs as JSON lines (False renders human-readable console output)
    log_json: bool = True

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("github_token", "completion_api_key")
    @classmethod
    def normalize_credential(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank credentials as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("github_base_url", "completion_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that a base URL is an http(s) URL."""
        if not v or not v.strip():
            raise ValueError("base URL cannot be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("issues_per_page")
    @classmethod
    def validate_issues_per_page(cls, v: int) -> int:
        """Validate the page size against GitHub's limits."""
        if not 1 <= v <= 100:
            raise ValueError("issues_per_page must be between 1 and 100")
        return v

    @field_validator("ai_issue_limit")
    @classmethod
    def validate_ai_issue_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ai_issue_limit cannot be negative")
        return v

    @field_validator("completion_max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v < 1:
            raise ValueError("completion_max_tokens must be at least 1")
        return v

    @field_validator("completion_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("completion_temperature must be between 0.0 and 2.0")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def ai_enabled(self) -> bool:
        """Whether LLM summaries are available."""
        return self.completion_api_key is not None


def get_settings() -> ScoutSettings:
    """Create and return a ScoutSettings instance.

    Reads configuration from environment variables. Missing credentials are
    not an error; invalid values (e.g., a malformed base URL) are.

    Returns:
        ScoutSettings: Configured settings instance.

    Raises:
        pydantic.ValidationError: If a configured value is invalid.
    """
    return ScoutSettings()
