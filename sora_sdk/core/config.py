"""
Configuration management for the Sora SDK.

Centralizes:
- Endpoint, credentials and API version
- HTTP timeout and retry settings
- Job polling defaults
- Prompt enhancement settings

Values default from environment variables; callers may also construct
the dataclasses directly.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass
class SoraConfig:
    """Configuration for the video generation client."""

    endpoint: str = field(default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT", ""))
    api_key: str = field(default_factory=lambda: os.getenv("AZURE_OPENAI_API_KEY", ""))
    deployment_name: str = field(default_factory=lambda: os.getenv("AZURE_OPENAI_DEPLOYMENT", "sora"))
    api_version: str = field(default_factory=lambda: os.getenv("AZURE_OPENAI_API_VERSION", "preview"))

    # Per-request transport settings
    http_timeout: float = field(default_factory=lambda: _env_float("SORA_HTTP_TIMEOUT", 300.0))
    max_retry_attempts: int = field(default_factory=lambda: _env_int("SORA_MAX_RETRY_ATTEMPTS", 3))
    retry_base_delay: float = field(default_factory=lambda: _env_float("SORA_RETRY_BASE_DELAY", 2.0))

    # Job polling
    poll_interval: float = field(default_factory=lambda: _env_float("SORA_POLL_INTERVAL", 5.0))
    max_wait_time: float = field(default_factory=lambda: _env_float("SORA_MAX_WAIT_TIME", 3600.0))

    def __post_init__(self):
        self.endpoint = self.endpoint.rstrip("/")

    @classmethod
    def from_env(cls) -> "SoraConfig":
        """Load configuration from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.endpoint:
            issues.append("endpoint is required (AZURE_OPENAI_ENDPOINT)")
        elif not _is_url(self.endpoint):
            issues.append(f"endpoint is not a valid URL: {self.endpoint}")

        if not self.api_key.strip():
            issues.append("api_key is required (AZURE_OPENAI_API_KEY)")

        if not self.deployment_name.strip():
            issues.append("deployment_name is required")

        if not self.api_version.strip():
            issues.append("api_version is required")

        if self.http_timeout <= 0:
            issues.append("http_timeout must be positive")

        if not 1 <= self.max_retry_attempts <= 10:
            issues.append("max_retry_attempts must be between 1 and 10")

        if self.retry_base_delay <= 0:
            issues.append("retry_base_delay must be positive")

        if self.poll_interval <= 0:
            issues.append("poll_interval must be positive")

        if self.max_wait_time <= 0:
            issues.append("max_wait_time must be positive")

        return issues


@dataclass
class PromptEnhancerConfig:
    """Configuration for the chat-completion model used to enhance prompts."""

    endpoint: str = field(default_factory=lambda: os.getenv(
        "PROMPT_ENHANCER_ENDPOINT", os.getenv("AZURE_OPENAI_ENDPOINT", "")))
    api_key: str = field(default_factory=lambda: os.getenv(
        "PROMPT_ENHANCER_API_KEY", os.getenv("AZURE_OPENAI_API_KEY", "")))
    deployment_name: str = field(default_factory=lambda: os.getenv("PROMPT_ENHANCER_DEPLOYMENT", ""))
    api_version: str = field(default_factory=lambda: os.getenv(
        "PROMPT_ENHANCER_API_VERSION", "2024-02-15-preview"))

    http_timeout: float = 120.0
    max_retry_attempts: int = 3
    retry_base_delay: float = 1.0

    # Completion parameters
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens_per_request: int = 1000

    def __post_init__(self):
        self.endpoint = self.endpoint.rstrip("/")

    @classmethod
    def from_env(cls) -> "PromptEnhancerConfig":
        return cls()

    def validate(self) -> list[str]:
        issues = []

        if not self.endpoint:
            issues.append("endpoint is required (PROMPT_ENHANCER_ENDPOINT)")
        elif not _is_url(self.endpoint):
            issues.append(f"endpoint is not a valid URL: {self.endpoint}")
        if not self.api_key.strip():
            issues.append("api_key is required (PROMPT_ENHANCER_API_KEY)")
        if not self.deployment_name.strip():
            issues.append("deployment_name is required (PROMPT_ENHANCER_DEPLOYMENT)")
        if not self.api_version.strip():
            issues.append("api_version is required")
        if self.http_timeout <= 0:
            issues.append("http_timeout must be positive")
        if not 1 <= self.max_retry_attempts <= 10:
            issues.append("max_retry_attempts must be between 1 and 10")
        if self.retry_base_delay <= 0:
            issues.append("retry_base_delay must be positive")
        if not 0.0 <= self.temperature <= 2.0:
            issues.append("temperature must be between 0.0 and 2.0")
        if not 0.0 <= self.top_p <= 1.0:
            issues.append("top_p must be between 0.0 and 1.0")
        if not 1 <= self.max_tokens_per_request <= 4096:
            issues.append("max_tokens_per_request must be between 1 and 4096")

        return issues


# Global config instance
_config: Optional[SoraConfig] = None


def get_config() -> SoraConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = SoraConfig.from_env()
    return _config


def reload_config():
    """Reload configuration from environment."""
    global _config
    _config = SoraConfig.from_env()
