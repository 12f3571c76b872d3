"""
Prompt Enhancer - richer video prompts via Azure OpenAI chat completions

Usage:
    async with PromptEnhancer(PromptEnhancerConfig(deployment_name="gpt-4o")) as enhancer:
        suggestions = await enhancer.suggest_prompts("A forest scene", max_suggestions=3)
"""

import logging
import re
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from sora_sdk.core.classifier import raise_for_response, transport_errors
from sora_sdk.core.config import PromptEnhancerConfig
from sora_sdk.core.errors import ProtocolViolation, ValidationFailed
from sora_sdk.core.retry import RetryConfig, RetryObserver, RetryPolicy

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10
TOKENS_PER_SUGGESTION = 150
MIN_SUGGESTION_LENGTH = 10

SYSTEM_PROMPT = """You are an AI assistant specialized in enhancing video generation prompts.
Your task is to improve prompts by adding specific details about:
- Visual elements and composition
- Lighting and atmosphere
- Movement and dynamics
- Style and artistic direction
- Technical specifications

Provide clear, concise suggestions that maintain the original intent while adding helpful details."""

USER_PROMPT_TEMPLATE = """Enhance the following video generation prompt by providing {count} improved versions.
Each suggestion should be on a new line and be complete, self-contained, and more detailed than the original.

Original prompt: "{prompt}"

Enhanced prompts:"""

# "1." / "2)" / "-" / "*" / "•" list markers
_LIST_MARKER = re.compile(r"^(\d+[.)]|-|\*|•)\s*")


# ============================================================
# Wire models
# ============================================================

class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: Optional[str] = None


class Choice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int = 0
    message: Optional[ChatMessage] = None
    finish_reason: Optional[str] = None


class CompletionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    choices: list[Choice] = []


def parse_suggestions(text: str, max_suggestions: int) -> list[str]:
    """Split completion text into cleaned, non-trivial suggestion lines."""
    if not text or not text.strip():
        return []

    suggestions = []
    for line in text.splitlines():
        cleaned = _LIST_MARKER.sub("", line.strip()).strip()
        if len(cleaned) > MIN_SUGGESTION_LENGTH:
            suggestions.append(cleaned)
        if len(suggestions) == max_suggestions:
            break
    return suggestions


class PromptEnhancer:
    """Suggests improved video prompts using a chat-completion deployment."""

    def __init__(
        self,
        config: Optional[PromptEnhancerConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        on_retry: Optional[RetryObserver] = None,
    ):
        self.config = config or PromptEnhancerConfig.from_env()
        issues = self.config.validate()
        if issues:
            raise ValueError(f"Invalid prompt enhancer configuration: {'; '.join(issues)}")

        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._retry = RetryPolicy(
            RetryConfig(
                max_attempts=self.config.max_retry_attempts,
                base_delay=self.config.retry_base_delay,
            ),
            on_retry=on_retry,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.http_timeout)
        return self._http_client

    async def close(self):
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "PromptEnhancer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def _completions_url(self) -> str:
        return (
            f"{self.config.endpoint}/openai/deployments/{self.config.deployment_name}"
            f"/chat/completions?api-version={self.config.api_version}"
        )

    def build_payload(self, partial_prompt: str, max_suggestions: int) -> dict[str, Any]:
        return {
            "model": self.config.deployment_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": USER_PROMPT_TEMPLATE.format(count=max_suggestions, prompt=partial_prompt),
                },
            ],
            "max_tokens": min(TOKENS_PER_SUGGESTION * max_suggestions, self.config.max_tokens_per_request),
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
            "n": 1,
            "stop": ["\n\n"],
        }

    async def suggest_prompts(self, partial_prompt: str, max_suggestions: int = 3) -> list[str]:
        """
        Suggest improved versions of a prompt.

        Args:
            partial_prompt: The prompt to enhance
            max_suggestions: Number of suggestions wanted (1-10)

        Returns:
            Up to max_suggestions suggestions; empty for a blank prompt
        """
        if not partial_prompt or not partial_prompt.strip():
            logger.debug("Empty prompt provided, returning empty suggestions")
            return []

        if not 1 <= max_suggestions <= MAX_SUGGESTIONS:
            raise ValidationFailed(
                f"max_suggestions must be between 1 and {MAX_SUGGESTIONS}",
                field_errors={"max_suggestions": [f"must be between 1 and {MAX_SUGGESTIONS}"]},
            )

        logger.info(
            f"Generating {max_suggestions} prompt suggestions for: {len(partial_prompt)} chars"
        )
        payload = self.build_payload(partial_prompt, max_suggestions)

        async def attempt() -> httpx.Response:
            client = await self._get_client()
            with transport_errors(self.config.http_timeout):
                response = await client.post(
                    self._completions_url(),
                    json=payload,
                    headers={"api-key": self.config.api_key},
                    timeout=self.config.http_timeout,
                )
            raise_for_response(response)
            return response

        response = await self._retry.run(attempt, description="prompt enhancement")

        try:
            completion = CompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolViolation(f"Invalid completion response: {e.error_count()} error(s)") from e

        if not completion.choices:
            logger.warning("No suggestions returned from API")
            return []

        message = completion.choices[0].message
        suggestions = parse_suggestions(message.content if message else "", max_suggestions)
        logger.info(f"Generated {len(suggestions)} prompt suggestions successfully")
        return suggestions
