"""
Pytest configuration and shared fixtures.

HTTP traffic is served by httpx.MockTransport handlers, so no test
touches the network.
"""

import json
from typing import Callable, Optional

import httpx
import pytest

from sora_sdk.core.config import PromptEnhancerConfig, SoraConfig
from sora_sdk.services.video_generation import SoraClient

ENDPOINT = "https://example.openai.azure.com"


def json_response(status_code: int, payload: dict, headers: Optional[dict] = None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


class RecordingHandler:
    """MockTransport handler that replays queued responses and records requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        # The last response repeats once the queue is drained to one
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def sora_config() -> SoraConfig:
    return SoraConfig(
        endpoint=ENDPOINT,
        api_key="test-key",
        deployment_name="sora",
        api_version="preview",
        http_timeout=5.0,
        max_retry_attempts=3,
        retry_base_delay=0.001,
        poll_interval=0.01,
        max_wait_time=5.0,
    )


@pytest.fixture
def enhancer_config() -> PromptEnhancerConfig:
    return PromptEnhancerConfig(
        endpoint=ENDPOINT,
        api_key="test-key",
        deployment_name="gpt-4o",
        api_version="2024-02-15-preview",
        retry_base_delay=0.001,
    )


@pytest.fixture
def make_client(sora_config) -> Callable[..., SoraClient]:
    """Build a SoraClient whose transport is the given handler."""

    def factory(handler, **kwargs) -> SoraClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return SoraClient(sora_config, http_client=http_client, **kwargs)

    return factory
