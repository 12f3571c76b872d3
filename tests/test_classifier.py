"""
Tests for transport outcome -> error taxonomy mapping.

Run with:
    python -m pytest tests/test_classifier.py -v
"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from sora_sdk.core.classifier import (
    classify_exception,
    classify_response,
    parse_error_body,
    parse_retry_after,
    transport_errors,
)
from sora_sdk.core.errors import (
    AuthenticationFailed,
    ErrorKind,
    NetworkError,
    RateLimited,
    RequestFailed,
    ResourceNotFound,
    TimedOut,
    ValidationFailed,
)

ERROR_BODY = json.dumps({"error": {"message": "Prompt violates policy", "code": "content_filter"}})


class TestClassifyResponse:
    """Status code mapping."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures_ignore_body(self, status):
        error = classify_response(status, ERROR_BODY)
        assert isinstance(error, AuthenticationFailed)
        assert error.kind is ErrorKind.AUTHENTICATION_FAILED
        assert error.status_code == status
        assert "Prompt violates policy" not in error.message

    def test_not_found_carries_resource_id(self):
        error = classify_response(404, "", resource_id="task_123")
        assert isinstance(error, ResourceNotFound)
        assert error.resource_id == "task_123"
        assert "task_123" in error.message

    def test_rate_limited_with_delta(self):
        error = classify_response(429, "", headers={"Retry-After": "30"})
        assert isinstance(error, RateLimited)
        assert error.retry_after == 30.0
        assert error.retryable

    def test_rate_limited_without_hint(self):
        error = classify_response(429, "")
        assert isinstance(error, RateLimited)
        assert error.retry_after is None

    def test_bad_request_carries_server_message(self):
        error = classify_response(400, ERROR_BODY)
        assert isinstance(error, ValidationFailed)
        assert error.message == "Prompt violates policy"
        assert error.status_code == 400

    def test_other_status_parses_json_error(self):
        error = classify_response(409, ERROR_BODY)
        assert isinstance(error, RequestFailed)
        assert error.kind is ErrorKind.GENERIC
        assert error.status_code == 409
        assert error.error_code == "content_filter"
        assert "Prompt violates policy" in error.message
        assert not error.retryable

    def test_other_status_falls_back_to_raw_text(self):
        error = classify_response(502, b"<html>Bad Gateway</html>")
        assert isinstance(error, RequestFailed)
        assert "<html>Bad Gateway</html>" in error.message
        assert error.retryable

    def test_empty_body(self):
        error = classify_response(418, None)
        assert error.message == "Request failed with status 418"


class TestParseHelpers:

    def test_parse_error_body_unexpected_json(self):
        assert parse_error_body('{"detail": "nope"}') == ('{"detail": "nope"}', None)

    def test_retry_after_http_date(self):
        now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        headers = {"Retry-After": "Wed, 01 Jan 2025 12:00:45 GMT"}
        assert parse_retry_after(headers, now=now) == 45.0

    def test_retry_after_past_date_is_zero(self):
        now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        headers = {"Retry-After": "Wed, 01 Jan 2025 11:00:00 GMT"}
        assert parse_retry_after(headers, now=now) == 0.0

    def test_retry_after_garbage(self):
        assert parse_retry_after({"Retry-After": "soon"}) is None

    def test_retry_after_httpx_headers(self):
        headers = httpx.Headers({"retry-after": "5"})
        assert parse_retry_after(headers) == 5.0


class TestClassifyException:

    def test_timeout(self):
        error = classify_exception(httpx.ReadTimeout("timed out"), timeout=30.0)
        assert isinstance(error, TimedOut)
        assert error.duration == 30.0
        assert not error.retryable

    def test_network_error_wraps_cause(self):
        cause = httpx.ConnectError("connection refused")
        error = classify_exception(cause, timeout=30.0)
        assert isinstance(error, NetworkError)
        assert error.cause is cause
        assert error.retryable

    def test_transport_errors_context_manager(self):
        with pytest.raises(NetworkError) as exc_info:
            with transport_errors(10.0):
                raise httpx.ConnectError("boom")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
