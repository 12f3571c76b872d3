"""
Maps transport outcomes onto the SoraError taxonomy.

Two entry points:
- classify_response(): a completed HTTP exchange with a non-2xx status
- classify_exception(): an httpx exception raised before a response arrived

The mapping is total: anything that isn't a 2xx response comes out as
exactly one SoraError.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterator, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ValidationError

from .errors import (
    AuthenticationFailed,
    NetworkError,
    RateLimited,
    RequestFailed,
    ResourceNotFound,
    SoraError,
    TimedOut,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    message: str = ""
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Azure OpenAI error envelope: {"error": {"message": ..., "code": ...}}"""
    error: ErrorDetail


def parse_error_body(body: Union[bytes, str, None]) -> tuple[str, Optional[str]]:
    """
    Best-effort extraction of (message, code) from an error body.

    Falls back to the raw body text when it isn't the expected JSON shape.
    """
    if body is None:
        return "", None
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    try:
        parsed = ErrorResponse.model_validate_json(text)
    except ValidationError:
        return text, None
    return parsed.error.message or text, parsed.error.code


def parse_retry_after(
    headers: Optional[Mapping[str, str]],
    now: Optional[datetime] = None,
) -> Optional[float]:
    """
    Read a Retry-After header as seconds.

    Accepts either a delta in seconds or an HTTP date. Dates in the past
    yield 0.0. Unparseable values yield None.
    """
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    value = value.strip()

    try:
        return max(0.0, float(value))
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable Retry-After header: {value!r}")
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (retry_at - now).total_seconds())


def classify_response(
    status_code: int,
    body: Union[bytes, str, None] = None,
    headers: Optional[Mapping[str, str]] = None,
    resource_id: Optional[str] = None,
) -> SoraError:
    """Build the error for a non-2xx response. Does not raise."""
    if status_code in (401, 403):
        if status_code == 401:
            return AuthenticationFailed(
                "Authentication failed. Please check your API key.", status_code=401
            )
        return AuthenticationFailed(
            "Access forbidden. Please check your permissions.", status_code=403
        )

    message, code = parse_error_body(body)

    if status_code == 404:
        target = resource_id or "resource"
        return ResourceNotFound(message or f"Not found: {target}", resource_id=resource_id)

    if status_code == 429:
        return RateLimited("Rate limit exceeded", retry_after=parse_retry_after(headers))

    if status_code == 400:
        return ValidationFailed(message or "Request rejected by server", status_code=400)

    return RequestFailed(
        f"Request failed: {message}" if message else f"Request failed with status {status_code}",
        status_code=status_code,
        error_code=code,
    )


def classify_exception(exc: Exception, timeout: float) -> SoraError:
    """Map an httpx transport exception onto the taxonomy."""
    if isinstance(exc, SoraError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return TimedOut(f"Request timed out after {timeout}s", duration=timeout)
    if isinstance(exc, httpx.RequestError):
        return NetworkError(f"Network error occurred: {type(exc).__name__}: {exc}", cause=exc)
    return RequestFailed(f"Unexpected transport error: {type(exc).__name__}: {exc}")


@contextmanager
def transport_errors(timeout: float) -> Iterator[None]:
    """Re-raise httpx transport exceptions as SoraError."""
    try:
        yield
    except httpx.RequestError as e:
        error = classify_exception(e, timeout)
        logger.error(f"HTTP request failed: {error}")
        raise error from e


def raise_for_response(response: httpx.Response, resource_id: Optional[str] = None) -> None:
    """Raise the classified error if the (already read) response is non-2xx."""
    if response.is_success:
        return
    logger.error(f"Request failed with status {response.status_code}: {response.text[:500]}")
    raise classify_response(
        response.status_code,
        response.content,
        response.headers,
        resource_id=resource_id,
    )
