"""
Error taxonomy for the Sora client.

Every public operation either returns a value or raises exactly one
SoraError subclass. Callers can branch on the exception type or on
the `kind` discriminator:

    try:
        url = await client.wait_for_completion(job_id)
    except SoraError as e:
        if e.kind is ErrorKind.RATE_LIMITED:
            ...

Cancellation is not part of the taxonomy; it surfaces as
asyncio.CancelledError.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Discriminator for SoraError subclasses."""
    VALIDATION_FAILED = "validation_failed"
    AUTHENTICATION_FAILED = "authentication_failed"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TIMED_OUT = "timed_out"
    NETWORK_ERROR = "network_error"
    PROTOCOL_VIOLATION = "protocol_violation"
    JOB_FAILED = "job_failed"
    JOB_CANCELLED = "job_cancelled"
    GENERIC = "generic"


class SoraError(Exception):
    """Base class for all errors raised by the SDK."""

    kind: ErrorKind = ErrorKind.GENERIC
    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, error_code={self.error_code!r}, "
            f"status_code={self.status_code!r})"
        )


class ValidationFailed(SoraError):
    """Request rejected locally or by the server (HTTP 400)."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        field_errors: Optional[dict[str, list[str]]] = None,
        status_code: Optional[int] = None,
    ):
        self.field_errors = field_errors or {}
        super().__init__(message, error_code="VALIDATION_ERROR", status_code=status_code)

    def __str__(self) -> str:
        if not self.field_errors:
            return self.message
        details = "; ".join(
            f"{name}: {', '.join(errors)}" for name, errors in self.field_errors.items()
        )
        return f"{self.message} ({details})"


class AuthenticationFailed(SoraError):
    kind = ErrorKind.AUTHENTICATION_FAILED

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message, error_code="AUTH_FAILED", status_code=status_code)


class ResourceNotFound(SoraError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, resource_id: Optional[str] = None):
        self.resource_id = resource_id
        super().__init__(message, error_code="NOT_FOUND", status_code=404)


class RateLimited(SoraError):
    """HTTP 429. `retry_after` is in seconds when the server sent a hint."""

    kind = ErrorKind.RATE_LIMITED
    retryable = True

    def __init__(self, message: str, retry_after: Optional[float] = None):
        self.retry_after = retry_after
        super().__init__(message, error_code="RATE_LIMIT_EXCEEDED", status_code=429)


class TimedOut(SoraError):
    """A request or a wait exceeded `duration` seconds."""

    kind = ErrorKind.TIMED_OUT

    def __init__(self, message: str, duration: float):
        self.duration = duration
        super().__init__(message, error_code="TIMEOUT")


class NetworkError(SoraError):
    kind = ErrorKind.NETWORK_ERROR
    retryable = True

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message, error_code="NETWORK_ERROR")


class ProtocolViolation(SoraError):
    """Response contradicts the documented wire contract."""

    kind = ErrorKind.PROTOCOL_VIOLATION

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail, error_code="PROTOCOL_VIOLATION")


class JobFailed(SoraError):
    kind = ErrorKind.JOB_FAILED

    def __init__(self, message: str, code: Optional[str] = None, job_id: Optional[str] = None):
        self.code = code or "UNKNOWN"
        self.job_id = job_id
        super().__init__(f"Job failed: {message}", error_code=self.code)


class JobCancelled(SoraError):
    kind = ErrorKind.JOB_CANCELLED

    def __init__(self, job_id: Optional[str] = None):
        self.job_id = job_id
        super().__init__("Job was cancelled", error_code="CANCELLED")


class RequestFailed(SoraError):
    """Any other non-2xx response, or a wrapped failure with no better class."""

    kind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, error_code=error_code, status_code=status_code)
        # 408 and 5xx are transient on the server side
        self.retryable = status_code is not None and (status_code == 408 or status_code >= 500)
