"""
Sora SDK Core Components

Foundational pieces shared by the video and prompt-enhancement clients:
- Configuration
- Error taxonomy and transport-outcome classifier
- Retry policy for transient request failures
"""

from .classifier import classify_exception, classify_response, transport_errors
from .config import PromptEnhancerConfig, SoraConfig, get_config
from .errors import (
    AuthenticationFailed,
    ErrorKind,
    JobCancelled,
    JobFailed,
    NetworkError,
    ProtocolViolation,
    RateLimited,
    RequestFailed,
    ResourceNotFound,
    SoraError,
    TimedOut,
    ValidationFailed,
)
from .retry import RetryConfig, RetryPolicy, is_transient

__all__ = [
    "AuthenticationFailed",
    "ErrorKind",
    "JobCancelled",
    "JobFailed",
    "NetworkError",
    "PromptEnhancerConfig",
    "ProtocolViolation",
    "RateLimited",
    "RequestFailed",
    "ResourceNotFound",
    "RetryConfig",
    "RetryPolicy",
    "SoraConfig",
    "SoraError",
    "TimedOut",
    "ValidationFailed",
    "classify_exception",
    "classify_response",
    "get_config",
    "is_transient",
    "transport_errors",
]
