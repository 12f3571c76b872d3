"""
Sora SDK

Async client for Azure OpenAI video generation:

    from sora_sdk import SoraClient, GenerationRequest, AspectRatioAndQuality

    async with SoraClient() as client:
        job_id = await client.submit(GenerationRequest(
            prompt="A futuristic city at night with flying cars",
            dimensions=AspectRatioAndQuality("16:9", "high"),
            duration_seconds=15,
        ))
        url = await client.wait_for_completion(job_id)
        await client.download(url, "city.mp4")
"""

from .core import (
    AuthenticationFailed,
    ErrorKind,
    JobCancelled,
    JobFailed,
    NetworkError,
    PromptEnhancerConfig,
    ProtocolViolation,
    RateLimited,
    RequestFailed,
    ResourceNotFound,
    RetryConfig,
    RetryPolicy,
    SoraConfig,
    SoraError,
    TimedOut,
    ValidationFailed,
)
from .services.prompt_enhancement import PromptEnhancer
from .services.video_generation import (
    AspectRatioAndQuality,
    ExplicitDimensions,
    GenerationOutcome,
    GenerationRequest,
    JobSnapshot,
    JobStatus,
    SoraClient,
    calculate_from_aspect_ratio,
    get_common_dimensions,
)

__version__ = "1.0.0"

__all__ = [
    "AspectRatioAndQuality",
    "AuthenticationFailed",
    "ErrorKind",
    "ExplicitDimensions",
    "GenerationOutcome",
    "GenerationRequest",
    "JobCancelled",
    "JobFailed",
    "JobSnapshot",
    "JobStatus",
    "NetworkError",
    "PromptEnhancer",
    "PromptEnhancerConfig",
    "ProtocolViolation",
    "RateLimited",
    "RequestFailed",
    "ResourceNotFound",
    "RetryConfig",
    "RetryPolicy",
    "SoraClient",
    "SoraConfig",
    "SoraError",
    "TimedOut",
    "ValidationFailed",
    "calculate_from_aspect_ratio",
    "get_common_dimensions",
]
