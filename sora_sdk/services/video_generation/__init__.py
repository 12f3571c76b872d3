"""
Video Generation Service

Job lifecycle for the Azure OpenAI video generation API:
submit, poll, wait for completion and download, with local request
validation and aspect-ratio based dimension presets.
"""

from .client import SoraClient
from .dimensions import calculate_from_aspect_ratio, get_common_dimensions
from .models import (
    AspectRatioAndQuality,
    ExplicitDimensions,
    GenerationOutcome,
    GenerationRequest,
    JobSnapshot,
    JobStatus,
    parse_job_status,
)
from .validation import validate_request

__all__ = [
    "AspectRatioAndQuality",
    "ExplicitDimensions",
    "GenerationOutcome",
    "GenerationRequest",
    "JobSnapshot",
    "JobStatus",
    "SoraClient",
    "calculate_from_aspect_ratio",
    "get_common_dimensions",
    "parse_job_status",
    "validate_request",
]
