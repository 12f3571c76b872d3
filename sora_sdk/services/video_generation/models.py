"""
Request, job and wire-schema models for video generation.

Caller-facing values are dataclasses; server payloads are parsed with
pydantic so unexpected fields are ignored and missing ones default.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class JobStatus(str, Enum):
    """Status of a video generation job."""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED)


# Server vocabulary -> closed status set
STATUS_MAP = {
    "queued": JobStatus.PENDING,
    "pending": JobStatus.PENDING,
    "preprocessing": JobStatus.RUNNING,
    "processing": JobStatus.RUNNING,
    "running": JobStatus.RUNNING,
    "succeeded": JobStatus.SUCCEEDED,
    "failed": JobStatus.FAILED,
    "cancelled": JobStatus.CANCELLED,
    "canceled": JobStatus.CANCELLED,
}


def parse_job_status(raw: Optional[str]) -> JobStatus:
    """Map a server status string; unrecognized values become UNKNOWN."""
    if not raw:
        return JobStatus.UNKNOWN
    return STATUS_MAP.get(raw.strip().lower(), JobStatus.UNKNOWN)


@dataclass(frozen=True)
class ExplicitDimensions:
    """Exact output size in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class AspectRatioAndQuality:
    """Output size derived from an aspect ratio and a quality preset."""
    aspect_ratio: str = "16:9"
    quality: str = "medium"  # low, medium, high, ultra


Dimensions = Union[ExplicitDimensions, AspectRatioAndQuality]


@dataclass(frozen=True)
class GenerationRequest:
    """Request for video generation."""
    prompt: str
    dimensions: Dimensions = field(default_factory=AspectRatioAndQuality)
    duration_seconds: int = 5

    # Optional generation controls
    frame_rate: Optional[int] = None
    seed: Optional[int] = None
    quality: Optional[str] = None  # standard, high, ultra
    style: Optional[str] = None

    metadata: Optional[dict[str, str]] = None

    @property
    def aspect_ratio(self) -> Optional[str]:
        if isinstance(self.dimensions, AspectRatioAndQuality):
            return self.dimensions.aspect_ratio
        return None


@dataclass
class JobSnapshot:
    """Latest polled state of a job."""
    job_id: str
    status: JobStatus
    raw_status: Optional[str] = None
    result_url: Optional[str] = None

    # Error handling
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    # Timing
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    progress_percentage: Optional[int] = None
    generation_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass
class GenerationOutcome:
    """Result of an end-to-end generate() call."""
    job_id: str
    result_url: str
    local_path: Optional[Path] = None
    width: int = 0
    height: int = 0
    processing_time_seconds: Optional[float] = None


def from_epoch(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


# ============================================================
# Wire schema
# ============================================================

class JobCreationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: Optional[str] = None


class Generation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str


class JobError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    code: Optional[str] = None


class JobStatusResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: Optional[str] = None
    generations: list[Generation] = []
    failure_reason: Optional[str] = None
    error: Optional[JobError] = None
    video_url: Optional[str] = None

    # Unix epoch seconds
    created_at: Optional[float] = None
    updated_at: Optional[float] = None
    finished_at: Optional[float] = None

    progress: Optional[float] = None
    metadata: Optional[dict[str, Any]] = None
