"""
Sora Video Generation Client

Job lifecycle against the Azure OpenAI video generation API:
- submit: validate locally, then create a job
- poll: fetch one status snapshot
- wait_for_completion: poll until a terminal status or the deadline
- download: stream the generated video to disk

Every HTTP call goes through the retry policy and the error classifier,
so callers only ever see SoraError subclasses (or asyncio.CancelledError).
"""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union

import aiofiles
import httpx
from pydantic import ValidationError

from sora_sdk.core.classifier import raise_for_response, transport_errors
from sora_sdk.core.config import SoraConfig, get_config
from sora_sdk.core.errors import (
    JobCancelled,
    JobFailed,
    ProtocolViolation,
    RequestFailed,
    SoraError,
    TimedOut,
    ValidationFailed,
)
from sora_sdk.core.retry import RetryConfig, RetryObserver, RetryPolicy

from .models import (
    GenerationOutcome,
    GenerationRequest,
    JobCreationResponse,
    JobSnapshot,
    JobStatus,
    JobStatusResponse,
    from_epoch,
    parse_job_status,
)
from .validation import validate_request

logger = logging.getLogger(__name__)

API_PATH = "/openai/v1/video/generations"
DOWNLOAD_CHUNK_SIZE = 81920  # 80KB

ProgressCallback = Callable[[JobSnapshot], None]


class SoraClient:
    """
    Client for Azure OpenAI video generation jobs.

    Usage:
        async with SoraClient(SoraConfig(endpoint=..., api_key=...)) as client:
            job_id = await client.submit(GenerationRequest(
                prompt="A serene waterfall in a lush forest",
                dimensions=AspectRatioAndQuality("16:9", "high"),
                duration_seconds=10,
            ))
            url = await client.wait_for_completion(job_id)
            await client.download(url, "output/waterfall.mp4")

    The client keeps no per-job state; one instance may track many jobs
    concurrently.
    """

    def __init__(
        self,
        config: Optional[SoraConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        on_progress: Optional[ProgressCallback] = None,
        on_retry: Optional[RetryObserver] = None,
    ):
        """
        Initialize the video generation client.

        Args:
            config: Optional config override (defaults to environment config)
            http_client: Transport to use; created lazily when omitted.
                An injected client is never closed by this class.
            on_progress: Callback for each non-terminal poll snapshot
            on_retry: Callback for each retry (attempt, delay, error)
        """
        self.config = config or get_config()
        issues = self.config.validate()
        if issues:
            raise ValueError(f"Invalid Sora configuration: {'; '.join(issues)}")

        self.on_progress = on_progress

        self._http_client = http_client
        self._owns_http_client = http_client is None

        self._retry = RetryPolicy(
            RetryConfig(
                max_attempts=self.config.max_retry_attempts,
                base_delay=self.config.retry_base_delay,
            ),
            on_retry=on_retry,
        )

        logger.info(f"SoraClient initialized with endpoint: {self.config.endpoint}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.http_timeout)
        return self._http_client

    def _headers(self) -> dict[str, str]:
        return {
            "api-key": self.config.api_key,
            "Accept": "application/json",
        }

    async def close(self):
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "SoraClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    # ============================================================
    # URLs
    # ============================================================

    def _jobs_url(self, job_id: Optional[str] = None) -> str:
        path = f"{API_PATH}/jobs" if job_id is None else f"{API_PATH}/jobs/{job_id}"
        return f"{self.config.endpoint}{path}?api-version={self.config.api_version}"

    def content_url(self, generation_id: str) -> str:
        """URL of the video produced by one generation of a job."""
        return (
            f"{self.config.endpoint}{API_PATH}/{generation_id}"
            f"/content/video?api-version={self.config.api_version}"
        )

    # ============================================================
    # Transport
    # ============================================================

    async def _request(
        self,
        method: str,
        url: str,
        description: str,
        resource_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one logical request with retry and error classification."""

        async def attempt() -> httpx.Response:
            client = await self._get_client()
            with transport_errors(self.config.http_timeout):
                response = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    timeout=self.config.http_timeout,
                    **kwargs,
                )
            raise_for_response(response, resource_id=resource_id)
            return response

        return await self._retry.run(attempt, description=description)

    # ============================================================
    # Lifecycle
    # ============================================================

    def build_payload(self, request: GenerationRequest, width: int, height: int) -> dict[str, Any]:
        """Serialize a validated request for the job creation endpoint."""
        payload: dict[str, Any] = {
            "model": self.config.deployment_name,
            "prompt": request.prompt,
            "width": width,
            "height": height,
            "n_seconds": request.duration_seconds,
            "n_variants": 1,
        }

        optional = {
            "aspect_ratio": request.aspect_ratio,
            "frame_rate": request.frame_rate,
            "seed": request.seed,
            "quality": request.quality.lower() if request.quality else None,
            "style": request.style,
            "metadata": request.metadata or None,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload

    async def submit(self, request: GenerationRequest) -> str:
        """
        Submit a video generation job.

        Args:
            request: The generation request

        Returns:
            Server-issued job ID

        Raises:
            ValidationFailed: Before any network call if the request is invalid
            SoraError: For any classified transport or server failure
        """
        width, height = validate_request(request)
        return await self._create_job(request, width, height)

    async def _create_job(self, request: GenerationRequest, width: int, height: int) -> str:
        """POST an already validated request and return the job ID."""
        payload = self.build_payload(request, width, height)

        logger.info(
            f"Submitting video job: {width}x{height}, {request.duration_seconds}s, "
            f"prompt length: {len(request.prompt)}"
        )

        response = await self._request(
            "POST",
            self._jobs_url(),
            description="submit job",
            json=payload,
        )

        try:
            created = JobCreationResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolViolation(f"Invalid job creation response: {e.error_count()} error(s)") from e

        if not created.id:
            raise ProtocolViolation("Invalid response: missing job ID")

        logger.info(f"Video job submitted successfully: {created.id}")
        return created.id

    async def poll(self, job_id: str) -> JobSnapshot:
        """
        Fetch the current status of a job.

        Raises:
            ProtocolViolation: If the job succeeded but no result URL can be derived
        """
        if not job_id or not job_id.strip():
            raise ValidationFailed("Job ID is required", field_errors={"job_id": ["job_id is required"]})

        logger.debug(f"Checking status for job: {job_id}")

        response = await self._request(
            "GET",
            self._jobs_url(job_id),
            description=f"poll job {job_id}",
            resource_id=job_id,
        )

        try:
            data = JobStatusResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolViolation(f"Invalid status response for job {job_id}: {e.error_count()} error(s)") from e

        snapshot = self._to_snapshot(job_id, data)
        logger.debug(f"Job {job_id} status: {snapshot.status.value} (raw: {snapshot.raw_status})")
        return snapshot

    def _to_snapshot(self, job_id: str, data: JobStatusResponse) -> JobSnapshot:
        status = parse_job_status(data.status)
        generation_ids = [g.id for g in data.generations if g.id]

        result_url = data.video_url or None
        if result_url is None and generation_ids:
            result_url = self.content_url(generation_ids[0])

        if status is JobStatus.SUCCEEDED and not result_url:
            raise ProtocolViolation(f"Job {job_id} succeeded but video URL is missing")

        try:
            created_at = from_epoch(data.created_at)
            updated_at = from_epoch(data.updated_at)
            completed_at = from_epoch(data.finished_at)
        except (ValueError, OverflowError, OSError) as e:
            raise ProtocolViolation(f"Invalid timestamp in status response for job {job_id}: {e}") from e

        error_message = data.failure_reason
        error_code = None
        if data.error is not None:
            error_message = error_message or data.error.message
            error_code = data.error.code

        return JobSnapshot(
            job_id=data.id or job_id,
            status=status,
            raw_status=data.status,
            result_url=result_url,
            error_message=error_message,
            error_code=error_code,
            created_at=created_at,
            updated_at=updated_at,
            completed_at=completed_at,
            progress_percentage=int(data.progress) if data.progress is not None else None,
            generation_ids=generation_ids,
            metadata=data.metadata or {},
        )

    def _emit_progress(self, snapshot: JobSnapshot):
        """Emit progress update via callback."""
        if self.on_progress:
            try:
                self.on_progress(snapshot)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

    async def _pause(self, seconds: float, job_id: str, cancel_event: Optional[asyncio.Event]):
        """Sleep between polls; a set cancel_event ends the wait early."""
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        logger.info(f"Wait for job {job_id} cancelled")
        raise asyncio.CancelledError(f"Wait for job {job_id} was cancelled")

    async def wait_for_completion(
        self,
        job_id: str,
        poll_interval: Optional[float] = None,
        max_wait_time: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """
        Poll a job until it reaches a terminal status.

        The deadline is checked before every poll, so a job that is still
        running when max_wait_time elapses always ends in TimedOut.

        Args:
            job_id: Job to wait for
            poll_interval: Seconds between polls (defaults to config)
            max_wait_time: Overall deadline in seconds (defaults to config)
            cancel_event: Setting this event interrupts the inter-poll sleep

        Returns:
            Result URL of the finished video

        Raises:
            JobFailed: The job failed server-side
            JobCancelled: The job was cancelled server-side
            TimedOut: The deadline passed first
            asyncio.CancelledError: cancel_event was set or the task was cancelled
        """
        if not job_id or not job_id.strip():
            raise ValidationFailed("Job ID is required", field_errors={"job_id": ["job_id is required"]})

        interval = self.config.poll_interval if poll_interval is None else poll_interval
        max_wait = self.config.max_wait_time if max_wait_time is None else max_wait_time
        if interval <= 0:
            raise ValidationFailed(
                "Invalid polling parameters",
                field_errors={"poll_interval": ["poll_interval must be positive"]},
            )
        if max_wait < 0:
            raise ValidationFailed(
                "Invalid polling parameters",
                field_errors={"max_wait_time": ["max_wait_time must not be negative"]},
            )

        deadline = time.monotonic() + max_wait
        logger.info(f"Waiting for job {job_id} to complete (max wait: {max_wait}s)")

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise asyncio.CancelledError(f"Wait for job {job_id} was cancelled")

            if time.monotonic() >= deadline:
                logger.warning(f"Job {job_id} did not complete within {max_wait}s")
                raise TimedOut(f"Job did not complete within {max_wait}s", duration=max_wait)

            snapshot = await self.poll(job_id)

            if snapshot.status is JobStatus.SUCCEEDED:
                logger.info(f"Job {job_id} completed successfully")
                return snapshot.result_url

            if snapshot.status is JobStatus.FAILED:
                logger.error(f"Job {job_id} failed: {snapshot.error_message}")
                raise JobFailed(
                    snapshot.error_message or "Unknown error",
                    code=snapshot.error_code,
                    job_id=job_id,
                )

            if snapshot.status is JobStatus.CANCELLED:
                logger.warning(f"Job {job_id} was cancelled")
                raise JobCancelled(job_id)

            if snapshot.progress_percentage is not None:
                logger.debug(f"Job {job_id} progress: {snapshot.progress_percentage}%")
            self._emit_progress(snapshot)

            await self._pause(interval, job_id, cancel_event)

    async def download(self, result_url: str, destination: Union[str, Path]) -> Path:
        """
        Stream a generated video to a local file.

        Parent directories are created as needed. Classified SDK errors
        (auth, not found, rate limit, ...) propagate unchanged; anything
        else is wrapped in RequestFailed with error_code DOWNLOAD_FAILED.

        Returns:
            Path of the written file
        """
        if not result_url or not str(result_url).strip():
            raise ValidationFailed("Result URL is required", field_errors={"result_url": ["result_url is required"]})
        if not destination or not str(destination).strip():
            raise ValidationFailed("File path is required", field_errors={"destination": ["destination is required"]})

        output_path = Path(destination)
        logger.info(f"Downloading video from {result_url} to {output_path}")

        async def attempt() -> int:
            client = await self._get_client()
            written = 0
            with transport_errors(self.config.http_timeout):
                async with client.stream(
                    "GET",
                    result_url,
                    headers=self._headers(),
                    timeout=self.config.http_timeout,
                    follow_redirects=True,
                ) as response:
                    if not response.is_success:
                        await response.aread()
                        raise_for_response(response, resource_id=result_url)

                    async with aiofiles.open(output_path, "wb") as f:
                        async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                            await f.write(chunk)
                            written += len(chunk)
            return written

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            size = await self._retry.run(attempt, description="download video")
        except SoraError:
            raise
        except Exception as e:
            raise RequestFailed(
                f"Failed to download video: {e}",
                error_code="DOWNLOAD_FAILED",
            ) from e

        logger.info(f"Video downloaded: {output_path} ({size / 1024 / 1024:.1f} MB)")
        return output_path

    async def generate(
        self,
        request: GenerationRequest,
        destination: Optional[Union[str, Path]] = None,
        poll_interval: Optional[float] = None,
        max_wait_time: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationOutcome:
        """
        Submit, wait and optionally download in one call.

        Args:
            request: The generation request
            destination: File to write the video to (skipped when None)

        Returns:
            GenerationOutcome with job ID, result URL and local path
        """
        started_at = datetime.now()
        width, height = validate_request(request)

        job_id = await self._create_job(request, width, height)
        result_url = await self.wait_for_completion(
            job_id,
            poll_interval=poll_interval,
            max_wait_time=max_wait_time,
            cancel_event=cancel_event,
        )

        local_path = None
        if destination is not None:
            local_path = await self.download(result_url, destination)

        return GenerationOutcome(
            job_id=job_id,
            result_url=result_url,
            local_path=local_path,
            width=width,
            height=height,
            processing_time_seconds=(datetime.now() - started_at).total_seconds(),
        )
