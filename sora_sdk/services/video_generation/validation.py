"""
Local validation of generation requests.

Runs before any network call. All violations found in one pass are
reported together in a single ValidationFailed, keyed by field name.
"""

import logging
from collections import defaultdict
from typing import Optional

from sora_sdk.core.errors import ValidationFailed

from .dimensions import (
    DIMENSION_STEP,
    MAX_DIMENSION,
    MIN_DIMENSION,
    QUALITY_TARGET_SIZES,
    get_common_dimensions,
)
from .models import AspectRatioAndQuality, Dimensions, ExplicitDimensions, GenerationRequest

logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = 4000
MIN_DURATION_SECONDS = 1
MAX_DURATION_SECONDS = 60
MIN_FRAME_RATE = 12
MAX_FRAME_RATE = 60
VALID_QUALITY_TAGS = ("standard", "high", "ultra")

INVALID_REQUEST_MESSAGE = "Invalid video generation parameters"


def resolve_dimensions(dimensions: Dimensions) -> tuple[int, int]:
    """
    Resolve either dimension form to (width, height).

    Explicit dimensions pass through untouched so range checks can
    report them; aspect ratio + quality goes through the preset table.

    Raises:
        ValidationFailed: If the aspect ratio or quality preset is invalid
    """
    if isinstance(dimensions, ExplicitDimensions):
        return dimensions.width, dimensions.height

    if isinstance(dimensions, AspectRatioAndQuality):
        quality = dimensions.quality if isinstance(dimensions.quality, str) else ""
        if quality.strip().lower() not in QUALITY_TARGET_SIZES:
            raise ValidationFailed(
                INVALID_REQUEST_MESSAGE,
                field_errors={"quality": [
                    f"quality preset must be one of: {', '.join(QUALITY_TARGET_SIZES)}"
                ]},
            )
        try:
            return get_common_dimensions(dimensions.aspect_ratio, quality)
        except ValueError as e:
            raise ValidationFailed(
                INVALID_REQUEST_MESSAGE,
                field_errors={"aspect_ratio": [str(e)]},
            ) from e

    raise ValidationFailed(
        INVALID_REQUEST_MESSAGE,
        field_errors={"dimensions": [f"Unsupported dimensions type: {type(dimensions).__name__}"]},
    )


def _check_range(
    errors: dict[str, list[str]],
    name: str,
    value: object,
    low: int,
    high: Optional[int] = None,
):
    if not isinstance(value, int) or isinstance(value, bool):
        errors[name].append(f"{name} must be an integer")
    elif high is None and value < low:
        errors[name].append(f"{name} must be at least {low}")
    elif high is not None and not low <= value <= high:
        errors[name].append(f"{name} must be between {low} and {high}")


def collect_violations(
    request: GenerationRequest,
    width: Optional[int],
    height: Optional[int],
) -> dict[str, list[str]]:
    """
    Return field -> messages for every rule the request breaks.

    Pass width/height as None when dimension resolution already failed;
    the dimension checks are then skipped.
    """
    errors: dict[str, list[str]] = defaultdict(list)

    prompt = request.prompt
    if not isinstance(prompt, str) or not prompt.strip():
        errors["prompt"].append("prompt is required")
    elif len(prompt) > MAX_PROMPT_LENGTH:
        errors["prompt"].append(f"prompt must be at most {MAX_PROMPT_LENGTH} characters")

    if width is not None and height is not None:
        _check_range(errors, "width", width, MIN_DIMENSION, MAX_DIMENSION)
        _check_range(errors, "height", height, MIN_DIMENSION, MAX_DIMENSION)

        # Only meaningful once both sides are in range
        if "width" not in errors and "height" not in errors:
            for name, value in (("width", width), ("height", height)):
                if value % DIMENSION_STEP:
                    errors[name].append(f"{name} must be divisible by {DIMENSION_STEP}")

    _check_range(
        errors, "duration_seconds", request.duration_seconds,
        MIN_DURATION_SECONDS, MAX_DURATION_SECONDS,
    )

    if request.frame_rate is not None:
        _check_range(errors, "frame_rate", request.frame_rate, MIN_FRAME_RATE, MAX_FRAME_RATE)

    if request.seed is not None:
        _check_range(errors, "seed", request.seed, 0)

    if request.quality is not None and str(request.quality).lower() not in VALID_QUALITY_TAGS:
        errors["quality"].append(f"quality must be one of: {', '.join(VALID_QUALITY_TAGS)}")

    if request.metadata is not None:
        if not isinstance(request.metadata, dict):
            errors["metadata"].append("metadata must be a mapping of strings")
        elif not all(isinstance(k, str) and isinstance(v, str) for k, v in request.metadata.items()):
            errors["metadata"].append("metadata keys and values must be strings")

    return dict(errors)


def validate_request(request: GenerationRequest) -> tuple[int, int]:
    """
    Resolve and validate a request.

    Returns:
        The resolved (width, height)

    Raises:
        ValidationFailed: With every violation found
    """
    errors: dict[str, list[str]] = {}
    width: Optional[int] = None
    height: Optional[int] = None

    try:
        width, height = resolve_dimensions(request.dimensions)
    except ValidationFailed as e:
        errors.update(e.field_errors)

    for name, messages in collect_violations(request, width, height).items():
        errors.setdefault(name, []).extend(messages)

    if errors:
        logger.debug(f"Request validation failed: {errors}")
        raise ValidationFailed(INVALID_REQUEST_MESSAGE, field_errors=errors)
    return width, height
