"""
Aspect ratio and quality preset to pixel dimensions.

All results are multiples of 8 within [MIN_DIMENSION, MAX_DIMENSION].
"""

import math

MIN_DIMENSION = 128
MAX_DIMENSION = 2048
DIMENSION_STEP = 8

# Target size of the fixed (longer) side when a ratio isn't in the table
QUALITY_TARGET_SIZES = {
    "low": 640,
    "medium": 1280,
    "high": 1920,
    "ultra": 2048,
}

# Product presets, not derived from the ratio math
COMMON_DIMENSIONS: dict[str, dict[str, tuple[int, int]]] = {
    "16:9": {
        "low": (640, 360),
        "medium": (1280, 720),
        "high": (1920, 1080),
        "ultra": (2048, 1152),
    },
    "4:3": {
        "low": (640, 480),
        "medium": (1024, 768),
        "high": (1600, 1200),
        "ultra": (2048, 1536),
    },
    "1:1": {
        "low": (512, 512),
        "medium": (720, 720),
        "high": (1080, 1080),
        "ultra": (2048, 2048),
    },
    "9:16": {
        "low": (360, 640),
        "medium": (720, 1280),
        "high": (1080, 1920),
        "ultra": (1152, 2048),
    },
    "3:4": {
        "low": (480, 640),
        "medium": (768, 1024),
        "high": (1200, 1600),
        "ultra": (1536, 2048),
    },
    "21:9": {
        "low": (840, 360),
        "medium": (1680, 720),
        "high": (2048, 880),
        "ultra": (2048, 880),
    },
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _snap(value: float) -> int:
    """Round to the nearest multiple of 8 (half up), then clamp."""
    snapped = _round_half_up(value / DIMENSION_STEP) * DIMENSION_STEP
    return max(MIN_DIMENSION, min(MAX_DIMENSION, snapped))


def parse_aspect_ratio(ratio: str) -> tuple[float, float]:
    """
    Parse "W:H" into two positive numbers.

    Decimal parts are accepted ("2.35:1").

    Raises:
        ValueError: If the ratio isn't exactly two positive numbers
    """
    if not isinstance(ratio, str) or not ratio.strip():
        raise ValueError("Aspect ratio is required")

    parts = ratio.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid aspect ratio format: {ratio!r} (expected 'W:H')")

    try:
        width_ratio, height_ratio = float(parts[0]), float(parts[1])
    except ValueError:
        raise ValueError(f"Invalid aspect ratio values: {ratio!r}") from None

    if not (math.isfinite(width_ratio) and math.isfinite(height_ratio)):
        raise ValueError(f"Invalid aspect ratio values: {ratio!r}")
    if width_ratio <= 0 or height_ratio <= 0:
        raise ValueError(f"Aspect ratio values must be positive: {ratio!r}")

    return width_ratio, height_ratio


def calculate_from_aspect_ratio(
    ratio: str,
    target_size: int,
    prefer_width: bool = True,
) -> tuple[int, int]:
    """
    Calculate dimensions for an aspect ratio.

    Args:
        ratio: Aspect ratio such as "16:9" or "2.35:1"
        target_size: Size of the fixed side in pixels
        prefer_width: Fix the width to target_size (otherwise the height)

    Returns:
        (width, height), each a multiple of 8 within [128, 2048]
    """
    width_ratio, height_ratio = parse_aspect_ratio(ratio)
    if target_size <= 0:
        raise ValueError(f"target_size must be positive, got {target_size}")

    if prefer_width:
        width = target_size
        other = target_size * height_ratio / width_ratio
    else:
        height = target_size
        other = target_size * width_ratio / height_ratio

    if not math.isfinite(other):
        raise ValueError(f"Aspect ratio {ratio!r} is too extreme for target size {target_size}")

    if prefer_width:
        height = _round_half_up(other)
    else:
        width = _round_half_up(other)

    return _snap(width), _snap(height)


def get_common_dimensions(ratio: str, quality: str = "medium") -> tuple[int, int]:
    """
    Preset dimensions for a ratio and quality level.

    Args:
        ratio: Aspect ratio, e.g. "16:9"
        quality: "low", "medium", "high" or "ultra"

    Returns:
        (width, height)
    """
    quality_key = (quality or "").strip().lower()
    if quality_key not in QUALITY_TARGET_SIZES:
        raise ValueError(
            f"Quality must be one of: {', '.join(QUALITY_TARGET_SIZES)} (got {quality!r})"
        )

    ratio_key = (ratio or "").strip()
    preset = COMMON_DIMENSIONS.get(ratio_key)
    if preset is not None:
        return preset[quality_key]

    width_ratio, height_ratio = parse_aspect_ratio(ratio_key)
    return calculate_from_aspect_ratio(
        ratio_key,
        QUALITY_TARGET_SIZES[quality_key],
        prefer_width=width_ratio >= height_ratio,
    )
