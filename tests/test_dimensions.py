"""
Tests for aspect ratio / quality preset dimension calculation.

Run with:
    python -m pytest tests/test_dimensions.py -v
"""

import pytest

from sora_sdk.services.video_generation.dimensions import (
    COMMON_DIMENSIONS,
    MAX_DIMENSION,
    MIN_DIMENSION,
    calculate_from_aspect_ratio,
    get_common_dimensions,
    parse_aspect_ratio,
)


class TestCalculateFromAspectRatio:
    """Ratio + target size to dimensions."""

    def test_widescreen_width_fixed(self):
        assert calculate_from_aspect_ratio("16:9", 1920) == (1920, 1080)

    def test_height_fixed(self):
        assert calculate_from_aspect_ratio("9:16", 1920, prefer_width=False) == (1080, 1920)

    def test_decimal_ratio_rounds_to_multiple_of_eight(self):
        # 1920 / 2.35 = 817.02 -> 817 -> 816
        assert calculate_from_aspect_ratio("2.35:1", 1920) == (1920, 816)

    def test_rounds_half_up(self):
        # 132 / 8 = 16.5 rounds up to 17 * 8
        assert calculate_from_aspect_ratio("1:1", 132) == (136, 136)

    def test_clamps_after_rounding(self):
        assert calculate_from_aspect_ratio("1:1", 100) == (MIN_DIMENSION, MIN_DIMENSION)
        assert calculate_from_aspect_ratio("1:10", 1920) == (1920, MAX_DIMENSION)
        assert calculate_from_aspect_ratio("32:9", 2048) == (2048, 576)

    def test_every_result_is_valid(self):
        """All outputs are multiples of 8 within [128, 2048]."""
        ratios = ["16:9", "4:3", "1:1", "9:16", "3:4", "21:9", "2.35:1", "1:3", "7:5"]
        sizes = [1, 64, 100, 333, 720, 1080, 1920, 4096]

        for ratio in ratios:
            for size in sizes:
                for prefer_width in (True, False):
                    width, height = calculate_from_aspect_ratio(ratio, size, prefer_width)
                    for value in (width, height):
                        assert value % 8 == 0, (ratio, size, prefer_width)
                        assert MIN_DIMENSION <= value <= MAX_DIMENSION, (ratio, size, prefer_width)

    @pytest.mark.parametrize("ratio", ["16x9", "16:9:1", "a:b", "0:9", "-16:9", "", "16:", "inf:1", "nan:1"])
    def test_invalid_ratio_raises(self, ratio):
        with pytest.raises(ValueError):
            calculate_from_aspect_ratio(ratio, 1280)

    def test_extreme_ratio_raises_value_error(self):
        with pytest.raises(ValueError, match="too extreme"):
            calculate_from_aspect_ratio("1e308:1e-308", 2048, prefer_width=False)
        with pytest.raises(ValueError, match="too extreme"):
            calculate_from_aspect_ratio("1e-308:1e308", 2048)

    def test_non_positive_target_raises(self):
        with pytest.raises(ValueError):
            calculate_from_aspect_ratio("16:9", 0)

    def test_parse_aspect_ratio(self):
        assert parse_aspect_ratio(" 21:9 ") == (21.0, 9.0)


class TestGetCommonDimensions:
    """Preset table lookups and fallback."""

    @pytest.mark.parametrize(
        "ratio,quality,expected",
        [
            ("16:9", "high", (1920, 1080)),
            ("16:9", "low", (640, 360)),
            ("4:3", "high", (1600, 1200)),
            ("1:1", "high", (1080, 1080)),
            ("9:16", "high", (1080, 1920)),
            ("21:9", "high", (2048, 880)),
        ],
    )
    def test_table_values(self, ratio, quality, expected):
        assert get_common_dimensions(ratio, quality) == expected

    def test_table_covers_all_ratios_and_qualities(self):
        assert set(COMMON_DIMENSIONS) == {"16:9", "4:3", "1:1", "9:16", "3:4", "21:9"}
        for presets in COMMON_DIMENSIONS.values():
            assert set(presets) == {"low", "medium", "high", "ultra"}
            for width, height in presets.values():
                assert width % 8 == 0 and height % 8 == 0
                assert MIN_DIMENSION <= width <= MAX_DIMENSION
                assert MIN_DIMENSION <= height <= MAX_DIMENSION

    def test_quality_is_case_insensitive(self):
        assert get_common_dimensions("16:9", "HIGH") == (1920, 1080)

    def test_default_quality_is_medium(self):
        assert get_common_dimensions("16:9") == (1280, 720)

    def test_unlisted_landscape_ratio_falls_back(self):
        assert get_common_dimensions("2.35:1", "high") == (1920, 816)

    def test_unlisted_portrait_ratio_fixes_height(self):
        assert get_common_dimensions("1:2", "medium") == (640, 1280)

    def test_invalid_quality_raises(self):
        with pytest.raises(ValueError, match="Quality"):
            get_common_dimensions("16:9", "extreme")

    def test_invalid_unlisted_ratio_raises(self):
        with pytest.raises(ValueError):
            get_common_dimensions("wide", "high")
