"""
Tests for calibration and detection config dataclasses.

Verifies:
- Default values match the tuned thresholds
- Immutability (frozen=True)
- with_colors / with_region return modified copies
"""

from dataclasses import FrozenInstanceError

import pytest

from src.fib_analysis.detection_config import CalibrationConfig, ColorThresholds, DetectionConfig


class TestCalibrationConfig:
    """Tests for CalibrationConfig."""

    def test_defaults(self):
        config = CalibrationConfig.default()
        assert config.min_pixel_gap == 5
        assert config.label_tolerance == 0.05

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            CalibrationConfig().label_tolerance = 0.1


class TestColorThresholds:
    """Tests for ColorThresholds."""

    def test_defaults(self):
        colors = ColorThresholds()
        assert colors.min_channel == 100
        assert colors.bullish_ratio == 1.3
        assert colors.bearish_green_ratio == 1.3
        assert colors.bearish_blue_ratio == 1.2
        assert colors.bright_min == 200
        assert colors.min_alpha == 128


class TestDetectionConfig:
    """Tests for DetectionConfig."""

    def test_region_defaults(self):
        config = DetectionConfig.default()
        assert config.roi_left == 0.05
        assert config.roi_right == 0.18
        assert config.roi_top == 0.12
        assert config.roi_bottom == 0.08
        assert config.strip_left == 0.75
        assert config.strip_width == 0.06

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DetectionConfig().roi_top = 0.2

    def test_with_colors(self):
        config = DetectionConfig.default()
        custom = config.with_colors(min_channel=80, min_alpha=0)
        assert custom.colors.min_channel == 80
        assert custom.colors.min_alpha == 0
        assert custom.colors.bullish_ratio == 1.3
        assert config.colors.min_channel == 100

    def test_with_region_only_changes_given_values(self):
        config = DetectionConfig.default().with_region(roi_top=0.2)
        assert config.roi_top == 0.2
        assert config.roi_left == 0.05
        assert config.roi_bottom == 0.08
