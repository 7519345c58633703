"""
Chart Reading Configuration

Centralized configuration for price calibration and swing detection.
Extracts the tuned magic numbers into frozen dataclasses.

The color thresholds were tuned against dark-theme candlestick charts with
green/red candles. They are heuristics, not invariants, and should be
overridden for other color conventions.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Any


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Parameters for building a PriceMap from axis labels.

    Attributes:
        min_pixel_gap: Label pairs at most this many pixels apart are
            treated as noise. Default 5.
        label_tolerance: Maximum relative error between a label's value and
            the price the reference scale predicts at its row. Default 0.05.
    """
    min_pixel_gap: int = 5
    label_tolerance: float = 0.05

    @classmethod
    def default(cls) -> "CalibrationConfig":
        """Create a config with default values."""
        return cls()


@dataclass(frozen=True)
class ColorThresholds:
    """
    Channel-ratio rules for classifying candle pixels.

    Attributes:
        min_channel: Dominant channel must exceed this value (0-255).
        bullish_ratio: Green must exceed red and blue by this factor.
        bearish_green_ratio: Red must exceed green by this factor.
        bearish_blue_ratio: Red must exceed blue by this factor.
        bright_min: All channels above this count as neutral-bright (white
            candles on monochrome themes).
        min_alpha: Pixels below this opacity are ignored.
    """
    min_channel: int = 100
    bullish_ratio: float = 1.3
    bearish_green_ratio: float = 1.3
    bearish_blue_ratio: float = 1.2
    bright_min: int = 200
    min_alpha: int = 128


@dataclass(frozen=True)
class DetectionConfig:
    """
    All configurable parameters for swing detection.

    Region fractions are relative to the full image size.

    Attributes:
        colors: Pixel classification thresholds.
        roi_left: Fraction of width excluded on the left.
        roi_right: Fraction of width excluded on the right (price axis gutter).
        roi_top: Fraction of height excluded at the top (chart header).
        roi_bottom: Fraction of height excluded at the bottom (time axis).
        strip_left: Left edge of the current-price strip as a fraction of width.
        strip_width: Width of the current-price strip as a fraction of width.

    Example:
        >>> config = DetectionConfig.default()
        >>> config.colors.bullish_ratio
        1.3
    """
    colors: ColorThresholds = field(default_factory=ColorThresholds)
    roi_left: float = 0.05
    roi_right: float = 0.18
    roi_top: float = 0.12
    roi_bottom: float = 0.08
    strip_left: float = 0.75
    strip_width: float = 0.06

    @classmethod
    def default(cls) -> "DetectionConfig":
        """Create a config with default values."""
        return cls()

    def with_colors(self, **kwargs: Any) -> "DetectionConfig":
        """
        Create a new config with modified color thresholds.

        Since DetectionConfig is frozen, this creates a new instance.

        Example:
            >>> config = DetectionConfig.default()
            >>> custom = config.with_colors(min_channel=80)
            >>> custom.colors.min_channel
            80
        """
        colors_dict = asdict(self.colors)
        colors_dict.update(kwargs)
        return replace(self, colors=ColorThresholds(**colors_dict))

    def with_region(
        self,
        roi_left: float = None,
        roi_right: float = None,
        roi_top: float = None,
        roi_bottom: float = None,
    ) -> "DetectionConfig":
        """
        Create a new config with a modified region of interest.

        Only provided parameters are modified; others keep their current values.
        """
        return replace(
            self,
            roi_left=roi_left if roi_left is not None else self.roi_left,
            roi_right=roi_right if roi_right is not None else self.roi_right,
            roi_top=roi_top if roi_top is not None else self.roi_top,
            roi_bottom=roi_bottom if roi_bottom is not None else self.roi_bottom,
        )
