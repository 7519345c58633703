"""
Swing Detection from Chart Pixels

Locates the swing high and swing low of a candlestick chart screenshot by
classifying pixels inside the plot area as candle colors, then maps the
extreme rows to prices through a PriceMap.

The current price is estimated separately from a narrow vertical strip just
left of the price axis, where the most recent candles are drawn.
"""

import logging
import math
from typing import Optional, Protocol, Tuple

import numpy as np

from .detection_config import ColorThresholds, DetectionConfig
from .price_calibrator import pixel_row_to_price
from .types import PriceMap, SwingResult

logger = logging.getLogger(__name__)


class ImageSource(Protocol):
    """Anything that exposes dimensions and RGBA sampling over a rectangle."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def region(self, x0: int, y0: int, x1: int, y1: int) -> np.ndarray: ...


def _channels(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    # int32 so ratio comparisons on uint8 data don't overflow
    data = pixels.astype(np.int32)
    return data[..., 0], data[..., 1], data[..., 2], data[..., 3]


def classify_candle_pixels(pixels: np.ndarray, colors: ColorThresholds) -> np.ndarray:
    """
    Boolean mask of candle pixels inside the plot area.

    A pixel matches when it is bullish (green dominant), bearish (red
    dominant) or neutral-bright (near white). Translucent pixels never match.

    Args:
        pixels: RGBA array of shape (h, w, 4).
        colors: Classification thresholds.
    """
    r, g, b, a = _channels(pixels)

    bullish = (g > colors.min_channel) & (g > r * colors.bullish_ratio) & (g > b * colors.bullish_ratio)
    bearish = (
        (r > colors.min_channel)
        & (r > g * colors.bearish_green_ratio)
        & (r > b * colors.bearish_blue_ratio)
    )
    bright = (r > colors.bright_min) & (g > colors.bright_min) & (b > colors.bright_min)

    return (bullish | bearish | bright) & (a >= colors.min_alpha)


def classify_strip_pixels(pixels: np.ndarray, colors: ColorThresholds) -> np.ndarray:
    """
    Boolean mask of colored candle pixels in the current-price strip.

    Looser than classify_candle_pixels: only the red/green balance is checked,
    and near-white pixels are excluded so grid labels don't pull the average.
    """
    r, g, _, _ = _channels(pixels)

    bullish = (g > colors.min_channel) & (g > r * colors.bullish_ratio)
    bearish = (r > colors.min_channel) & (r > g * colors.bearish_green_ratio)
    return bullish | bearish


def _plot_bounds(image: ImageSource, config: DetectionConfig) -> Tuple[int, int, int, int]:
    left = math.floor(image.width * config.roi_left)
    right = math.floor(image.width * (1 - config.roi_right))
    top = math.floor(image.height * config.roi_top)
    bottom = math.floor(image.height * (1 - config.roi_bottom))
    return left, top, right, bottom


def detect_current_price(
    image: ImageSource,
    price_map: PriceMap,
    config: Optional[DetectionConfig] = None,
) -> Optional[float]:
    """
    Estimate the current price from the rightmost candles.

    Averages the rows of all colored pixels in the strip and converts the
    mean row to a price.

    Returns:
        The price, or None if the strip holds no colored pixels.
    """
    config = config or DetectionConfig.default()
    _, top, _, bottom = _plot_bounds(image, config)

    strip_x = math.floor(image.width * config.strip_left)
    strip_w = math.floor(image.width * config.strip_width)
    if strip_w <= 0 or bottom <= top:
        return None

    strip = image.region(strip_x, top, strip_x + strip_w, bottom)
    mask = classify_strip_pixels(strip, config.colors)

    rows, _ = np.nonzero(mask)
    if rows.size == 0:
        logger.debug("No candle pixels in current-price strip")
        return None

    avg_row = top + float(rows.mean())
    return pixel_row_to_price(avg_row, price_map)


def detect_swing_points(
    image: ImageSource,
    price_map: Optional[PriceMap],
    config: Optional[DetectionConfig] = None,
) -> SwingResult:
    """
    Detect swing high, swing low and current price from chart pixels.

    Args:
        image: Decoded chart screenshot.
        price_map: Pixel/price mapping. Without one nothing can be measured.
        config: Detection thresholds (defaults if omitted).

    Returns:
        SwingResult with swing_high >= swing_low, or an empty result when
        there is no price map or no candle pixels in the plot area.
    """
    if price_map is None:
        return SwingResult.empty()

    config = config or DetectionConfig.default()
    left, top, right, bottom = _plot_bounds(image, config)
    if right <= left or bottom <= top:
        logger.warning(f"Plot area is empty for {image.width}x{image.height} image")
        return SwingResult.empty()

    plot = image.region(left, top, right, bottom)
    mask = classify_candle_pixels(plot, config.colors)

    matched_rows = np.flatnonzero(mask.any(axis=1))
    if matched_rows.size == 0:
        logger.warning("No candle pixels found in plot area")
        return SwingResult.empty()

    high_row = top + int(matched_rows[0])
    low_row = top + int(matched_rows[-1])

    first = pixel_row_to_price(high_row, price_map)
    second = pixel_row_to_price(low_row, price_map)
    current = detect_current_price(image, price_map, config)

    result = SwingResult(
        swing_high=max(first, second),
        swing_low=min(first, second),
        current_price=current,
    )
    logger.info(
        f"Swings detected: high={result.swing_high} (row {high_row}), "
        f"low={result.swing_low} (row {low_row}), current={result.current_price}"
    )
    return result
