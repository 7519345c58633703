"""
Price Calibration Module

Builds a linear pixel-row <-> price mapping from axis labels read off a chart
screenshot. Recognized labels are noisy: a single misread digit can produce a
label whose value is wildly off, so the scale is estimated in two passes.

1. Every label pair yields a pixels-per-unit (PPU) estimate. The pair with the
   median PPU becomes the reference scale.
2. Labels that disagree with the reference scale by more than the tolerance
   are dropped, and the final scale is fitted to the outermost survivors.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .constants import MANUAL_MAP_MARGIN
from .detection_config import CalibrationConfig
from .errors import InsufficientLabelsError
from .types import LabelObservation, PriceMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _LabelPair:
    upper: LabelObservation
    lower: LabelObservation
    ppu: float


def _candidate_pairs(
    labels: List[LabelObservation],
    min_pixel_gap: int,
) -> List[_LabelPair]:
    """Enumerate label pairs that imply a positive scale."""
    pairs = []
    for i, upper in enumerate(labels):
        for lower in labels[i + 1:]:
            pixel_diff = lower.pixel_row - upper.pixel_row
            # Higher row = lower price on a chart
            price_diff = upper.value - lower.value
            if pixel_diff <= min_pixel_gap or price_diff <= 0:
                continue
            pairs.append(_LabelPair(upper=upper, lower=lower, ppu=pixel_diff / price_diff))
    return pairs


def _agrees_with_reference(
    label: LabelObservation,
    reference: _LabelPair,
    tolerance: float,
) -> bool:
    if label is reference.upper or label is reference.lower:
        return True
    if label.value == 0:
        return False
    expected = reference.upper.value - (label.pixel_row - reference.upper.pixel_row) / reference.ppu
    error = abs(expected - label.value) / abs(label.value)
    return error < tolerance


def _map_from_pair(pair: _LabelPair) -> PriceMap:
    return PriceMap(
        top_price=pair.upper.value,
        bottom_price=pair.lower.value,
        top_pixel_row=pair.upper.pixel_row,
        bottom_pixel_row=pair.lower.pixel_row,
        pixels_per_unit=pair.ppu,
    )


def build_price_map(
    labels: List[LabelObservation],
    image_height: Optional[int] = None,
    config: Optional[CalibrationConfig] = None,
) -> Optional[PriceMap]:
    """
    Build a PriceMap from recognized axis labels.

    Args:
        labels: Label observations in any order; may contain misreads.
        image_height: Height of the source image in pixels.
        config: Calibration thresholds (defaults if omitted).

    Returns:
        PriceMap, or None when fewer than two labels are given or no label
        pair implies a positive scale. Callers fall back to manual entry.
    """
    config = config or CalibrationConfig.default()

    if not labels or len(labels) < 2:
        logger.warning(f"Need at least 2 axis labels to calibrate, got {len(labels or [])}")
        return None

    ordered = sorted(labels, key=lambda lbl: lbl.pixel_row)
    pairs = _candidate_pairs(ordered, config.min_pixel_gap)

    if not pairs:
        logger.warning(f"No consistent label pairs among {len(ordered)} labels")
        return None

    pairs.sort(key=lambda p: p.ppu)
    reference = pairs[len(pairs) // 2]
    logger.debug(
        f"Reference pair {reference.upper.value}@{reference.upper.pixel_row} / "
        f"{reference.lower.value}@{reference.lower.pixel_row}, ppu={reference.ppu:.6f} "
        f"(median of {len(pairs)} pairs)"
    )

    valid = [lbl for lbl in ordered if _agrees_with_reference(lbl, reference, config.label_tolerance)]

    if len(valid) < 2:
        logger.warning("Label filtering left fewer than 2 labels; using reference pair")
        return _map_from_pair(reference)

    top, bottom = valid[0], valid[-1]
    price_range = top.value - bottom.value
    pixel_range = bottom.pixel_row - top.pixel_row

    if price_range <= 0 or pixel_range <= 0:
        logger.warning("Outermost valid labels are inconsistent; using reference pair")
        return _map_from_pair(reference)

    price_map = PriceMap(
        top_price=top.value,
        bottom_price=bottom.value,
        top_pixel_row=top.pixel_row,
        bottom_pixel_row=bottom.pixel_row,
        pixels_per_unit=pixel_range / price_range,
    )
    logger.info(
        f"Price map built from {len(valid)}/{len(ordered)} labels "
        f"(image height {image_height}): {price_map.top_price} -> {price_map.bottom_price}"
    )
    return price_map


def calibrate(
    labels: List[LabelObservation],
    image_height: Optional[int] = None,
    config: Optional[CalibrationConfig] = None,
) -> PriceMap:
    """
    Same as build_price_map, but raises instead of returning None.

    Raises:
        InsufficientLabelsError: If no usable scale can be derived.
    """
    price_map = build_price_map(labels, image_height, config)
    if price_map is None:
        raise InsufficientLabelsError(
            f"Could not calibrate price axis from {len(labels or [])} labels"
        )
    return price_map


def pixel_row_to_price(row: float, price_map: PriceMap) -> float:
    """Convert a pixel row to a price."""
    return price_map.top_price - (row - price_map.top_pixel_row) / price_map.pixels_per_unit


def price_to_pixel_row(price: float, price_map: PriceMap) -> float:
    """Convert a price to a (fractional) pixel row."""
    return price_map.top_pixel_row + (price_map.top_price - price) * price_map.pixels_per_unit


def build_manual_price_map(high: float, low: float, image_height: int) -> PriceMap:
    """
    Build a PriceMap from user-supplied bounds.

    The top and bottom 10% of the image are reserved for chart header and
    footer; the high sits on the top margin row, the low on the bottom one.

    Raises:
        ValueError: If high <= low.
    """
    if high <= low:
        raise ValueError("High must be strictly greater than low.")

    margin = math.floor(image_height * MANUAL_MAP_MARGIN)
    return PriceMap(
        top_price=high,
        bottom_price=low,
        top_pixel_row=margin,
        bottom_pixel_row=image_height - margin,
        pixels_per_unit=(image_height - 2 * margin) / (high - low),
    )
