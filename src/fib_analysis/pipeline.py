"""
Analysis Pipeline

Explicit, pure pipeline functions. Levels and the insight are recomputed from
the latest (swing_high, swing_low, current_price, asset_type) tuple each time
an input changes; nothing is cached or recomputed behind the caller's back.

Two entry points feed the same final stage:
- scan_chart(): screenshot -> labels -> price map -> swings -> analysis
- analyze_manual(): user-supplied high/low/current -> analysis
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..chart_reader.extraction import extract_asset_info, extract_price_labels
from ..chart_reader.image import RasterImage
from ..chart_reader.recognizer import TextRecognizer
from .detection_config import CalibrationConfig, DetectionConfig
from .errors import DegenerateSwingError
from .insight_engine import generate_insight
from .level_calculator import compute_levels, determine_trend
from .price_calibrator import build_manual_price_map, calibrate
from .swing_detector import detect_swing_points
from .types import AssetInfo, AssetType, Direction, FibLevel, Insight, LabelObservation, PriceMap, SwingResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Levels and insight derived from one input tuple."""
    swing_high: float
    swing_low: float
    current_price: Optional[float]
    asset_type: AssetType
    direction: Direction
    levels: List[FibLevel]
    insight: Insight

    def to_record(self, asset_name: str) -> dict:
        """Flat record for persistence. Levels and insight are recomputable from it."""
        return {
            'asset_name': asset_name,
            'asset_type': self.asset_type.value,
            'swing_high': self.swing_high,
            'swing_low': self.swing_low,
            'current_price': self.current_price,
            'direction': self.direction.value,
        }


@dataclass(frozen=True)
class ManualEntry:
    """Values typed in by the user when the chart cannot be read."""
    high: float
    low: float
    current: Optional[float] = None
    asset_type: AssetType = AssetType.CRYPTO


@dataclass(frozen=True)
class ChartScan:
    """Everything one analysis run produced."""
    asset: AssetInfo
    price_map: Optional[PriceMap]
    swings: SwingResult
    result: AnalysisResult
    labels: List[LabelObservation] = field(default_factory=list)


def analyze_levels(
    swing_high: Optional[float],
    swing_low: Optional[float],
    current_price: Optional[float] = None,
    asset_type: Union[AssetType, str] = AssetType.CRYPTO,
) -> AnalysisResult:
    """
    Compute levels and insight for one input tuple.

    The direction follows the current price when it is known, and defaults
    to uptrend otherwise.

    Raises:
        DegenerateSwingError: If a bound is missing or swing_high <= swing_low.
    """
    if swing_high is None or swing_low is None:
        raise DegenerateSwingError("Swing high and low are both required")
    if swing_high <= swing_low:
        raise DegenerateSwingError(f"Swing high {swing_high} must be above swing low {swing_low}")

    asset_type = AssetType(asset_type)
    if current_price:
        direction = determine_trend(swing_high, swing_low, current_price)
    else:
        direction = Direction.UPTREND

    levels = compute_levels(swing_high, swing_low, direction)
    insight = generate_insight(current_price, levels, asset_type, swing_high, swing_low)

    return AnalysisResult(
        swing_high=swing_high,
        swing_low=swing_low,
        current_price=current_price,
        asset_type=asset_type,
        direction=direction,
        levels=levels,
        insight=insight,
    )


def scan_chart(
    image: RasterImage,
    recognizer: TextRecognizer,
    calibration: Optional[CalibrationConfig] = None,
    detection: Optional[DetectionConfig] = None,
) -> ChartScan:
    """
    Run the full screenshot pipeline.

    Raises:
        InsufficientLabelsError: If the price axis could not be calibrated.
        DegenerateSwingError: If no usable swing was found in the plot.
        RecognitionError: If the recognizer itself fails.
    """
    labels = extract_price_labels(image, recognizer)
    asset = extract_asset_info(image, recognizer)

    price_map = calibrate(labels, image.height, calibration)
    swings = detect_swing_points(image, price_map, detection)

    result = analyze_levels(swings.swing_high, swings.swing_low, swings.current_price, asset.asset_type)
    logger.info(
        f"Scanned {asset.name}: {result.direction.value}, zone={result.insight.zone.value}, "
        f"sentiment={result.insight.sentiment.value}"
    )
    return ChartScan(asset=asset, price_map=price_map, swings=swings, result=result, labels=labels)


def analyze_manual(entry: ManualEntry, image_height: Optional[int] = None) -> ChartScan:
    """
    Analyze user-supplied values, bypassing calibration and swing detection.

    A manual price map is only built when the image height is known.

    Raises:
        DegenerateSwingError: If entry.high <= entry.low.
    """
    if entry.high <= entry.low:
        raise DegenerateSwingError(f"High {entry.high} must be above low {entry.low}")

    asset_type = AssetType(entry.asset_type)
    price_map = build_manual_price_map(entry.high, entry.low, image_height) if image_height else None
    swings = SwingResult(swing_high=entry.high, swing_low=entry.low, current_price=entry.current)
    result = analyze_levels(entry.high, entry.low, entry.current, asset_type)

    return ChartScan(
        asset=AssetInfo(name=asset_type.value.upper(), asset_type=asset_type, confidence=100),
        price_map=price_map,
        swings=swings,
        result=result,
    )
