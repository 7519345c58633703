"""
Conversion helpers for scan routers.

Build API responses from pipeline results.
"""

from typing import Optional

from ...fib_analysis.pipeline import ChartScan
from ...fib_analysis.types import FibLevel, Insight, NearestLevel, PriceMap
from ..schemas import (
    AnalysisResponse,
    FibLevelResponse,
    InsightResponse,
    NearestLevelResponse,
    PriceMapResponse,
)


def level_to_response(level: Optional[FibLevel]) -> Optional[FibLevelResponse]:
    if level is None:
        return None
    return FibLevelResponse(
        ratio=level.ratio,
        label=level.label,
        price=level.price,
        is_golden_pocket=level.is_golden_pocket,
    )


def nearest_to_response(level: Optional[NearestLevel]) -> Optional[NearestLevelResponse]:
    if level is None:
        return None
    return NearestLevelResponse(**level.to_dict())


def insight_to_response(insight: Insight) -> InsightResponse:
    return InsightResponse(
        zone=insight.zone,
        sentiment=insight.sentiment,
        nearest_level=nearest_to_response(insight.nearest_level),
        next_support=level_to_response(insight.next_support),
        next_resistance=level_to_response(insight.next_resistance),
        next_target=level_to_response(insight.next_target),
        narrative=insight.narrative,
    )


def price_map_to_response(price_map: Optional[PriceMap]) -> Optional[PriceMapResponse]:
    if price_map is None:
        return None
    return PriceMapResponse(**price_map.to_dict())


def scan_to_response(scan: ChartScan, asset_name: str, scan_id: Optional[int] = None) -> AnalysisResponse:
    """Flatten a ChartScan into the analysis response."""
    result = scan.result
    return AnalysisResponse(
        asset_name=asset_name,
        asset_type=result.asset_type,
        swing_high=result.swing_high,
        swing_low=result.swing_low,
        current_price=result.current_price,
        direction=result.direction,
        levels=[level_to_response(level) for level in result.levels],
        insight=insight_to_response(result.insight),
        price_map=price_map_to_response(scan.price_map),
        label_count=len(scan.labels),
        scan_id=scan_id,
    )
