"""
Pydantic models for the Scan API.

All request/response schemas for analysis and scan history endpoints.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, FiniteFloat, model_validator

from ..fib_analysis.types import AssetType, Direction, Sentiment, Zone


# ============================================================================
# Analysis Models
# ============================================================================


class FibLevelResponse(BaseModel):
    """A single retracement level."""
    ratio: float
    label: str
    price: float
    is_golden_pocket: bool


class NearestLevelResponse(FibLevelResponse):
    """Nearest level with its distance from the current price."""
    distance: float
    is_above: bool


class InsightResponse(BaseModel):
    zone: Zone
    sentiment: Sentiment
    nearest_level: Optional[NearestLevelResponse] = None
    next_support: Optional[FibLevelResponse] = None
    next_resistance: Optional[FibLevelResponse] = None
    next_target: Optional[FibLevelResponse] = None
    narrative: str


class PriceMapResponse(BaseModel):
    top_price: float
    bottom_price: float
    top_pixel_row: int
    bottom_pixel_row: int
    pixels_per_unit: float


class AnalysisResponse(BaseModel):
    """Full analysis of one chart or manual entry."""
    asset_name: str
    asset_type: AssetType
    swing_high: float
    swing_low: float
    current_price: Optional[float] = None
    direction: Direction
    levels: List[FibLevelResponse]
    insight: InsightResponse
    price_map: Optional[PriceMapResponse] = None
    label_count: int = 0
    scan_id: Optional[int] = None


class ManualAnalysisRequest(BaseModel):
    """Manual fallback input."""
    high: FiniteFloat
    low: FiniteFloat
    current: Optional[FiniteFloat] = None
    asset_type: AssetType = AssetType.CRYPTO
    asset_name: Optional[str] = None
    image_height: Optional[int] = Field(default=None, gt=0)
    save: bool = False


# ============================================================================
# Scan History Models
# ============================================================================


class ScanCreateRequest(BaseModel):
    """Flat scan record as persisted."""
    asset_name: str
    asset_type: AssetType
    swing_high: FiniteFloat
    swing_low: FiniteFloat
    current_price: Optional[FiniteFloat] = None
    direction: Direction

    @model_validator(mode="after")
    def check_swing_bounds(self) -> ScanCreateRequest:
        # Stored records must be recomputable by analyze_levels
        if self.swing_high <= self.swing_low:
            raise ValueError("swing_high must be greater than swing_low")
        return self


class ScanResponse(ScanCreateRequest):
    id: int
    created_at: Optional[str] = None


class ScanListResponse(BaseModel):
    scans: List[ScanResponse]
    count: int


class AnalyzeRequest(BaseModel):
    """Screenshot upload (base64-encoded PNG/JPEG)."""
    image_data: str
    save: bool = False
