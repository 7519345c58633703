"""Core data types for chart calibration and Fibonacci analysis."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Retracement direction used when laying out levels."""
    UPTREND = "uptrend"
    DOWNTREND = "downtrend"


class TargetKind(str, Enum):
    """Which side of the current price to look for the next level."""
    SUPPORT = "support"
    RESISTANCE = "resistance"


class Zone(str, Enum):
    GOLDEN_POCKET = "golden_pocket"
    SUPPORT = "support"
    RESISTANCE = "resistance"
    UNKNOWN = "unknown"


class Sentiment(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class AssetType(str, Enum):
    """Asset class. Only affects price formatting and narrative wording."""
    CRYPTO = "crypto"
    FOREX = "forex"
    STOCK = "stock"


@dataclass(frozen=True)
class LabelObservation:
    """Candidate axis price read at a vertical pixel position."""
    value: float
    pixel_row: int


@dataclass(frozen=True)
class PriceMap:
    """
    Linear mapping between pixel rows and prices.

    Rows grow downward, so the top row carries the higher price.
    Invariants: top_price > bottom_price, pixels_per_unit > 0,
    bottom_pixel_row > top_pixel_row.
    """
    top_price: float
    bottom_price: float
    top_pixel_row: int
    bottom_pixel_row: int
    pixels_per_unit: float

    def __post_init__(self):
        if self.top_price <= self.bottom_price:
            raise ValueError("top_price must be strictly greater than bottom_price")
        if self.pixels_per_unit <= 0:
            raise ValueError("pixels_per_unit must be positive")
        if self.bottom_pixel_row <= self.top_pixel_row:
            raise ValueError("bottom_pixel_row must be below top_pixel_row")

    def to_dict(self) -> dict:
        return {
            'top_price': self.top_price,
            'bottom_price': self.bottom_price,
            'top_pixel_row': self.top_pixel_row,
            'bottom_pixel_row': self.bottom_pixel_row,
            'pixels_per_unit': self.pixels_per_unit,
        }


@dataclass(frozen=True)
class FibLevel:
    """A single retracement level."""
    ratio: float
    label: str
    price: float
    is_golden_pocket: bool

    def to_dict(self) -> dict:
        return {
            'ratio': self.ratio,
            'label': self.label,
            'price': self.price,
            'is_golden_pocket': self.is_golden_pocket,
        }


@dataclass(frozen=True)
class NearestLevel(FibLevel):
    """A FibLevel annotated with its distance from the current price."""
    distance: float = 0.0
    is_above: bool = False

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['distance'] = self.distance
        data['is_above'] = self.is_above
        return data


@dataclass(frozen=True)
class SwingResult:
    """Swing extrema and current price estimated from a chart image."""
    swing_high: Optional[float] = None
    swing_low: Optional[float] = None
    current_price: Optional[float] = None

    @classmethod
    def empty(cls) -> "SwingResult":
        return cls()

    @property
    def has_swings(self) -> bool:
        return self.swing_high is not None and self.swing_low is not None


@dataclass(frozen=True)
class Insight:
    """Zone/sentiment classification and narrative for one set of inputs."""
    zone: Zone
    sentiment: Sentiment
    nearest_level: Optional[NearestLevel]
    next_support: Optional[FibLevel]
    next_resistance: Optional[FibLevel]
    next_target: Optional[FibLevel]
    narrative: str

    def to_dict(self) -> dict:
        return {
            'zone': self.zone.value,
            'sentiment': self.sentiment.value,
            'nearest_level': self.nearest_level.to_dict() if self.nearest_level else None,
            'next_support': self.next_support.to_dict() if self.next_support else None,
            'next_resistance': self.next_resistance.to_dict() if self.next_resistance else None,
            'next_target': self.next_target.to_dict() if self.next_target else None,
            'narrative': self.narrative,
        }


@dataclass(frozen=True)
class AssetInfo:
    """Asset name and class detected from the chart header."""
    name: str
    asset_type: AssetType
    confidence: float
