"""
Insight Engine

Classifies where the current price sits relative to the retracement levels
(zone), how far it has travelled through the swing (sentiment), and renders a
short narrative from a fixed template table.

Everything here is a pure function of its inputs; an Insight is rebuilt from
scratch whenever any input changes.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from .constants import (
    BEARISH_POSITION,
    BULLISH_POSITION,
    GOLDEN_POCKET_RANGE_FRACTION,
    RESISTANCE_RATIO_THRESHOLD,
    SUPPORT_RATIO_THRESHOLD,
)
from .formatting import asset_label, format_price, timeframe_for
from .level_calculator import find_nearest_level, find_next_target
from .types import AssetType, FibLevel, Insight, NearestLevel, Sentiment, TargetKind, Zone

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_NARRATIVE = "Not enough data to generate an insight."

# (zone, sentiment) -> (zone sentence, target sentence, sentence when no target)
# Target sentences always refer to Insight.next_target.
NARRATIVE_TEMPLATES: Dict[Tuple[Zone, Sentiment], Tuple[str, str, str]] = {
    (Zone.GOLDEN_POCKET, Sentiment.BULLISH): (
        "Price is sitting right in the GOLDEN POCKET (level {level} = {level_price}), "
        "the strongest bounce zone of a Fibonacci retracement. ",
        "If price holds above this level, a move toward {target} ({target_price}) is likely.",
        "If price holds above this level, the next resistance is open.",
    ),
    (Zone.GOLDEN_POCKET, Sentiment.NEUTRAL): (
        "Price is sitting right in the GOLDEN POCKET (level {level} = {level_price}), "
        "the strongest bounce zone of a Fibonacci retracement. ",
        "A confirmed bounce here targets {target} ({target_price}).",
        "Watch how price reacts at this level.",
    ),
    (Zone.GOLDEN_POCKET, Sentiment.BEARISH): (
        "Price is sitting right in the GOLDEN POCKET (level {level} = {level_price}), "
        "the strongest bounce zone of a Fibonacci retracement. ",
        "If the {timeframe} candle closes below this level, the next target is {target} ({target_price}).",
        "If the {timeframe} candle closes below this level, watch for further downside.",
    ),
    (Zone.SUPPORT, Sentiment.BULLISH): (
        "Price is holding at support level {level} ({level_price}). ",
        "A bounce from this area is possible. Nearest resistance target: {target} ({target_price}).",
        "A bounce from this area is possible.",
    ),
    (Zone.SUPPORT, Sentiment.NEUTRAL): (
        "Price is holding at support level {level} ({level_price}). ",
        "A bounce from this area is possible. Nearest resistance target: {target} ({target_price}).",
        "A bounce from this area is possible.",
    ),
    (Zone.SUPPORT, Sentiment.BEARISH): (
        "Price is holding at support level {level} ({level_price}). ",
        "If the {timeframe} candle closes below this level, the next target is {target} ({target_price}).",
        "If the {timeframe} candle closes below this level, watch for further downside.",
    ),
    (Zone.RESISTANCE, Sentiment.BULLISH): (
        "Price is approaching resistance at level {level} ({level_price}). ",
        "On a breakout above this level, the next target is {target} ({target_price}).",
        "On a breakout above this level, further upside is open.",
    ),
    (Zone.RESISTANCE, Sentiment.NEUTRAL): (
        "Price is approaching resistance at level {level} ({level_price}). ",
        "Watch for a rejection here; a clean break targets {target} ({target_price}).",
        "Watch for a rejection in this area.",
    ),
    (Zone.RESISTANCE, Sentiment.BEARISH): (
        "Price is approaching resistance at level {level} ({level_price}). ",
        "Watch for a rejection in this area. Nearest support: {target} ({target_price}).",
        "Watch for a rejection in this area.",
    ),
}


def determine_zone(current_price: float, nearest: Optional[NearestLevel], levels: List[FibLevel]) -> Zone:
    """
    Classify the current price into a zone.

    The golden pocket check runs first and wins regardless of which level
    is nearest.
    """
    if nearest is None:
        return Zone.UNKNOWN

    golden = next((lvl for lvl in levels if lvl.is_golden_pocket), None)
    if golden is not None:
        total_range = abs(levels[0].price - levels[-1].price)
        if total_range > 0 and abs(current_price - golden.price) / total_range < GOLDEN_POCKET_RANGE_FRACTION:
            return Zone.GOLDEN_POCKET

    if nearest.ratio >= SUPPORT_RATIO_THRESHOLD:
        return Zone.SUPPORT
    if nearest.ratio <= RESISTANCE_RATIO_THRESHOLD:
        return Zone.RESISTANCE

    return Zone.RESISTANCE if nearest.is_above else Zone.SUPPORT


def determine_sentiment(
    current_price: float,
    swing_high: Optional[float],
    swing_low: Optional[float],
) -> Sentiment:
    """Sentiment from the normalized position of price inside the swing (0 = low, 1 = high)."""
    if swing_high is None or swing_low is None:
        return Sentiment.NEUTRAL

    swing_range = swing_high - swing_low
    if swing_range <= 0:
        return Sentiment.NEUTRAL

    position = (current_price - swing_low) / swing_range
    if position > BULLISH_POSITION:
        return Sentiment.BULLISH
    if position < BEARISH_POSITION:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def build_narrative(
    current_price: float,
    nearest: NearestLevel,
    next_target: Optional[FibLevel],
    zone: Zone,
    sentiment: Sentiment,
    asset_type: AssetType,
) -> str:
    zone_text, target_text, no_target_text = NARRATIVE_TEMPLATES[(zone, sentiment)]

    fields = {
        "level": nearest.label,
        "level_price": format_price(nearest.price, asset_type),
        "timeframe": timeframe_for(asset_type),
        "target": next_target.label if next_target else None,
        "target_price": format_price(next_target.price, asset_type) if next_target else None,
    }

    narrative = (
        f"This {asset_label(asset_type)} is currently trading at "
        f"{format_price(current_price, asset_type)}. "
    )
    narrative += zone_text.format(**fields)
    narrative += (target_text if next_target else no_target_text).format(**fields)
    narrative += f" Overall bias: {sentiment.value}."
    return narrative


def generate_insight(
    current_price: Optional[float],
    levels: Optional[List[FibLevel]],
    asset_type: Union[AssetType, str] = AssetType.CRYPTO,
    swing_high: Optional[float] = None,
    swing_low: Optional[float] = None,
) -> Insight:
    """
    Generate a zone/sentiment classification and narrative.

    Args:
        current_price: Latest price. None (or zero) means unknown.
        levels: The seven retracement levels in ascending ratio order.
        asset_type: Only affects how prices are written in the narrative.
        swing_high: Swing high used for the sentiment position.
        swing_low: Swing low used for the sentiment position.

    Returns:
        Insight. With no price or levels, a fixed "insufficient data" Insight.
    """
    if not current_price or not levels:
        return Insight(
            zone=Zone.UNKNOWN,
            sentiment=Sentiment.NEUTRAL,
            nearest_level=None,
            next_support=None,
            next_resistance=None,
            next_target=None,
            narrative=INSUFFICIENT_DATA_NARRATIVE,
        )

    asset_type = AssetType(asset_type)
    nearest = find_nearest_level(current_price, levels)
    next_support = find_next_target(current_price, levels, TargetKind.SUPPORT)
    next_resistance = find_next_target(current_price, levels, TargetKind.RESISTANCE)

    zone = determine_zone(current_price, nearest, levels)
    sentiment = determine_sentiment(current_price, swing_high, swing_low)
    next_target = next_support if sentiment == Sentiment.BEARISH else next_resistance

    logger.debug(f"Insight: zone={zone.value} sentiment={sentiment.value} nearest={nearest.label}")

    return Insight(
        zone=zone,
        sentiment=sentiment,
        nearest_level=nearest,
        next_support=next_support,
        next_resistance=next_resistance,
        next_target=next_target,
        narrative=build_narrative(current_price, nearest, next_target, zone, sentiment, asset_type),
    )
