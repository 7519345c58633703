from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from .constants import FIB_RATIOS, FIB_LABELS, GOLDEN_POCKET_RATIO
from .types import Direction, FibLevel, NearestLevel, TargetKind


def round_price(price: float, reference: float) -> float:
    """
    Round a price with precision chosen from the reference magnitude.

    Args:
        price: The price to round.
        reference: Price whose magnitude picks the precision (the swing high).

    Returns:
        2 decimals for reference >= 100, 4 decimals for reference >= 1,
        8 decimals below that.
    """
    if reference >= 100:
        quantum = Decimal("0.01")
    elif reference >= 1:
        quantum = Decimal("0.0001")
    else:
        quantum = Decimal("0.00000001")

    return float(Decimal(str(price)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_levels(
    swing_high: float,
    swing_low: float,
    direction: Union[Direction, str] = Direction.UPTREND,
) -> List[FibLevel]:
    """
    Computes the seven retracement levels of a swing.

    Args:
        swing_high: The swing high price.
        swing_low: The swing low price.
        direction: "uptrend" retraces from the high down, "downtrend"
            retraces from the low up.

    Returns:
        A list of FibLevel objects sorted by ascending ratio.

    Raises:
        ValueError: If direction is invalid.
    """
    direction = Direction(direction)
    swing_size = swing_high - swing_low

    if swing_size <= 0:
        # Flat range: every level collapses onto the high
        return [
            FibLevel(
                ratio=ratio,
                label=FIB_LABELS[ratio],
                price=swing_high,
                is_golden_pocket=ratio == GOLDEN_POCKET_RATIO,
            )
            for ratio in FIB_RATIOS
        ]

    levels = []
    for ratio in FIB_RATIOS:
        if direction == Direction.UPTREND:
            raw_price = swing_high - swing_size * ratio
        else:
            raw_price = swing_low + swing_size * ratio

        levels.append(FibLevel(
            ratio=ratio,
            label=FIB_LABELS[ratio],
            price=round_price(raw_price, swing_high),
            is_golden_pocket=ratio == GOLDEN_POCKET_RATIO,
        ))

    return levels


def find_nearest_level(current_price: float, levels: List[FibLevel]) -> NearestLevel:
    """
    Find the level closest to the current price.

    Ties keep the first level in the given (ascending-ratio) order.

    Raises:
        ValueError: If levels is empty.
    """
    if not levels:
        raise ValueError("Cannot find nearest level in an empty level set.")

    nearest = None
    min_distance = float('inf')
    for level in levels:
        distance = abs(current_price - level.price)
        if distance < min_distance:
            min_distance = distance
            nearest = level

    return NearestLevel(
        ratio=nearest.ratio,
        label=nearest.label,
        price=nearest.price,
        is_golden_pocket=nearest.is_golden_pocket,
        distance=min_distance,
        is_above=current_price >= nearest.price,
    )


def find_next_target(
    current_price: float,
    levels: List[FibLevel],
    kind: Union[TargetKind, str] = TargetKind.SUPPORT,
) -> Optional[FibLevel]:
    """
    Find the nearest level strictly below (support) or above (resistance) a price.

    Returns:
        The level, or None when price is beyond every level on that side.
    """
    kind = TargetKind(kind)
    by_price_desc = sorted(levels, key=lambda lvl: lvl.price, reverse=True)

    if kind == TargetKind.SUPPORT:
        candidates = by_price_desc
        matches = (lvl for lvl in candidates if lvl.price < current_price)
    else:
        candidates = list(reversed(by_price_desc))
        matches = (lvl for lvl in candidates if lvl.price > current_price)

    return next(matches, None)


def determine_trend(swing_high: float, swing_low: float, current_price: float) -> Direction:
    """Uptrend when price sits at or above the swing midpoint."""
    midpoint = (swing_high + swing_low) / 2
    return Direction.UPTREND if current_price >= midpoint else Direction.DOWNTREND
