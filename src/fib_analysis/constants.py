"""Centralized constants for Fibonacci analysis."""

# Standard retracement ratios, ascending. Every run produces one level per ratio.
FIB_RATIOS = [
    0.0,     # Swing extreme the retracement starts from
    0.236,   # Shallow retracement
    0.382,   # Standard retracement
    0.5,     # Half retracement
    0.618,   # Golden pocket
    0.786,   # Deep retracement
    1.0,     # Opposite swing extreme
]

FIB_LABELS = {
    0.0: "0%",
    0.236: "23.6%",
    0.382: "38.2%",
    0.5: "50%",
    0.618: "61.8%",
    0.786: "78.6%",
    1.0: "100%",
}

GOLDEN_POCKET_RATIO = 0.618

# Insight thresholds
GOLDEN_POCKET_RANGE_FRACTION = 0.03
SUPPORT_RATIO_THRESHOLD = 0.618
RESISTANCE_RATIO_THRESHOLD = 0.382
BULLISH_POSITION = 0.65
BEARISH_POSITION = 0.35

# Fraction of the image height reserved above and below a manual price map
MANUAL_MAP_MARGIN = 0.1
