# Fibonacci Analysis Module
#
# Price calibration, swing detection, retracement levels and insights.
# The screenshot pipeline lives in .pipeline (imported explicitly, since it
# depends on the chart_reader collaborators).

from .types import (
    AssetInfo,
    AssetType,
    Direction,
    FibLevel,
    Insight,
    LabelObservation,
    NearestLevel,
    PriceMap,
    Sentiment,
    SwingResult,
    TargetKind,
    Zone,
)
from .errors import (
    FibAnalysisError,
    RecoverableAnalysisError,
    InsufficientLabelsError,
    DegenerateSwingError,
)
from .detection_config import CalibrationConfig, ColorThresholds, DetectionConfig
from .level_calculator import (
    compute_levels,
    find_nearest_level,
    find_next_target,
    determine_trend,
    round_price,
)
from .price_calibrator import (
    build_price_map,
    calibrate,
    pixel_row_to_price,
    price_to_pixel_row,
    build_manual_price_map,
)
from .swing_detector import detect_swing_points, detect_current_price
from .insight_engine import generate_insight
from .formatting import format_price
