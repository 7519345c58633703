"""
Axis label parsing.

Turns recognized text lines from the price-axis gutter into LabelObservations.
Recognition output is messy: thousands separators read as dots, spaces inside
numbers, stray symbols. Anything that cannot be parsed is skipped rather than
failing the whole calibration.
"""

import logging
import math
import re
from typing import Iterable, List, Optional

from ..fib_analysis.types import LabelObservation
from .recognizer import RecognizedLine

logger = logging.getLogger(__name__)

# Observations closer than this (in pixels) are treated as the same label
DEDUPE_DISTANCE = 5

_DISALLOWED_CHARS = re.compile(r"[^0-9., \-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_price_text(text: str) -> Optional[float]:
    """
    Parse a price from recognized label text.

    Commas are treated as thousands separators. When several dots remain
    (a comma misread as a dot, e.g. "65.800.0"), only the last one is kept
    as the decimal point.

    Returns:
        The absolute price, or None for empty, unparseable or zero text.
    """
    cleaned = _DISALLOWED_CHARS.sub("", text).strip()
    # "65 800.0" -> "65800.0"
    cleaned = re.sub(r"\s+", "", cleaned)
    if not cleaned:
        return None

    cleaned = cleaned.replace(",", "")

    last_dot = cleaned.rfind(".")
    if last_dot != -1:
        cleaned = cleaned[:last_dot].replace(".", "") + "." + cleaned[last_dot + 1:]

    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None

    value = float(match.group(0))
    if math.isnan(value) or value == 0:
        return None
    return abs(value)


def _center_row(line: RecognizedLine) -> int:
    # Round half up so x.5 centers land on the lower row
    return math.floor((line.row0 + line.row1) / 2 + 0.5)


def labels_from_lines(lines: Iterable[RecognizedLine]) -> List[LabelObservation]:
    """
    Convert recognized lines into label observations sorted top to bottom.

    Observations within DEDUPE_DISTANCE pixels of an already kept one are
    dropped; the topmost occurrence wins.
    """
    observations = []
    for line in lines:
        value = parse_price_text(line.text)
        if value is None:
            logger.debug(f"Skipping unparseable label text {line.text!r}")
            continue
        observations.append(LabelObservation(value=value, pixel_row=_center_row(line)))

    observations.sort(key=lambda obs: obs.pixel_row)

    deduped: List[LabelObservation] = []
    for obs in observations:
        if any(abs(kept.pixel_row - obs.pixel_row) < DEDUPE_DISTANCE for kept in deduped):
            continue
        deduped.append(obs)

    return deduped
