"""Crop chart regions and read price labels and the asset header."""

import logging
import math
from typing import List

from ..fib_analysis.types import AssetInfo, LabelObservation
from .asset_detector import detect_asset_type
from .image import RasterImage
from .label_parser import labels_from_lines
from .recognizer import TextRecognizer, preprocess_for_ocr

logger = logging.getLogger(__name__)

# Price axis gutter: right 18% of the image, full height
PRICE_AXIS_FRACTION = 0.18
# Header with the ticker: top 12% of the image, full width
HEADER_FRACTION = 0.12


def extract_price_labels(image: RasterImage, recognizer: TextRecognizer) -> List[LabelObservation]:
    """
    Read axis labels from the price gutter.

    The crop spans the full image height, so recognized rows are already
    image rows.
    """
    crop_x = math.floor(image.width * (1 - PRICE_AXIS_FRACTION))
    crop = image.region(crop_x, 0, image.width, image.height)

    result = recognizer.recognize(preprocess_for_ocr(crop))
    labels = labels_from_lines(result.lines)
    logger.info(f"Read {len(labels)} price labels from {len(result.lines)} lines "
                f"(confidence {result.confidence:.1f})")
    return labels


def extract_asset_info(image: RasterImage, recognizer: TextRecognizer) -> AssetInfo:
    """Detect the asset name and class from the chart header."""
    crop_h = math.floor(image.height * HEADER_FRACTION)
    crop = image.region(0, 0, image.width, crop_h)
    if crop.size == 0:
        return detect_asset_type("", 0)

    result = recognizer.recognize(preprocess_for_ocr(crop))
    asset = detect_asset_type(result.text, result.confidence)
    logger.info(f"Detected asset {asset.name} ({asset.asset_type.value})")
    return asset
