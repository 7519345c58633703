# Chart Reader Module
#
# Collaborators that turn a chart screenshot into analysis inputs:
# decoded pixels, axis labels and the asset header.

from .image import RasterImage
from .recognizer import (
    RecognizedLine,
    RecognitionResult,
    RecognitionError,
    RecognizerNotReadyError,
    TextRecognizer,
    TesseractRecognizer,
    preprocess_for_ocr,
)
from .label_parser import parse_price_text, labels_from_lines
from .asset_detector import AssetRule, ASSET_RULES, detect_asset_type
from .extraction import extract_price_labels, extract_asset_info
