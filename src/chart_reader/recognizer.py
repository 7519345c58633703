"""
Text recognition handle.

Wraps the Tesseract engine (through pytesseract) behind a small interface so
the rest of the code only sees recognized lines with vertical bounds. The
handle has an explicit lifecycle: create it once, start() it, share it across
analysis calls, close() it on shutdown. A lock serializes calls so a single
handle can be shared by concurrent requests.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Protocol

import numpy as np
import pytesseract
from PIL import Image

logger = logging.getLogger(__name__)


class RecognitionError(Exception):
    """The recognition engine failed on an image."""


class RecognizerNotReadyError(RecognitionError):
    """recognize() was called on a handle that is not started or already closed."""


@dataclass(frozen=True)
class RecognizedLine:
    """A line of recognized text and its vertical pixel bounds."""
    text: str
    row0: int
    row1: int


@dataclass(frozen=True)
class RecognitionResult:
    lines: List[RecognizedLine] = field(default_factory=list)
    confidence: float = 0.0

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


class TextRecognizer(Protocol):
    """Anything that can read text lines out of an image crop."""

    def recognize(self, pixels: np.ndarray) -> RecognitionResult: ...


def preprocess_for_ocr(pixels: np.ndarray) -> np.ndarray:
    """
    Binarize an RGB(A) crop for recognition.

    Grayscale, stretch contrast around mid-gray, then threshold to pure
    black/white. Returns a 2-D uint8 array.
    """
    data = pixels[..., :3].astype(np.float64)
    gray = data[..., 0] * 0.299 + data[..., 1] * 0.587 + data[..., 2] * 0.114
    enhanced = np.where(gray < 128, gray * 0.5, 128 + (gray - 128) * 1.5)
    return np.where(enhanced > 140, 255, 0).astype(np.uint8)


def _lines_from_data(data: dict) -> RecognitionResult:
    """Group pytesseract word boxes into lines."""
    grouped: "OrderedDict[tuple, dict]" = OrderedDict()
    confidences = []

    for i, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        conf = float(data["conf"][i])
        if not word or conf < 0:
            continue
        confidences.append(conf)

        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        top = int(data["top"][i])
        bottom = top + int(data["height"][i])
        entry = grouped.setdefault(key, {"words": [], "row0": top, "row1": bottom})
        entry["words"].append(word)
        entry["row0"] = min(entry["row0"], top)
        entry["row1"] = max(entry["row1"], bottom)

    lines = [
        RecognizedLine(text=" ".join(entry["words"]), row0=entry["row0"], row1=entry["row1"])
        for entry in grouped.values()
    ]
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return RecognitionResult(lines=lines, confidence=confidence)


class TesseractRecognizer:
    """
    Tesseract-backed recognizer.

    Usage:
        with TesseractRecognizer() as recognizer:
            result = recognizer.recognize(crop)
    """

    def __init__(self, lang: str = "eng", config: str = "--oem 3 --psm 6"):
        self.lang = lang
        self.config = config
        self._lock = threading.Lock()
        self._started = False

    @property
    def is_ready(self) -> bool:
        return self._started

    def start(self) -> "TesseractRecognizer":
        """Check that the engine is available. Safe to call more than once."""
        if self._started:
            return self
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise RecognizerNotReadyError(f"Tesseract engine not available: {e}") from e
        self._started = True
        logger.info(f"Text recognizer started (tesseract {version}, lang={self.lang})")
        return self

    def close(self) -> None:
        with self._lock:
            if self._started:
                self._started = False
                logger.info("Text recognizer closed")

    def __enter__(self) -> "TesseractRecognizer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def recognize(self, pixels: np.ndarray) -> RecognitionResult:
        """
        Recognize text lines in a crop.

        Raises:
            RecognizerNotReadyError: If the handle is not started.
            RecognitionError: If the engine fails.
        """
        with self._lock:
            if not self._started:
                raise RecognizerNotReadyError("Recognizer is not started")
            try:
                data = pytesseract.image_to_data(
                    Image.fromarray(pixels),
                    lang=self.lang,
                    config=self.config,
                    output_type=pytesseract.Output.DICT,
                )
            except (pytesseract.TesseractError, RuntimeError) as e:
                raise RecognitionError(f"Text recognition failed: {e}") from e

        return _lines_from_data(data)
