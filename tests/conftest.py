"""
Shared test fixtures and helpers for chart scanner tests.
"""

import base64
import io
from typing import List, Sequence, Tuple

import numpy as np
import pytest
from PIL import Image

from src.chart_reader.image import RasterImage
from src.chart_reader.recognizer import RecognitionError, RecognizedLine, RecognitionResult
from src.fib_analysis.types import LabelObservation, PriceMap

BACKGROUND = (20, 20, 20, 255)
GREEN = (0, 200, 0, 255)
RED = (200, 0, 0, 255)

# Axis labels for a 1000x1000 chart where price = 1000 - row
AXIS_LINES = [
    RecognizedLine(text="900.0", row0=95, row1=105),
    RecognizedLine(text="700.0", row0=295, row1=305),
    RecognizedLine(text="500.0", row0=495, row1=505),
    RecognizedLine(text="300.0", row0=695, row1=705),
]


def make_labels(*pairs: Tuple[float, int]) -> List[LabelObservation]:
    """Helper to create label observations from (value, pixel_row) pairs."""
    return [LabelObservation(value=value, pixel_row=row) for value, row in pairs]


def unit_price_map(height: int = 1000) -> PriceMap:
    """PriceMap where price = height - row (one pixel per unit)."""
    return PriceMap(
        top_price=float(height),
        bottom_price=0.0,
        top_pixel_row=0,
        bottom_pixel_row=height,
        pixels_per_unit=1.0,
    )


def blank_canvas(width: int = 1000, height: int = 1000) -> np.ndarray:
    """Dark-theme RGBA canvas."""
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = BACKGROUND
    return canvas


def paint(canvas: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: Sequence[int]) -> np.ndarray:
    """Fill the rectangle [x0, x1) x [y0, y1) with an RGBA color."""
    canvas[y0:y1, x0:x1] = color
    return canvas


def make_chart(width: int = 1000, height: int = 1000, with_strip: bool = True) -> np.ndarray:
    """
    Synthetic chart with one green and one red candle block.

    With price = 1000 - row: swing high 800 (row 200), swing low 301 (row 699),
    and, when with_strip is set, a current price of 395 (mean row 605).
    """
    canvas = blank_canvas(width, height)
    paint(canvas, 100, 200, 120, 400, GREEN)
    paint(canvas, 200, 500, 220, 700, RED)
    if with_strip:
        paint(canvas, 760, 600, 780, 611, GREEN)
    return canvas


def encode_png(pixels: np.ndarray) -> str:
    """Base64 PNG of an RGBA array, as sent to /api/analyze."""
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


class FakeRecognizer:
    """
    Stand-in for TesseractRecognizer.

    Tall crops are treated as the price axis gutter and wide crops as the
    chart header.
    """

    def __init__(self, axis_lines=None, header: str = "BINANCE:BTCUSDT", confidence: float = 90.0, fail: bool = False):
        self.axis_lines = list(axis_lines) if axis_lines is not None else list(AXIS_LINES)
        self.header = header
        self.confidence = confidence
        self.fail = fail
        self.calls = 0

    def recognize(self, pixels: np.ndarray) -> RecognitionResult:
        self.calls += 1
        if self.fail:
            raise RecognitionError("engine crashed")
        if pixels.shape[0] > pixels.shape[1]:
            return RecognitionResult(lines=self.axis_lines, confidence=self.confidence)
        header = [RecognizedLine(text=self.header, row0=10, row1=30)] if self.header else []
        return RecognitionResult(lines=header, confidence=self.confidence)


@pytest.fixture
def chart_image() -> RasterImage:
    return RasterImage(make_chart())


@pytest.fixture
def fake_recognizer() -> FakeRecognizer:
    return FakeRecognizer()
