"""
Tests for image decoding, recognition plumbing and region extraction.

The Tesseract engine itself is never invoked; pytesseract calls are
monkeypatched where the handle lifecycle is exercised.
"""

import base64

import numpy as np
import pytest
import pytesseract
from PIL import Image

from src.chart_reader.extraction import extract_asset_info, extract_price_labels
from src.chart_reader.image import RasterImage
from src.chart_reader.recognizer import (
    RecognitionError,
    RecognizerNotReadyError,
    TesseractRecognizer,
    _lines_from_data,
    preprocess_for_ocr,
)
from src.fib_analysis.types import AssetType

from conftest import FakeRecognizer, encode_png, make_chart


class TestRasterImage:
    """Tests for RasterImage."""

    def test_rgb_gets_alpha(self):
        image = RasterImage.from_array(np.zeros((10, 20, 3), dtype=np.uint8))
        assert image.width == 20
        assert image.height == 10
        assert image.pixels.shape == (10, 20, 4)
        assert (image.pixels[..., 3] == 255).all()

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            RasterImage(np.zeros((10, 20), dtype=np.uint8))

    def test_region_clipped(self):
        image = RasterImage(make_chart(width=100, height=50))
        assert image.region(90, 40, 200, 200).shape == (10, 10, 4)
        assert image.region(-10, -10, 5, 5).shape == (5, 5, 4)

    def test_empty_region(self):
        image = RasterImage(make_chart(width=100, height=50))
        assert image.region(0, 0, 100, 0).size == 0

    def test_from_bytes(self):
        pixels = make_chart(width=100, height=80)
        image = RasterImage.from_bytes(base64.b64decode(encode_png(pixels)))
        assert image.width == 100
        assert image.height == 80
        assert (image.pixels == pixels).all()

    def test_from_bytes_rejects_garbage(self):
        with pytest.raises(OSError):
            RasterImage.from_bytes(b"not an image")

    def test_open(self, tmp_path):
        path = tmp_path / "chart.png"
        Image.fromarray(make_chart(width=60, height=40)).save(path)
        assert RasterImage.open(path).height == 40


class TestPreprocess:
    """Tests for preprocess_for_ocr."""

    def test_binarized(self):
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (255, 255, 255, 255)
        pixels[1, 1] = (120, 120, 120, 255)
        out = preprocess_for_ocr(pixels)
        assert out.shape == (2, 2)
        assert out.dtype == np.uint8
        assert out[0, 0] == 255
        assert out[1, 1] == 0
        assert out[0, 1] == 0


class TestLinesFromData:
    """Tests for grouping pytesseract word boxes into lines."""

    def test_groups_words_by_line(self):
        data = {
            "text": ["65,800", "00", "", "64,000"],
            "conf": ["90", "80", "-1", "70"],
            "block_num": [1, 1, 1, 1],
            "par_num": [1, 1, 1, 1],
            "line_num": [1, 1, 2, 2],
            "top": [10, 12, 0, 50],
            "height": [10, 10, 0, 12],
        }
        result = _lines_from_data(data)
        assert [line.text for line in result.lines] == ["65,800 00", "64,000"]
        assert result.lines[0].row0 == 10
        assert result.lines[0].row1 == 22
        assert result.lines[1].row1 == 62
        assert result.confidence == pytest.approx(80)
        assert result.text == "65,800 00\n64,000"

    def test_empty(self):
        result = _lines_from_data({"text": []})
        assert result.lines == []
        assert result.confidence == 0.0


class TestTesseractRecognizer:
    """Lifecycle of the recognizer handle."""

    def test_recognize_before_start(self):
        with pytest.raises(RecognizerNotReadyError):
            TesseractRecognizer().recognize(np.zeros((4, 4), dtype=np.uint8))

    def test_missing_engine(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()
        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)

        recognizer = TesseractRecognizer()
        with pytest.raises(RecognizerNotReadyError):
            recognizer.start()
        assert not recognizer.is_ready

    def test_context_manager(self, monkeypatch):
        monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
        monkeypatch.setattr(pytesseract, "image_to_data", lambda *a, **kw: {
            "text": ["42000"], "conf": ["95"], "block_num": [1], "par_num": [1],
            "line_num": [1], "top": [5], "height": [10],
        })

        with TesseractRecognizer() as recognizer:
            assert recognizer.is_ready
            result = recognizer.recognize(np.zeros((20, 20), dtype=np.uint8))
            assert result.text == "42000"
        assert not recognizer.is_ready

    def test_engine_failure_wrapped(self, monkeypatch):
        def crash(*args, **kwargs):
            raise RuntimeError("tesseract crashed")
        monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
        monkeypatch.setattr(pytesseract, "image_to_data", crash)

        with TesseractRecognizer() as recognizer:
            with pytest.raises(RecognitionError):
                recognizer.recognize(np.zeros((20, 20), dtype=np.uint8))


class TestExtraction:
    """Tests for cropping and reading chart regions."""

    def test_price_labels(self, chart_image, fake_recognizer):
        labels = extract_price_labels(chart_image, fake_recognizer)
        assert [lbl.value for lbl in labels] == [900, 700, 500, 300]
        assert [lbl.pixel_row for lbl in labels] == [100, 300, 500, 700]

    def test_asset_info(self, chart_image, fake_recognizer):
        asset = extract_asset_info(chart_image, fake_recognizer)
        assert asset.name == "BTC"
        assert asset.asset_type == AssetType.CRYPTO
        assert asset.confidence == 90.0

    def test_asset_info_unknown_header(self, chart_image):
        asset = extract_asset_info(chart_image, FakeRecognizer(header=""))
        assert asset.name == "UNKNOWN"

    def test_tiny_image_has_no_header(self):
        image = RasterImage(make_chart(width=10, height=5))
        recognizer = FakeRecognizer()
        asset = extract_asset_info(image, recognizer)
        assert asset.name == "UNKNOWN"
        assert recognizer.calls == 0
