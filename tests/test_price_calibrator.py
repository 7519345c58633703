"""
Tests for price axis calibration.

Verifies:
- Too few labels or no consistent pairs yield no map
- Scale from a clean label pair
- Misread labels are dropped, near-correct ones kept
- Pixel/price conversions are inverses
- Manual price maps reserve header/footer margins
"""

import pytest

from src.fib_analysis.detection_config import CalibrationConfig
from src.fib_analysis.errors import InsufficientLabelsError, RecoverableAnalysisError
from src.fib_analysis.price_calibrator import (
    build_manual_price_map,
    build_price_map,
    calibrate,
    pixel_row_to_price,
    price_to_pixel_row,
)
from src.fib_analysis.types import PriceMap

from conftest import make_labels


@pytest.fixture
def clean_labels():
    # 0.01 px per unit: price = 50000 - (row - 100) * 100
    return make_labels((50000, 100), (40000, 200), (30000, 300), (20000, 400))


class TestBuildPriceMapRejects:
    """Inputs that cannot produce a map."""

    def test_no_labels(self):
        assert build_price_map([]) is None

    def test_single_label(self):
        assert build_price_map(make_labels((69000, 10))) is None

    def test_inverted_pair(self):
        """Higher label below a lower one implies a negative scale."""
        assert build_price_map(make_labels((100, 10), (200, 50))) is None

    def test_pixel_gap_too_small(self):
        assert build_price_map(make_labels((200, 10), (100, 15))) is None

    def test_calibrate_raises_recoverable(self):
        with pytest.raises(InsufficientLabelsError) as exc_info:
            calibrate(make_labels((69000, 10)))
        assert isinstance(exc_info.value, RecoverableAnalysisError)
        assert exc_info.value.reason == "insufficient_labels"


class TestBuildPriceMap:
    """Tests for the median-pair calibration."""

    def test_single_pair_scale(self):
        price_map = build_price_map(make_labels((69000, 10), (15000, 500)), image_height=600)
        assert price_map.top_price == 69000
        assert price_map.bottom_price == 15000
        assert price_map.top_pixel_row == 10
        assert price_map.bottom_pixel_row == 500
        assert price_map.pixels_per_unit == pytest.approx(490 / 54000)

    def test_label_order_irrelevant(self, clean_labels):
        forward = build_price_map(clean_labels)
        backward = build_price_map(list(reversed(clean_labels)))
        assert forward == backward

    def test_outermost_labels_span_map(self, clean_labels):
        price_map = build_price_map(clean_labels)
        assert price_map.top_price == 50000
        assert price_map.bottom_price == 20000
        assert price_map.pixels_per_unit == pytest.approx(0.01)

    def test_misread_label_rejected(self, clean_labels):
        """A label far off the reference scale does not move the map."""
        labels = clean_labels + make_labels((90000, 250))
        price_map = build_price_map(labels)
        assert price_map.top_price == 50000
        assert price_map.bottom_price == 20000
        assert pixel_row_to_price(250, price_map) == pytest.approx(35000)

    def test_label_within_tolerance_kept(self, clean_labels):
        """A label 2% off the predicted price still counts and can become an endpoint."""
        labels = clean_labels + make_labels((10200, 500))
        price_map = build_price_map(labels)
        assert price_map.bottom_price == 10200
        assert price_map.bottom_pixel_row == 500

    def test_tolerance_is_configurable(self, clean_labels):
        labels = clean_labels + make_labels((10200, 500))
        strict = CalibrationConfig(label_tolerance=0.01)
        price_map = build_price_map(labels, config=strict)
        assert price_map.bottom_price == 20000


class TestConversions:
    """Tests for pixel/price conversions."""

    def test_row_to_price(self):
        price_map = build_price_map(make_labels((69000, 10), (15000, 500)))
        assert pixel_row_to_price(10, price_map) == pytest.approx(69000)
        assert pixel_row_to_price(500, price_map) == pytest.approx(15000)
        assert pixel_row_to_price(255, price_map) == pytest.approx(42000)

    @pytest.mark.parametrize("row", [0, 10, 137.5, 500, 900])
    def test_round_trip(self, row):
        price_map = build_price_map(make_labels((69000, 10), (15000, 500)))
        assert price_to_pixel_row(pixel_row_to_price(row, price_map), price_map) == pytest.approx(row)


class TestPriceMapInvariants:
    """PriceMap rejects inconsistent values."""

    def test_inverted_prices(self):
        with pytest.raises(ValueError):
            PriceMap(top_price=100, bottom_price=200, top_pixel_row=0, bottom_pixel_row=10, pixels_per_unit=0.1)

    def test_non_positive_scale(self):
        with pytest.raises(ValueError):
            PriceMap(top_price=200, bottom_price=100, top_pixel_row=0, bottom_pixel_row=10, pixels_per_unit=0)

    def test_inverted_rows(self):
        with pytest.raises(ValueError):
            PriceMap(top_price=200, bottom_price=100, top_pixel_row=10, bottom_pixel_row=0, pixels_per_unit=0.1)


class TestManualPriceMap:
    """Tests for build_manual_price_map."""

    def test_margins(self):
        price_map = build_manual_price_map(50000, 40000, 600)
        assert price_map.top_pixel_row == 60
        assert price_map.bottom_pixel_row == 540
        assert price_map.pixels_per_unit == pytest.approx(480 / 10000)

    def test_high_and_low_on_margin_rows(self):
        price_map = build_manual_price_map(50000, 40000, 600)
        assert pixel_row_to_price(60, price_map) == pytest.approx(50000)
        assert pixel_row_to_price(540, price_map) == pytest.approx(40000)

    def test_high_not_above_low(self):
        with pytest.raises(ValueError):
            build_manual_price_map(40000, 40000, 600)
