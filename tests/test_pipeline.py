"""
Tests for the analysis pipeline.

Verifies:
- Screenshot pipeline end to end with a fake recognizer
- Recoverable failures route to manual entry
- Manual entry bypasses calibration and detection
"""

import pytest

from src.chart_reader.image import RasterImage
from src.chart_reader.recognizer import RecognitionError
from src.fib_analysis.errors import DegenerateSwingError, InsufficientLabelsError, RecoverableAnalysisError
from src.fib_analysis.pipeline import ManualEntry, analyze_levels, analyze_manual, scan_chart
from src.fib_analysis.types import AssetType, Direction, Zone

from conftest import AXIS_LINES, FakeRecognizer, blank_canvas


class TestScanChart:
    """Tests for scan_chart."""

    def test_end_to_end(self, chart_image, fake_recognizer):
        scan = scan_chart(chart_image, fake_recognizer)

        assert scan.asset.name == "BTC"
        assert scan.asset.asset_type == AssetType.CRYPTO
        assert len(scan.labels) == 4
        assert scan.price_map.top_price == 900
        assert scan.price_map.bottom_price == 300
        assert scan.swings.swing_high == pytest.approx(800)
        assert scan.swings.swing_low == pytest.approx(301)
        assert scan.swings.current_price == pytest.approx(395)

    def test_result_levels(self, chart_image, fake_recognizer):
        result = scan_chart(chart_image, fake_recognizer).result
        assert result.direction == Direction.DOWNTREND
        assert len(result.levels) == 7
        assert result.levels[0].price == pytest.approx(301)
        assert result.levels[-1].price == pytest.approx(800)
        assert result.insight.nearest_level is not None

    def test_no_labels(self, chart_image):
        with pytest.raises(InsufficientLabelsError):
            scan_chart(chart_image, FakeRecognizer(axis_lines=[]))

    def test_single_label(self, chart_image):
        with pytest.raises(InsufficientLabelsError):
            scan_chart(chart_image, FakeRecognizer(axis_lines=AXIS_LINES[:1]))

    def test_blank_chart(self, fake_recognizer):
        with pytest.raises(DegenerateSwingError) as exc_info:
            scan_chart(RasterImage(blank_canvas()), fake_recognizer)
        assert isinstance(exc_info.value, RecoverableAnalysisError)
        assert exc_info.value.reason == "degenerate_swing"

    def test_recognizer_failure_propagates(self, chart_image):
        with pytest.raises(RecognitionError):
            scan_chart(chart_image, FakeRecognizer(fail=True))


class TestAnalyzeLevels:
    """Tests for analyze_levels."""

    def test_direction_from_current_price(self):
        assert analyze_levels(69000, 15000, 43000).direction == Direction.UPTREND
        assert analyze_levels(69000, 15000, 30000).direction == Direction.DOWNTREND

    def test_no_current_price(self):
        result = analyze_levels(69000, 15000)
        assert result.direction == Direction.UPTREND
        assert result.insight.zone == Zone.UNKNOWN

    @pytest.mark.parametrize("high, low", [(None, 100), (100, None), (100, 100), (100, 200)])
    def test_degenerate(self, high, low):
        with pytest.raises(DegenerateSwingError):
            analyze_levels(high, low, 150)

    def test_to_record(self):
        record = analyze_levels(69000, 15000, 43000, "forex").to_record("EUR/USD")
        assert record == {
            'asset_name': "EUR/USD",
            'asset_type': "forex",
            'swing_high': 69000,
            'swing_low': 15000,
            'current_price': 43000,
            'direction': "uptrend",
        }

    def test_recompute_from_record(self):
        """A stored record reproduces the same analysis."""
        first = analyze_levels(69000, 15000, 43000)
        record = first.to_record("BTC")
        again = analyze_levels(record['swing_high'], record['swing_low'], record['current_price'], record['asset_type'])
        assert again == first


class TestAnalyzeManual:
    """Tests for analyze_manual."""

    def test_manual_entry(self):
        scan = analyze_manual(ManualEntry(high=50000, low=40000, current=45000))
        assert scan.asset.name == "CRYPTO"
        assert scan.asset.confidence == 100
        assert scan.price_map is None
        assert scan.labels == []
        assert scan.result.swing_high == 50000
        assert scan.result.current_price == 45000

    def test_manual_map_with_height(self):
        scan = analyze_manual(ManualEntry(high=50000, low=40000, asset_type=AssetType.STOCK), image_height=600)
        assert scan.price_map.top_pixel_row == 60
        assert scan.asset.name == "STOCK"

    def test_high_not_above_low(self):
        with pytest.raises(DegenerateSwingError):
            analyze_manual(ManualEntry(high=40000, low=50000))
