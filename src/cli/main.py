"""
Main CLI Module for the Fibonacci Chart Scanner

Command-line interface for analyzing chart screenshots and manual swing values.

Commands:
- scan: Read a chart screenshot and print levels plus insight
- manual: Analyze a typed-in swing high/low (fallback when a chart cannot be read)
- history: List stored scans
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from src.chart_reader.image import RasterImage
from src.chart_reader.recognizer import RecognitionError, TesseractRecognizer
from src.fib_analysis.errors import RecoverableAnalysisError
from src.fib_analysis.formatting import format_price, timeframe_for
from src.fib_analysis.pipeline import ChartScan, ManualEntry, analyze_manual, scan_chart
from src.fib_analysis.types import AssetType
from src.scan_server import db

logger = logging.getLogger(__name__)

# Exit code for "chart unreadable, use manual entry"
EXIT_MANUAL_REQUIRED = 2


def levels_table(scan: ChartScan) -> pd.DataFrame:
    """Level table for display, highest price first."""
    result = scan.result
    nearest = result.insight.nearest_level
    rows = []
    for level in sorted(result.levels, key=lambda lvl: lvl.price, reverse=True):
        marker = ""
        if nearest is not None and level.ratio == nearest.ratio:
            marker = "<- nearest"
        rows.append({
            'level': level.label,
            'price': format_price(level.price, result.asset_type),
            'golden_pocket': "yes" if level.is_golden_pocket else "",
            '': marker,
        })
    return pd.DataFrame(rows)


def print_scan(scan: ChartScan, asset_name: str) -> None:
    result = scan.result
    insight = result.insight

    print(f"\n{'='*60}")
    print(f"{asset_name} ({result.asset_type.value}, {timeframe_for(result.asset_type)})")
    print(f"{'='*60}")
    print(f"Swing high:     {format_price(result.swing_high, result.asset_type)}")
    print(f"Swing low:      {format_price(result.swing_low, result.asset_type)}")
    print(f"Current price:  {format_price(result.current_price, result.asset_type)}")
    print(f"Direction:      {result.direction.value}")
    if scan.labels:
        print(f"Axis labels:    {len(scan.labels)}")
    print()
    print(levels_table(scan).to_string(index=False))
    print()
    print(f"Zone: {insight.zone.value}   Sentiment: {insight.sentiment.value}")
    print(insight.narrative)
    print()


def save_scan(scan: ChartScan, asset_name: str) -> int:
    db.init_db()
    scan_id = db.add_scan(**scan.result.to_record(asset_name))
    print(f"Saved as scan #{scan_id}")
    return scan_id


def run_scan_command(args) -> int:
    """Run the screenshot pipeline on an image file."""
    image_path = Path(args.image)
    if not image_path.exists():
        print(f"Error: Image not found: {image_path}")
        return 1

    try:
        image = RasterImage.open(image_path)
    except OSError as e:
        print(f"Error: Could not open image: {e}")
        return 1

    try:
        with TesseractRecognizer(lang=args.lang) as recognizer:
            scan = scan_chart(image, recognizer)
    except RecoverableAnalysisError as e:
        print(f"Could not read chart ({e.reason}): {e}")
        print("Enter the values manually, e.g.: manual --high 50000 --low 40000 --current 45000")
        return EXIT_MANUAL_REQUIRED
    except RecognitionError as e:
        print(f"Error: {e}")
        return 1

    print_scan(scan, scan.asset.name)
    if args.save:
        save_scan(scan, scan.asset.name)
    return 0


def run_manual_command(args) -> int:
    """Analyze manually entered swing values."""
    if args.high <= args.low:
        print(f"Error: --high ({args.high}) must be greater than --low ({args.low})")
        return 1

    entry = ManualEntry(
        high=args.high,
        low=args.low,
        current=args.current,
        asset_type=AssetType(args.asset_type),
    )
    scan = analyze_manual(entry)
    asset_name = args.name or scan.asset.name

    print_scan(scan, asset_name)
    if args.save:
        save_scan(scan, asset_name)
    return 0


def run_history_command(args) -> int:
    """List stored scans, most recent first."""
    db.init_db()
    scans = db.list_scans(limit=args.limit)
    if not scans:
        print("No scans stored yet.")
        return 0

    df = pd.DataFrame(scans, columns=[
        'id', 'created_at', 'asset_name', 'asset_type',
        'swing_high', 'swing_low', 'current_price', 'direction',
    ])
    print(df.to_string(index=False))
    return 0


def create_parser():
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="Fibonacci retracement levels and insight from chart screenshots",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    scan_parser = subparsers.add_parser(
        'scan',
        help='Analyze a chart screenshot'
    )
    scan_parser.add_argument(
        'image',
        help='Path to a PNG/JPEG chart screenshot'
    )
    scan_parser.add_argument(
        '--lang',
        default='eng',
        help='Tesseract language (default: eng)'
    )
    scan_parser.add_argument(
        '--save',
        action='store_true',
        help='Store the scan in history'
    )

    manual_parser = subparsers.add_parser(
        'manual',
        help='Analyze manually entered swing values'
    )
    manual_parser.add_argument('--high', type=float, required=True, help='Swing high')
    manual_parser.add_argument('--low', type=float, required=True, help='Swing low')
    manual_parser.add_argument('--current', type=float, help='Current price')
    manual_parser.add_argument(
        '--asset-type',
        choices=[t.value for t in AssetType],
        default=AssetType.CRYPTO.value,
        help='Asset class (default: crypto)'
    )
    manual_parser.add_argument('--name', help='Asset name (default: asset class)')
    manual_parser.add_argument(
        '--save',
        action='store_true',
        help='Store the scan in history'
    )

    history_parser = subparsers.add_parser(
        'history',
        help='List stored scans'
    )
    history_parser.add_argument(
        '--limit',
        type=int,
        default=20,
        help='Number of scans to show (default: 20)'
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == 'scan':
        return run_scan_command(args)
    elif args.command == 'manual':
        return run_manual_command(args)
    elif args.command == 'history':
        return run_history_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
