"""
Main entry point for the Fib Chart Scanner server.

Usage:
    python -m src.scan_server.main
    python -m src.scan_server.main --port 8080 --db-path ./local_data/scans.db
"""

import argparse
import logging
from pathlib import Path

import uvicorn

from .api import app
from .db import set_db_path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Fib Chart Scanner - Fibonacci levels from chart screenshots"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="SQLite file for scan history (default: $FIB_SCANNER_DB or local_data/scans.db)"
    )

    args = parser.parse_args()

    if args.db_path:
        db_path = Path(args.db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        set_db_path(db_path.resolve())

    print(f"\n{'='*60}")
    print("Fib Chart Scanner")
    print(f"{'='*60}")
    print(f"Server:         http://{args.host}:{args.port}/")
    print(f"API docs:       http://{args.host}:{args.port}/docs")
    print(f"{'='*60}\n")

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info"
    )


if __name__ == "__main__":
    main()
