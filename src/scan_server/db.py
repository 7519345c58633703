"""
SQLite database layer for scan records.

Stores only the inputs needed to recompute an analysis (asset, swing bounds,
current price, direction); levels and insights are derived on read.
Uses WAL mode for better read concurrency with single-writer setup.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Environment override for the database file
DB_PATH_ENV = "FIB_SCANNER_DB"

# Module-level database path (can be overridden for local dev and tests)
_db_path: Optional[Path] = None


def get_db_path() -> Path:
    """
    Get the database path.

    Uses $FIB_SCANNER_DB when set, otherwise local_data/scans.db under the
    project root.

    Returns:
        Path to the SQLite database file.
    """
    global _db_path

    if _db_path is not None:
        return _db_path

    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        _db_path = Path(env_path)
        _db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Using database path from {DB_PATH_ENV}: {_db_path}")
        return _db_path

    project_root = Path(__file__).parent.parent.parent
    local_db_dir = project_root / "local_data"
    local_db_dir.mkdir(exist_ok=True)
    _db_path = local_db_dir / "scans.db"
    logger.info(f"Using local database path: {_db_path}")
    return _db_path


def set_db_path(path: Optional[Path]) -> None:
    """
    Override the database path (for testing). None resets to the default lookup.

    Args:
        path: Custom path for the SQLite database.
    """
    global _db_path
    _db_path = path
    logger.info(f"Database path set to: {_db_path}")


def get_db() -> sqlite3.Connection:
    """
    Get a database connection.

    Each call opens a new connection, so concurrent requests never share one.
    """
    conn = sqlite3.connect(get_db_path())
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """
    Initialize the database schema.

    Creates tables if they don't exist. Safe to call multiple times.
    """
    logger.info(f"Initializing database at {get_db_path()}")

    conn = get_db()
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS scans (
                id INTEGER PRIMARY KEY,
                asset_name TEXT NOT NULL,
                asset_type TEXT NOT NULL,
                swing_high REAL NOT NULL,
                swing_low REAL NOT NULL,
                current_price REAL,
                direction TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_scans_created_at
                ON scans(created_at);
        """)
        conn.commit()
        logger.info("Database schema initialized successfully")
    finally:
        conn.close()


def _row_to_dict(row: sqlite3.Row) -> dict:
    return {
        "id": row["id"],
        "asset_name": row["asset_name"],
        "asset_type": row["asset_type"],
        "swing_high": row["swing_high"],
        "swing_low": row["swing_low"],
        "current_price": row["current_price"],
        "direction": row["direction"],
        "created_at": row["created_at"],
    }


def add_scan(
    asset_name: str,
    asset_type: str,
    swing_high: float,
    swing_low: float,
    current_price: Optional[float],
    direction: str,
) -> int:
    """
    Insert a scan record.

    Returns:
        The ID of the inserted scan.
    """
    conn = get_db()
    try:
        cursor = conn.execute(
            """
            INSERT INTO scans (asset_name, asset_type, swing_high, swing_low, current_price, direction)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (asset_name, asset_type, swing_high, swing_low, current_price, direction)
        )
        conn.commit()
        scan_id = cursor.lastrowid
        logger.info(f"Added scan {scan_id} for {asset_name}")
        return scan_id
    finally:
        conn.close()


def list_scans(limit: int = 50) -> list[dict]:
    """Get scans ordered by most recent first."""
    conn = get_db()
    try:
        cursor = conn.execute(
            "SELECT * FROM scans ORDER BY id DESC LIMIT ?",
            (limit,)
        )
        return [_row_to_dict(row) for row in cursor.fetchall()]
    finally:
        conn.close()


def get_scan(scan_id: int) -> Optional[dict]:
    """Get a single scan, or None if it does not exist."""
    conn = get_db()
    try:
        row = conn.execute("SELECT * FROM scans WHERE id = ?", (scan_id,)).fetchone()
        return _row_to_dict(row) if row else None
    finally:
        conn.close()


def delete_scan(scan_id: int) -> bool:
    """
    Delete a scan.

    Returns:
        True if a row was deleted, False if the scan did not exist.
    """
    conn = get_db()
    try:
        cursor = conn.execute("DELETE FROM scans WHERE id = ?", (scan_id,))
        conn.commit()
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted scan {scan_id}")
        return deleted
    finally:
        conn.close()
