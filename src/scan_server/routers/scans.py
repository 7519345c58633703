"""
Scan history router.

Endpoints:
- POST /api/scans - Store a scan record
- GET /api/scans - List scans, most recent first
- GET /api/scans/{scan_id} - Get one scan
- DELETE /api/scans/{scan_id} - Delete one scan
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from ..db import add_scan, delete_scan, get_scan, list_scans
from ..schemas import ScanCreateRequest, ScanListResponse, ScanResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["scans"])


@router.post("/api/scans", response_model=ScanResponse, status_code=201)
async def create_scan(request: ScanCreateRequest):
    """Store a flat scan record."""
    try:
        scan_id = add_scan(
            asset_name=request.asset_name,
            asset_type=request.asset_type.value,
            swing_high=request.swing_high,
            swing_low=request.swing_low,
            current_price=request.current_price,
            direction=request.direction.value,
        )
    except Exception as e:
        logger.error(f"Failed to create scan: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to create scan"
        )
    return ScanResponse(**get_scan(scan_id))


@router.get("/api/scans", response_model=ScanListResponse)
async def get_scans(
    limit: int = Query(default=50, ge=1, le=500, description="Max scans to return")
):
    """List stored scans, most recent first."""
    scans = list_scans(limit=limit)
    return ScanListResponse(
        scans=[ScanResponse(**scan) for scan in scans],
        count=len(scans),
    )


@router.get("/api/scans/{scan_id}", response_model=ScanResponse)
async def get_scan_by_id(scan_id: int):
    scan = get_scan(scan_id)
    if scan is None:
        raise HTTPException(status_code=404, detail="Scan not found")
    return ScanResponse(**scan)


@router.delete("/api/scans/{scan_id}")
async def delete_scan_by_id(scan_id: int):
    if not delete_scan(scan_id):
        raise HTTPException(status_code=404, detail="Scan not found")
    return {"message": "Scan deleted successfully"}
