"""
Analysis router for the Scan API.

Endpoints:
- POST /api/analyze - Analyze a base64-encoded chart screenshot
- POST /api/analyze/manual - Analyze manually entered swing values

Handlers are plain functions: recognition and pixel scans block, so FastAPI
runs them in its threadpool and the event loop stays free for other requests.
The shared recognizer serializes its own calls.
"""

import base64
import binascii
import logging

from fastapi import APIRouter, HTTPException
from PIL import UnidentifiedImageError

from ...chart_reader.image import RasterImage
from ...chart_reader.recognizer import RecognitionError, RecognizerNotReadyError
from ...fib_analysis.errors import RecoverableAnalysisError
from ...fib_analysis.pipeline import ChartScan, ManualEntry, analyze_manual, scan_chart
from ..db import add_scan
from ..schemas import AnalysisResponse, AnalyzeRequest, ManualAnalysisRequest
from ..state import get_recognizer
from .conversions import scan_to_response

logger = logging.getLogger(__name__)
router = APIRouter(tags=["analysis"])


def _manual_required(error: RecoverableAnalysisError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "error": error.reason,
            "message": str(error),
            "manual_required": True,
        }
    )


def _save(scan: ChartScan, asset_name: str) -> int:
    try:
        return add_scan(**scan.result.to_record(asset_name))
    except Exception as e:
        logger.error(f"Failed to store scan: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to store scan"
        )


@router.post("/api/analyze", response_model=AnalysisResponse)
def analyze_screenshot(request: AnalyzeRequest):
    """
    Analyze a chart screenshot.

    Reads the price axis and header, calibrates the pixel/price scale,
    detects swings and returns levels plus insight. When the chart cannot
    be read, responds 422 with manual_required=true so the client can
    switch to /api/analyze/manual.
    """
    try:
        image = RasterImage.from_bytes(base64.b64decode(request.image_data, validate=True))
    except (binascii.Error, UnidentifiedImageError, ValueError) as e:
        logger.warning(f"Rejected undecodable image: {e}")
        raise HTTPException(
            status_code=400,
            detail="Image data could not be decoded"
        )

    recognizer = get_recognizer()

    try:
        scan = scan_chart(image, recognizer)
    except RecoverableAnalysisError as e:
        logger.warning(f"Chart needs manual entry: {e}")
        raise _manual_required(e)
    except RecognizerNotReadyError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RecognitionError as e:
        logger.error(f"Recognition failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    scan_id = _save(scan, scan.asset.name) if request.save else None
    return scan_to_response(scan, scan.asset.name, scan_id)


@router.post("/api/analyze/manual", response_model=AnalysisResponse)
def analyze_manual_entry(request: ManualAnalysisRequest):
    """
    Analyze manually entered swing values.

    Requires high > low. The asset name defaults to the upper-cased asset type.
    """
    if request.high <= request.low:
        raise HTTPException(
            status_code=400,
            detail="High must be strictly greater than low"
        )

    entry = ManualEntry(
        high=request.high,
        low=request.low,
        current=request.current,
        asset_type=request.asset_type,
    )
    scan = analyze_manual(entry, request.image_height)
    asset_name = request.asset_name or scan.asset.name

    scan_id = _save(scan, asset_name) if request.save else None
    return scan_to_response(scan, asset_name, scan_id)
