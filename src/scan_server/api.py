"""
FastAPI backend for the Fibonacci chart scanner.

Minimal server for:
- Screenshot analysis (reads the chart, returns levels and insight)
- Manual analysis fallback when a chart cannot be read
- Scan history
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..chart_reader.recognizer import RecognizerNotReadyError, TesseractRecognizer
from .db import get_db_path, init_db
from .routers import analysis_router, scans_router
from .state import has_recognizer, set_recognizer

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the database schema and the shared recognizer; close it on shutdown."""
    init_db()

    owned = None
    if not has_recognizer():
        recognizer = TesseractRecognizer()
        try:
            recognizer.start()
        except RecognizerNotReadyError as e:
            logger.warning(f"{e}. Screenshot analysis disabled, manual entry still available.")
        else:
            owned = recognizer
            set_recognizer(recognizer)

    try:
        yield
    finally:
        if owned is not None:
            owned.close()
            set_recognizer(None)


app = FastAPI(
    title="Fib Chart Scanner",
    description="Fibonacci retracement levels and insight from chart screenshots",
    version=API_VERSION,
    lifespan=lifespan,
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "recognizer_ready": has_recognizer(),
        "database": str(get_db_path()),
        "version": API_VERSION,
    }


app.include_router(analysis_router)
app.include_router(scans_router)
