"""
Server-owned resources.

The text recognizer is the only shared resource in the service. It is created
and started once by the app lifespan, handed to each analysis call, and closed
on shutdown.
"""

import logging
from typing import Optional

from fastapi import HTTPException

from ..chart_reader.recognizer import TextRecognizer

logger = logging.getLogger(__name__)

_recognizer: Optional[TextRecognizer] = None


def set_recognizer(recognizer: Optional[TextRecognizer]) -> None:
    """Install (or clear) the recognizer used by analysis endpoints."""
    global _recognizer
    _recognizer = recognizer
    logger.info(f"Text recognizer {'installed' if recognizer is not None else 'cleared'}")


def get_recognizer() -> TextRecognizer:
    """Get the recognizer, or fail with 503 if the service has none."""
    if _recognizer is None:
        raise HTTPException(
            status_code=503,
            detail="Text recognizer unavailable. Use /api/analyze/manual instead."
        )
    return _recognizer


def has_recognizer() -> bool:
    return _recognizer is not None
