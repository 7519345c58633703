"""
Router package for the Scan API.

Routers:
- analysis.py: Screenshot and manual analysis
- scans.py: Scan history CRUD
"""

from .analysis import router as analysis_router
from .scans import router as scans_router

__all__ = [
    "analysis_router",
    "scans_router",
]
