"""
API module for SkyBoard.

Provides REST endpoints for:
- Aircraft of the current snapshot and airline activity
- Airport reference data and aircraft summaries
- Fleet statistics and system status
"""

from skyboard.api.aircraft import aircraft_bp, airlines_bp
from skyboard.api.reference import airports_bp, wiki_bp
from skyboard.api.metrics import metrics_bp

__all__ = ['aircraft_bp', 'airlines_bp', 'airports_bp', 'wiki_bp', 'metrics_bp']
