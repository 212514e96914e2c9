"""
Data ingestion module for SkyBoard.

Fetches the live telemetry feed and the airport reference feed, and turns
both into typed records.
"""

from skyboard.ingestion.opensky_client import OpenSkyClient, TelemetryEnvelope, FeedUnavailable
from skyboard.ingestion.normalizer import LiveStateNormalizer, NormalizationResult
from skyboard.ingestion.airports import AirportRepository

__all__ = [
    'OpenSkyClient',
    'TelemetryEnvelope',
    'FeedUnavailable',
    'LiveStateNormalizer',
    'NormalizationResult',
    'AirportRepository',
]
