"""
SkyBoard Package.

Aircraft telemetry normalization and reference-data enrichment, built with
requests, NumPy and Flask.

Modules:
    ingestion/   OpenSky feed decoding, fallback data, airport CSV ingestion and cache
    enrichment/  Callsign to airline resolution and region inference
    analytics/   NumPy-based fleet aggregation (extrema, regions, types, phases)
    services/    External API integrations (Wikipedia page summaries)
    api/         REST endpoints exposing snapshots, airports and statistics
    models/      Immutable domain records (aircraft states, airports, airlines)
    geo.py       Bounding boxes and ordered region classification
    cache.py     Thread-safe snapshot cache with last-writer-wins refresh
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
