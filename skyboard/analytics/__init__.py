"""
Analytics module for SkyBoard.

Snapshot statistics over normalized telemetry using NumPy:
- Extremes (fastest, highest, lowest)
- Region and aircraft type buckets
- Flight phase counts and distributions
"""

from skyboard.analytics.aggregation import (
    AggregationEngine,
    AircraftStat,
    DistributionSummary,
    FleetStats,
    RegionBucket,
    TypeBucket,
)

__all__ = [
    'AggregationEngine',
    'AircraftStat',
    'DistributionSummary',
    'FleetStats',
    'RegionBucket',
    'TypeBucket',
]
