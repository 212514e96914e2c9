"""
Fleet aggregation over one normalized snapshot using NumPy.

Computes, for a list of AircraftState:
1. Extremes: fastest aircraft, highest and lowest altitude
2. Region buckets: count plus average speed/altitude per bounding-box region
3. Type buckets: the same per coarse aircraft type, top TOP_TYPES by count
4. Flight phase counts and altitude/speed distributions

Numeric conventions:
- speeds are presented in km/h (feed m/s x KMH_PER_MPS)
- altitudes stay in meters
- every average or distribution over an empty set is 0.0, never NaN
- extremes and averages skip missing or non-finite values; ties go to
  the first aircraft in input order

Everything is recomputed from scratch on each call; nothing is kept
between calls.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Callable

import numpy as np

from skyboard.geo import classify_region
from skyboard.models import AircraftState, FlightPhase, KMH_PER_MPS, Region

logger = logging.getLogger(__name__)

TOP_TYPES = 10


def _reported(value: Optional[float]) -> bool:
    """True for a finite number; None, NaN and infinities do not count."""
    return value is not None and math.isfinite(value)


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(np.array(values, dtype=np.float64)))


@dataclass(frozen=True)
class AircraftStat:
    """One extreme value and the aircraft it belongs to."""
    callsign: str
    value: float
    unit: str
    country: str
    aircraft_type: str
    aircraft_id: Optional[str] = None

    @classmethod
    def empty(cls, unit: str) -> 'AircraftStat':
        return cls(callsign='Unknown', value=0.0, unit=unit, country='Unknown', aircraft_type='Unknown')

    @classmethod
    def from_state(cls, state: AircraftState, value: float, unit: str) -> 'AircraftStat':
        return cls(
            callsign=state.callsign or 'Unknown',
            value=value,
            unit=unit,
            country=state.origin_country or 'Unknown',
            aircraft_type=state.aircraft_type or state.id or 'Unknown',
            aircraft_id=state.id,
        )

    def to_dict(self) -> dict:
        return {
            'callsign': self.callsign,
            'value': round(self.value, 2),
            'unit': self.unit,
            'country': self.country,
            'aircraft_type': self.aircraft_type,
            'aircraft_id': self.aircraft_id,
        }


@dataclass(frozen=True)
class RegionBucket:
    region: Region
    count: int
    average_speed_kmh: float
    average_altitude_m: float

    def to_dict(self) -> dict:
        return {
            'region': self.region.value,
            'count': self.count,
            'average_speed_kmh': round(self.average_speed_kmh, 2),
            'average_altitude_m': round(self.average_altitude_m, 2),
        }


@dataclass(frozen=True)
class TypeBucket:
    aircraft_type: str
    count: int
    average_speed_kmh: float
    average_altitude_m: float

    def to_dict(self) -> dict:
        return {
            'aircraft_type': self.aircraft_type,
            'count': self.count,
            'average_speed_kmh': round(self.average_speed_kmh, 2),
            'average_altitude_m': round(self.average_altitude_m, 2),
        }


@dataclass(frozen=True)
class DistributionSummary:
    """
    Summary statistics for one metric across the fleet.

    mean/std/min/max over the aircraft that reported the metric.
    """
    count: int
    mean: float
    std: float
    min_val: float
    max_val: float

    @classmethod
    def from_values(cls, values: List[float]) -> 'DistributionSummary':
        if not values:
            return cls(count=0, mean=0.0, std=0.0, min_val=0.0, max_val=0.0)
        arr = np.array(values, dtype=np.float64)
        return cls(
            count=len(values),
            mean=float(np.mean(arr)),
            std=float(np.std(arr)),
            min_val=float(np.min(arr)),
            max_val=float(np.max(arr)),
        )

    def to_dict(self) -> dict:
        return {
            'count': self.count,
            'mean': round(self.mean, 2),
            'std': round(self.std, 2),
            'min': round(self.min_val, 2),
            'max': round(self.max_val, 2),
        }


@dataclass(frozen=True)
class FleetStats:
    """Aggregate statistics for one snapshot."""
    total_aircraft: int
    fastest: AircraftStat
    highest: AircraftStat
    lowest: AircraftStat
    regions: List[RegionBucket]
    aircraft_types: List[TypeBucket]
    by_phase: Dict[str, int]
    altitude: DistributionSummary
    speed: DistributionSummary
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            'total_aircraft': self.total_aircraft,
            'fastest': self.fastest.to_dict(),
            'highest': self.highest.to_dict(),
            'lowest': self.lowest.to_dict(),
            'regions': [r.to_dict() for r in self.regions],
            'aircraft_types': [t.to_dict() for t in self.aircraft_types],
            'by_phase': dict(self.by_phase),
            'altitude': self.altitude.to_dict(),
            'speed': self.speed.to_dict(),
            'last_updated': self.last_updated.isoformat(),
        }


class _Group:
    """Accumulates count and reported values for one bucket."""

    def __init__(self):
        self.count = 0
        self.speeds: List[float] = []
        self.altitudes: List[float] = []

    def add(self, state: AircraftState) -> None:
        self.count += 1
        if _reported(state.speed_kmh):
            self.speeds.append(state.speed_kmh)
        if _reported(state.altitude):
            self.altitudes.append(state.altitude)


class AggregationEngine:
    """
    Stateless statistics over AircraftState collections.

    `region_classifier` maps (lat, lon) to a Region; by default the
    ordered bounding boxes from skyboard.geo.
    """

    def __init__(
        self,
        top_types: int = TOP_TYPES,
        region_classifier: Callable[[Optional[float], Optional[float]], Region] = classify_region,
    ):
        self.top_types = top_types
        self.region_classifier = region_classifier

    def aggregate(self, states: List[AircraftState], now: Optional[datetime] = None) -> FleetStats:
        """Compute all statistics for one snapshot. Empty input gives zeroed stats."""
        now = now or datetime.now(timezone.utc)

        stats = FleetStats(
            total_aircraft=len(states),
            fastest=self.fastest(states),
            highest=self.highest(states),
            lowest=self.lowest(states),
            regions=self.region_buckets(states),
            aircraft_types=self.type_buckets(states),
            by_phase=self.phase_counts(states),
            altitude=DistributionSummary.from_values(
                [s.altitude for s in states if _reported(s.altitude)]
            ),
            speed=DistributionSummary.from_values(
                [s.speed_kmh for s in states if _reported(s.speed_kmh)]
            ),
            last_updated=now,
        )

        logger.debug(f'Aggregated {len(states)} aircraft into {len(stats.regions)} regions')
        return stats

    # -------------------------------------------------------------------------
    # Extremes
    # -------------------------------------------------------------------------

    def fastest(self, states: List[AircraftState]) -> AircraftStat:
        best = None
        for state in states:
            if not _reported(state.ground_speed):
                continue
            if best is None or state.ground_speed > best.ground_speed:
                best = state
        if best is None:
            return AircraftStat.empty('km/h')
        return AircraftStat.from_state(best, best.ground_speed * KMH_PER_MPS, 'km/h')

    def highest(self, states: List[AircraftState]) -> AircraftStat:
        best = None
        for state in states:
            if not _reported(state.altitude):
                continue
            if best is None or state.altitude > best.altitude:
                best = state
        if best is None:
            return AircraftStat.empty('m')
        return AircraftStat.from_state(best, best.altitude, 'm')

    def lowest(self, states: List[AircraftState]) -> AircraftStat:
        best = None
        for state in states:
            if not _reported(state.altitude):
                continue
            if best is None or state.altitude < best.altitude:
                best = state
        if best is None:
            return AircraftStat.empty('m')
        return AircraftStat.from_state(best, best.altitude, 'm')

    # -------------------------------------------------------------------------
    # Buckets
    # -------------------------------------------------------------------------

    def region_buckets(self, states: List[AircraftState]) -> List[RegionBucket]:
        """Per-region counts and averages, most populated first."""
        groups: Dict[Region, _Group] = {}
        for state in states:
            region = self.region_classifier(state.latitude, state.longitude)
            groups.setdefault(region, _Group()).add(state)

        buckets = [
            RegionBucket(
                region=region,
                count=group.count,
                average_speed_kmh=_mean(group.speeds),
                average_altitude_m=_mean(group.altitudes),
            )
            for region, group in groups.items()
        ]
        buckets.sort(key=lambda b: b.count, reverse=True)
        return buckets

    def type_buckets(self, states: List[AircraftState]) -> List[TypeBucket]:
        """Per-type counts and averages, top `top_types` by count."""
        groups: Dict[str, _Group] = {}
        for state in states:
            key = state.aircraft_type or state.id or 'Unknown'
            groups.setdefault(key, _Group()).add(state)

        buckets = [
            TypeBucket(
                aircraft_type=key,
                count=group.count,
                average_speed_kmh=_mean(group.speeds),
                average_altitude_m=_mean(group.altitudes),
            )
            for key, group in groups.items()
        ]
        buckets.sort(key=lambda b: b.count, reverse=True)
        return buckets[:self.top_types]

    def phase_counts(self, states: List[AircraftState]) -> Dict[str, int]:
        counts = {phase.value: 0 for phase in FlightPhase}
        for state in states:
            counts[state.flight_phase.value] += 1
        return counts
