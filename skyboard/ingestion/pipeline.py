"""
Telemetry pipeline - one fetch cycle from feed to statistics.

Stages, strictly sequential:
1. Fetch + normalize: envelope -> AircraftState list (fallback on failure)
2. Enrich: resolve airlines from callsigns, infer regions for unknowns
3. Aggregate: fleet statistics over the same states

A run never raises for feed problems and keeps no state between runs
beyond counters. Each run returns a new PipelineSnapshot; callers replace
their previous snapshot with it (see skyboard.cache).
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, List, Callable

from skyboard.analytics.aggregation import AggregationEngine, FleetStats
from skyboard.enrichment.airlines import IdentifierResolver
from skyboard.geo import GeoBox
from skyboard.ingestion.normalizer import LiveStateNormalizer
from skyboard.models import AircraftState, AirlineActivity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineSnapshot:
    """Everything one run produced."""
    states: List[AircraftState]
    airlines: List[AirlineActivity]
    stats: FleetStats
    fetched_at: datetime
    used_fallback: bool
    api_time: Optional[int] = None
    error: Optional[str] = None

    def find_state(self, aircraft_id: str) -> Optional[AircraftState]:
        key = aircraft_id.strip().lower()
        for state in self.states:
            if (state.id or '').lower() == key:
                return state
        return None

    def to_dict(self) -> dict:
        return {
            'fetched_at': self.fetched_at.isoformat(),
            'api_time': self.api_time,
            'used_fallback': self.used_fallback,
            'count': len(self.states),
        }


class TelemetryPipeline:
    """
    Wires the normalizer, the identifier resolver and the aggregation
    engine into one callable run.
    """

    def __init__(
        self,
        normalizer: LiveStateNormalizer,
        resolver: Optional[IdentifierResolver] = None,
        engine: Optional[AggregationEngine] = None,
        bbox: Optional[GeoBox] = None,
    ):
        self.normalizer = normalizer
        self.resolver = resolver or IdentifierResolver()
        self.engine = engine or AggregationEngine()
        self.bbox = bbox

        self._run_count = 0
        self._fallback_count = 0
        self._last_run_time: float = 0
        self._last_duration: float = 0

        self._on_update_callbacks: List[Callable[[PipelineSnapshot], None]] = []

    def add_update_callback(self, callback: Callable[[PipelineSnapshot], None]) -> None:
        """Register callback to be invoked with each new snapshot."""
        self._on_update_callbacks.append(callback)

    def run(self) -> PipelineSnapshot:
        """Execute one cycle and return its snapshot."""
        started = time.time()

        # Stage 1: Fetch + normalize
        result = self.normalizer.fetch_states(bbox=self.bbox)
        states = result.states

        # Stage 2: Enrich
        airlines = self.resolver.summarize_airlines(states)

        # Stage 3: Aggregate
        fetched_at = datetime.now(timezone.utc)
        stats = self.engine.aggregate(states, now=fetched_at)

        snapshot = PipelineSnapshot(
            states=states,
            airlines=airlines,
            stats=stats,
            fetched_at=fetched_at,
            used_fallback=result.used_fallback,
            api_time=result.api_time,
            error=result.error,
        )

        self._run_count += 1
        if result.used_fallback:
            self._fallback_count += 1
        self._last_run_time = started
        self._last_duration = time.time() - started

        logger.info(
            f'Pipeline run {self._run_count}: {len(states)} aircraft, '
            f'{len(airlines)} airlines, fallback={result.used_fallback} '
            f'({self._last_duration:.2f}s)'
        )

        for callback in self._on_update_callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f'Update callback error: {e}')

        return snapshot

    @property
    def stats(self) -> dict:
        """Get pipeline statistics."""
        return {
            'run_count': self._run_count,
            'fallback_count': self._fallback_count,
            'last_run_time': self._last_run_time,
            'last_duration': round(self._last_duration, 3),
        }
