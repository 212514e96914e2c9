"""
In-memory snapshot cache for low-latency telemetry queries.

Holds the latest PipelineSnapshot so API reads do not hit the feed on
every request. A snapshot older than the TTL is replaced by running the
pipeline again; the new snapshot replaces the old one as a whole, never
record by record.

Overlapping refreshes are not coordinated: two callers may both run the
pipeline and the later store wins.
"""

import logging
import threading
import time
from typing import Optional, List

from skyboard.ingestion.pipeline import PipelineSnapshot, TelemetryPipeline
from skyboard.models import AircraftState

logger = logging.getLogger(__name__)


class TelemetryCache:
    """
    Thread-safe holder of the current snapshot.

    Only the swap of the snapshot reference happens under the lock; the
    pipeline itself runs outside it.
    """

    def __init__(self, pipeline: TelemetryPipeline, ttl_seconds: int = 10):
        self.pipeline = pipeline
        self.ttl_seconds = ttl_seconds

        self._snapshot: Optional[PipelineSnapshot] = None
        self._stored_at: float = 0
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0

    def _is_fresh(self) -> bool:
        return (
            self._snapshot is not None and
            time.time() - self._stored_at < self.ttl_seconds
        )

    def get_snapshot(self) -> PipelineSnapshot:
        """Current snapshot, refreshed first when missing or expired."""
        with self._lock:
            if self._is_fresh():
                self._hits += 1
                return self._snapshot
            self._misses += 1

        return self.refresh()

    def refresh(self) -> PipelineSnapshot:
        """Run the pipeline and store its snapshot (last writer wins)."""
        snapshot = self.pipeline.run()
        self.store(snapshot)
        return snapshot

    def store(self, snapshot: PipelineSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
            self._stored_at = time.time()
        logger.debug(f'Cache stored snapshot with {len(snapshot.states)} aircraft')

    def get_all(self) -> List[AircraftState]:
        return list(self.get_snapshot().states)

    def get_airborne(self) -> List[AircraftState]:
        """Get only aircraft not known to be on the ground."""
        return [s for s in self.get_all() if not s.on_ground]

    def get(self, aircraft_id: str) -> Optional[AircraftState]:
        """Get an aircraft of the current snapshot by ICAO24."""
        return self.get_snapshot().find_state(aircraft_id)

    def clear(self) -> None:
        """Drop the snapshot; the next read runs the pipeline."""
        with self._lock:
            self._snapshot = None
            self._stored_at = 0

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                'has_snapshot': self._snapshot is not None,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / total if total > 0 else 0,
                'stored_at': self._stored_at,
                'ttl_seconds': self.ttl_seconds,
            }
