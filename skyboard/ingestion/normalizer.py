"""
Live state normalizer - decoded feed rows to AircraftState records.

Policy:
1. No envelope (fetch failed), no `states` array, or zero rows -> the fixed
   fallback set from skyboard.ingestion.fallback
2. Each row is decoded at fixed positions; undecodable rows are dropped
3. The result is capped at MAX_STATES records, in feed order
4. If every row was dropped -> the fallback set

A row with an identifier and no kinematics is kept: consumers treat it as
an aircraft without a position fix yet.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from skyboard.geo import GeoBox
from skyboard.ingestion.aircraft_types import lookup_aircraft_type
from skyboard.ingestion.fallback import fallback_aircraft
from skyboard.ingestion.opensky_client import FeedUnavailable, OpenSkyClient, TelemetryEnvelope
from skyboard.ingestion.row_decoder import RawRow, decode_rows
from skyboard.models import AircraftState

logger = logging.getLogger(__name__)

MAX_STATES = 50

# Feed positions
IDX_ICAO24 = 0
IDX_CALLSIGN = 1
IDX_ORIGIN_COUNTRY = 2
IDX_TIME_POSITION = 3
IDX_LAST_CONTACT = 4
IDX_LONGITUDE = 5
IDX_LATITUDE = 6
IDX_BARO_ALTITUDE = 7
IDX_ON_GROUND = 8
IDX_VELOCITY = 9
IDX_TRUE_TRACK = 10
IDX_VERTICAL_RATE = 11


def row_to_state(
    row: RawRow,
    type_lookup: Callable[[Optional[str]], Optional[str]] = lookup_aircraft_type,
) -> AircraftState:
    """Read one decoded row at the fixed OpenSky positions."""
    icao24 = row.string_at(IDX_ICAO24)
    callsign = row.string_at(IDX_CALLSIGN)
    if callsign is not None:
        callsign = callsign.strip()

    return AircraftState(
        id=icao24,
        callsign=callsign,
        origin_country=row.string_at(IDX_ORIGIN_COUNTRY),
        longitude=row.double_at(IDX_LONGITUDE),
        latitude=row.double_at(IDX_LATITUDE),
        altitude=row.double_at(IDX_BARO_ALTITUDE),
        ground_speed=row.double_at(IDX_VELOCITY),
        heading=row.double_at(IDX_TRUE_TRACK),
        vertical_rate=row.double_at(IDX_VERTICAL_RATE),
        on_ground=row.bool_at(IDX_ON_GROUND),
        time_position=row.int_at(IDX_TIME_POSITION),
        last_contact=row.int_at(IDX_LAST_CONTACT),
        aircraft_type=type_lookup(icao24),
    )


@dataclass(frozen=True)
class NormalizationResult:
    """Normalized states plus how they were obtained."""
    states: List[AircraftState]
    used_fallback: bool
    api_time: Optional[int] = None
    dropped_rows: int = 0
    error: Optional[str] = None
    total_rows: int = 0


class LiveStateNormalizer:
    """
    Turns telemetry envelopes into bounded lists of AircraftState.

    The client is optional: normalize() works on any envelope, while
    fetch_states() needs a client to fetch one first.
    """

    def __init__(
        self,
        client: Optional[OpenSkyClient] = None,
        max_states: int = MAX_STATES,
        type_lookup: Callable[[Optional[str]], Optional[str]] = lookup_aircraft_type,
    ):
        self.client = client
        self.max_states = max_states
        self.type_lookup = type_lookup

    def normalize(self, envelope: Optional[TelemetryEnvelope]) -> List[AircraftState]:
        """Normalize one envelope; None stands for a failed fetch."""
        return self.normalize_with_status(envelope).states

    def normalize_with_status(
        self,
        envelope: Optional[TelemetryEnvelope],
        error: Optional[str] = None,
    ) -> NormalizationResult:
        if envelope is None:
            logger.warning('Telemetry feed unavailable, serving fallback aircraft')
            return NormalizationResult(fallback_aircraft(), used_fallback=True, error=error)

        rows = envelope.states or []
        if not rows:
            logger.warning('Telemetry feed returned no states, serving fallback aircraft')
            return NormalizationResult(
                fallback_aircraft(),
                used_fallback=True,
                api_time=envelope.time,
                error=error,
            )

        decoded, dropped = decode_rows(rows)
        if dropped:
            logger.debug(f'Dropped {dropped} undecodable state rows')

        states = [row_to_state(row, self.type_lookup) for row in decoded[:self.max_states]]
        if not states:
            logger.warning(f'All {len(rows)} state rows were undecodable, serving fallback aircraft')
            return NormalizationResult(
                fallback_aircraft(),
                used_fallback=True,
                api_time=envelope.time,
                dropped_rows=dropped,
                total_rows=len(rows),
            )

        logger.info(f'Normalized {len(states)} of {len(rows)} state rows')
        return NormalizationResult(
            states,
            used_fallback=False,
            api_time=envelope.time,
            dropped_rows=dropped,
            total_rows=len(rows),
        )

    def fetch_states(self, bbox: Optional[GeoBox] = None) -> NormalizationResult:
        """
        Fetch and normalize the current states. Never raises for feed
        problems: any failure yields the fallback set.
        """
        if self.client is None:
            return self.normalize_with_status(None, error='No telemetry client configured')

        try:
            envelope = self.client.get_envelope(bbox=bbox)
        except FeedUnavailable as e:
            return self.normalize_with_status(None, error=str(e))

        return self.normalize_with_status(envelope)
