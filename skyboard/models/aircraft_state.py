"""
AircraftState model - one normalized telemetry record.

Produced by the live state normalizer from a single decoded feed row.
Records are immutable: a refreshed snapshot replaces the whole collection
instead of patching individual aircraft.

Units follow the OpenSky feed (SI):
- altitude in meters (barometric)
- ground_speed and vertical_rate in m/s
- heading in degrees from true north
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

# Feed speeds are m/s; presentation uses km/h.
KMH_PER_MPS = 3.6


class FlightPhase(str, Enum):
    """
    Detected flight phase based on telemetry.

    - GROUND: on_ground flag set, or low and level
    - CLIMB: vertical rate above ~500 fpm
    - CRUISE: vertical rate within +/-500 fpm
    - DESCENT: vertical rate below ~-500 fpm
    - UNKNOWN: insufficient data
    """
    GROUND = 'ground'
    CLIMB = 'climb'
    CRUISE = 'cruise'
    DESCENT = 'descent'
    UNKNOWN = 'unknown'


def detect_flight_phase(
    on_ground: Optional[bool],
    vertical_rate: Optional[float],
    altitude: Optional[float],
) -> FlightPhase:
    """
    Determine flight phase from telemetry.

    Logic:
    - on_ground=True -> GROUND
    - altitude < 500m AND vertical_rate near zero -> GROUND (taxiing)
    - vertical_rate > 2.5 m/s (~500 fpm) -> CLIMB
    - vertical_rate < -2.5 m/s -> DESCENT
    - otherwise -> CRUISE

    An unknown on_ground flag is treated as airborne.
    """
    if on_ground:
        return FlightPhase.GROUND

    if altitude is not None and altitude < 500:
        if vertical_rate is None or abs(vertical_rate) < 1.0:
            return FlightPhase.GROUND

    if vertical_rate is None:
        return FlightPhase.UNKNOWN

    if vertical_rate > 2.5:
        return FlightPhase.CLIMB
    elif vertical_rate < -2.5:
        return FlightPhase.DESCENT
    else:
        return FlightPhase.CRUISE


@dataclass(frozen=True)
class AircraftState:
    """
    Normalized state of one aircraft at fetch time.

    Every field may be None when the feed did not report it. A record
    with an identifier but no kinematics is still valid ("no fix yet").

    Fields:
        id: ICAO24 transponder address as reported (e.g. 'abc123')
        callsign: Whitespace-trimmed callsign, '' when broadcast blank
        on_ground: True / False / None (unknown)
        aircraft_type: Coarse type guessed from the ICAO24 prefix
    """
    id: Optional[str]
    callsign: Optional[str]
    origin_country: Optional[str]
    longitude: Optional[float]
    latitude: Optional[float]
    altitude: Optional[float]
    ground_speed: Optional[float]
    heading: Optional[float]
    vertical_rate: Optional[float]
    on_ground: Optional[bool]
    time_position: Optional[int] = None
    last_contact: Optional[int] = None
    aircraft_type: Optional[str] = None

    def __repr__(self) -> str:
        return f'<AircraftState {self.id or "?"} {self.callsign or "?"} @ {self.altitude or 0:.0f}m>'

    @property
    def has_position(self) -> bool:
        """Check if this state has a usable position fix."""
        return self.latitude is not None and self.longitude is not None

    # -------------------------------------------------------------------------
    # Display helpers - convert to human-friendly units
    # -------------------------------------------------------------------------

    @property
    def speed_kmh(self) -> Optional[float]:
        """Ground speed in km/h."""
        if self.ground_speed is None:
            return None
        return self.ground_speed * KMH_PER_MPS

    @property
    def flight_phase(self) -> FlightPhase:
        return detect_flight_phase(self.on_ground, self.vertical_rate, self.altitude)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        data = asdict(self)
        data['speed_kmh'] = self.speed_kmh
        data['flight_phase'] = self.flight_phase.value
        return data
