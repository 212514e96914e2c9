"""
Fixed fallback telemetry.

Returned by the live state normalizer whenever the feed is unreachable,
malformed or empty, so consumers always have something to show. These are
fixtures, not real traffic.
"""

from typing import List

from skyboard.models import AircraftState

FALLBACK_AIRCRAFT: List[AircraftState] = [
    AircraftState(
        id='abc123',
        callsign='PS101',
        origin_country='Ukraine',
        longitude=30.45,
        latitude=50.45,
        altitude=2000.0,
        ground_speed=220.0,
        heading=140.0,
        vertical_rate=-1.2,
        on_ground=False,
        aircraft_type='Boeing 737',
    ),
    AircraftState(
        id='def456',
        callsign='BA238',
        origin_country='United Kingdom',
        longitude=-0.45,
        latitude=51.47,
        altitude=1500.0,
        ground_speed=190.0,
        heading=280.0,
        vertical_rate=0.4,
        on_ground=False,
        aircraft_type='Airbus A320',
    ),
    AircraftState(
        id='ghi789',
        callsign='DLH4AB',
        origin_country='Germany',
        longitude=8.56,
        latitude=50.04,
        altitude=2300.0,
        ground_speed=210.0,
        heading=90.0,
        vertical_rate=0.0,
        on_ground=False,
        aircraft_type='Boeing 777',
    ),
]


def fallback_aircraft() -> List[AircraftState]:
    """Fresh list of the fallback records (the records themselves are immutable)."""
    return list(FALLBACK_AIRCRAFT)
