"""
Coarse aircraft type lookup by ICAO24 address prefix.

OpenSky state vectors carry no type information. Blocks of ICAO24
addresses are allocated per country and are often assigned in runs to
one operator's fleet, so the first three hex digits give a rough guess
for display and type grouping. It is a heuristic: unknown prefixes
return None and the aggregation falls back to the raw identifier.

Usage:
    from skyboard.ingestion.aircraft_types import lookup_aircraft_type

    lookup_aircraft_type('4CC2A1')  # 'Boeing 737'
    lookup_aircraft_type('e48f00')  # None
"""

from typing import Dict, Optional

# ICAO24 prefix (lowercase hex) -> type description
AIRCRAFT_TYPE_PREFIXES: Dict[str, str] = {
    '4cc': 'Boeing 737',
    '4bb': 'Boeing 777',
    '4ac': 'Airbus A320',
    '4bc': 'Airbus A330',
    '39d': 'Airbus A380',
    '801': 'Boeing 787',
    '407': 'Embraer E190',
    '511': 'ATR 72',
    '471': 'Cessna 172',
    'ae5': 'Gulfstream G650',
}


def lookup_aircraft_type(icao24: Optional[str]) -> Optional[str]:
    """Guess the aircraft type from the first three hex digits of the address."""
    if not icao24 or len(icao24) < 3:
        return None
    return AIRCRAFT_TYPE_PREFIXES.get(icao24[:3].lower())
