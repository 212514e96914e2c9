"""
Airline models - resolved airline entities and geographic regions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Region(str, Enum):
    """Coarse world regions used for bucketing aircraft and airlines."""
    EUROPE = 'Europe'
    ASIA = 'Asia'
    AMERICAS = 'Americas'
    AFRICA = 'Africa'
    OCEANIA = 'Oceania'
    UNCLASSIFIED = 'Unclassified'


@dataclass(frozen=True)
class AirlineEntity:
    """
    Airline resolved from a flight callsign.

    For unresolved callsigns `resolved` is False, name/country are
    'Unknown' and region is UNCLASSIFIED; the region of such a prefix is
    inferred separately from aircraft positions and never stored here.
    """
    callsign_prefix: str
    name: str
    country: str
    region: Region
    icao: Optional[str] = None
    iata: Optional[str] = None
    resolved: bool = True

    @classmethod
    def unresolved(cls, callsign_prefix: str) -> 'AirlineEntity':
        return cls(
            callsign_prefix=callsign_prefix,
            name='Unknown',
            country='Unknown',
            region=Region.UNCLASSIFIED,
            resolved=False,
        )

    def to_dict(self) -> dict:
        return {
            'callsign_prefix': self.callsign_prefix,
            'name': self.name,
            'country': self.country,
            'region': self.region.value,
            'icao': self.icao,
            'iata': self.iata,
            'resolved': self.resolved,
        }


@dataclass(frozen=True)
class AirlineActivity:
    """Active flight count for one airline in the current snapshot."""
    airline: AirlineEntity
    region: Region
    active_flights: int

    def to_dict(self) -> dict:
        data = self.airline.to_dict()
        data['region'] = self.region.value
        data['active_flights'] = self.active_flights
        return data
