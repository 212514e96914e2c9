"""
Airline resolution from flight callsigns.

Callsigns are weakly structured. Most airline flights broadcast the
3-letter ICAO code plus a flight number ('DLH4AB', 'BAW238'), some use the
2-letter IATA code ('PS101'), and general aviation uses a registration
('N172SP'). Resolution order:

1. the whole callsign is an ICAO code ('KLM')
2. the first two characters are an IATA code ('PS101')
3. otherwise the callsign is unresolved

With match_icao_prefix=True a step runs between 1 and 2: the first three
characters, when all letters, are looked up as an ICAO code. That sends
'DLH4AB' to Lufthansa rather than to 'DL' (Delta).

Unresolved callsigns never get a stored region. infer_region() guesses one
from where the aircraft sharing that prefix currently are.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from skyboard.geo import classify_region
from skyboard.models import AircraftState, AirlineActivity, AirlineEntity, Region

logger = logging.getLogger(__name__)


def _airline(icao: str, iata: str, name: str, country: str, region: Region) -> AirlineEntity:
    return AirlineEntity(
        callsign_prefix=icao,
        name=name,
        country=country,
        region=region,
        icao=icao,
        iata=iata,
    )


KNOWN_AIRLINES: List[AirlineEntity] = [
    # Europe
    _airline('DLH', 'LH', 'Lufthansa', 'Germany', Region.EUROPE),
    _airline('BAW', 'BA', 'British Airways', 'United Kingdom', Region.EUROPE),
    _airline('AFR', 'AF', 'Air France', 'France', Region.EUROPE),
    _airline('KLM', 'KL', 'KLM Royal Dutch', 'Netherlands', Region.EUROPE),
    _airline('AUI', 'PS', 'Ukraine International Airlines', 'Ukraine', Region.EUROPE),
    # Asia
    _airline('JAL', 'JL', 'Japan Airlines', 'Japan', Region.ASIA),
    _airline('ANA', 'NH', 'All Nippon Airways', 'Japan', Region.ASIA),
    _airline('CPA', 'CX', 'Cathay Pacific', 'Hong Kong', Region.ASIA),
    _airline('SIA', 'SQ', 'Singapore Airlines', 'Singapore', Region.ASIA),
    _airline('UAE', 'EK', 'Emirates', 'United Arab Emirates', Region.ASIA),
    # Americas
    _airline('UAL', 'UA', 'United Airlines', 'United States', Region.AMERICAS),
    _airline('AAL', 'AA', 'American Airlines', 'United States', Region.AMERICAS),
    _airline('DAL', 'DL', 'Delta Air Lines', 'United States', Region.AMERICAS),
    _airline('SWA', 'WN', 'Southwest Airlines', 'United States', Region.AMERICAS),
    _airline('JBU', 'B6', 'JetBlue Airways', 'United States', Region.AMERICAS),
    _airline('ASA', 'AS', 'Alaska Airlines', 'United States', Region.AMERICAS),
    _airline('ACA', 'AC', 'Air Canada', 'Canada', Region.AMERICAS),
    _airline('WJA', 'WS', 'WestJet', 'Canada', Region.AMERICAS),
    # Africa
    _airline('SAA', 'SA', 'South African Airways', 'South Africa', Region.AFRICA),
    _airline('ETH', 'ET', 'Ethiopian Airlines', 'Ethiopia', Region.AFRICA),
    # Oceania
    _airline('QFA', 'QF', 'Qantas', 'Australia', Region.OCEANIA),
    _airline('ANZ', 'NZ', 'Air New Zealand', 'New Zealand', Region.OCEANIA),
]

# 3-letter ICAO code -> airline
ICAO_AIRLINES: Dict[str, AirlineEntity] = {a.icao: a for a in KNOWN_AIRLINES}

# 2-letter IATA code -> airline
IATA_AIRLINES: Dict[str, AirlineEntity] = {a.iata: a for a in KNOWN_AIRLINES}


def callsign_prefix(callsign: Optional[str]) -> str:
    """Grouping key for a callsign: its first three characters, upper-cased."""
    return (callsign or '').strip().upper()[:3]


class IdentifierResolver:
    """
    Resolves callsigns against static airline tables.

    The tables are injectable so tests and deployments can supply their
    own; by default the module tables are used.
    """

    def __init__(
        self,
        icao_table: Optional[Dict[str, AirlineEntity]] = None,
        iata_table: Optional[Dict[str, AirlineEntity]] = None,
        match_icao_prefix: bool = False,
    ):
        self.match_icao_prefix = match_icao_prefix
        self.icao_table = ICAO_AIRLINES if icao_table is None else icao_table
        self.iata_table = IATA_AIRLINES if iata_table is None else iata_table

    def resolve_airline(self, callsign: Optional[str]) -> AirlineEntity:
        """
        Map a callsign to an airline.

        Returns an entity with resolved=False (never raises) when no
        table matches.
        """
        code = (callsign or '').strip().upper()
        if not code:
            return AirlineEntity.unresolved('')

        if code in self.icao_table:
            return replace(self.icao_table[code], callsign_prefix=code)

        prefix = code[:3]
        if self.match_icao_prefix and len(prefix) == 3 and prefix.isalpha() and prefix in self.icao_table:
            return replace(self.icao_table[prefix], callsign_prefix=prefix)

        iata = code[:2]
        if len(iata) == 2 and iata in self.iata_table:
            return replace(self.iata_table[iata], callsign_prefix=iata)

        logger.debug(f'Unresolved callsign {code!r}')
        return AirlineEntity.unresolved(prefix)

    def infer_region(self, prefix: str, states: Iterable[AircraftState]) -> Region:
        """
        Guess the region of an unresolved prefix.

        Averages the positions of the aircraft whose callsign starts with
        the same three characters and classifies the centroid. No
        positioned aircraft -> UNCLASSIFIED.
        """
        key = callsign_prefix(prefix)
        if not key:
            return Region.UNCLASSIFIED

        coords = [
            (s.latitude, s.longitude)
            for s in states
            if s.has_position and callsign_prefix(s.callsign) == key
        ]
        if not coords:
            return Region.UNCLASSIFIED

        centroid = np.mean(np.array(coords, dtype=np.float64), axis=0)
        return classify_region(float(centroid[0]), float(centroid[1]))

    def summarize_airlines(self, states: List[AircraftState]) -> List[AirlineActivity]:
        """
        Active flights per airline in the given snapshot.

        Aircraft without a callsign are not counted. Sorted by flight
        count, most active first; ties keep first-seen order.
        """
        groups: Dict[str, Tuple[AirlineEntity, int]] = {}
        for state in states:
            if not (state.callsign or '').strip():
                continue
            airline = self.resolve_airline(state.callsign)
            key = airline.icao if airline.resolved else f'?{airline.callsign_prefix}'
            if key in groups:
                entity, count = groups[key]
                groups[key] = (entity, count + 1)
            else:
                groups[key] = (airline, 1)

        activity = []
        for airline, count in groups.values():
            if airline.resolved:
                region = airline.region
            else:
                region = self.infer_region(airline.callsign_prefix, states)
            activity.append(AirlineActivity(airline=airline, region=region, active_flights=count))

        activity.sort(key=lambda a: a.active_flights, reverse=True)
        return activity
