"""
AirportRecord model - static reference data from OurAirports.

This data comes from a large public CSV and is relatively static. It is
cached on disk as JSON, so the record knows how to convert itself to and
from a plain dict.
"""

from dataclasses import dataclass, asdict, fields
from typing import Optional

# Airport kinds kept during ingestion; every other "type" is discarded.
ALLOWED_AIRPORT_TYPES = frozenset({
    'small_airport',
    'medium_airport',
    'large_airport',
    'heliport',
})


@dataclass(frozen=True)
class AirportRecord:
    """
    One airport, heliport or airstrip.

    Fields:
        id: ICAO code, else IATA code, else OurAirports ident, else a
            generated token (first non-empty wins)
        icao: GPS/ICAO code (e.g. 'EGLL'), None when blank
        iata: IATA code (e.g. 'LHR'), None when blank
        country: ISO 3166-1 alpha-2 country code
        city: Municipality served
        type: OurAirports type (one of ALLOWED_AIRPORT_TYPES)
    """
    id: str
    name: str
    city: str
    country: str
    iata: Optional[str] = None
    icao: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    type: Optional[str] = None
    elevation_ft: Optional[int] = None
    continent: Optional[str] = None
    iso_region: Optional[str] = None
    local_code: Optional[str] = None
    scheduled_service: Optional[str] = None

    def __repr__(self) -> str:
        return f'<AirportRecord {self.id} {self.name!r}>'

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'AirportRecord':
        """
        Rebuild a record from its cached dict form.

        Unknown keys are ignored. Raises KeyError/TypeError when required
        fields are missing so that a corrupt cache is detected.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
