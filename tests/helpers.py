"""
Shared test doubles: a requests-compatible session with queued responses.
"""

import json
from typing import Any, List, Optional

import requests

from skyboard.models import AircraftState

AIRPORTS_HEADER = (
    'id,ident,type,name,latitude_deg,longitude_deg,elevation_ft,continent,'
    'iso_country,iso_region,municipality,scheduled_service,gps_code,iata_code,'
    'local_code,home_link,wikipedia_link,keywords'
)

# The feed row used in end-to-end scenarios
PS101_ROW = ['abc123', 'PS101 ', 'Ukraine', None, None, 30.45, 50.45, 2000, False, 61.1, 140, -1.2]


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    text: Optional[str] = None,
    url: str = '',
) -> requests.Response:
    """Real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = 'utf-8'
    if json_body is not None:
        response._content = json.dumps(json_body).encode('utf-8')
        response.headers['Content-Type'] = 'application/json'
    elif text is not None:
        response._content = text.encode('utf-8')
    else:
        response._content = b''
    return response


class FakeSession:
    """
    Stands in for requests.Session.

    Each get() pops the next queued item: a Response is returned, an
    exception is raised. An empty queue raises ConnectionError.
    """

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    def queue(self, item: Any) -> None:
        self.responses.append(item)

    def get(self, url, params=None, auth=None, timeout=None, **kwargs):
        self.calls.append({'url': url, 'params': params, 'auth': auth, 'timeout': timeout})
        if not self.responses:
            raise requests.exceptions.ConnectionError('no response queued')
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def airport_row(
    ident: str = 'EGLL',
    airport_type: str = 'large_airport',
    name: str = 'London Heathrow Airport',
    lat: str = '51.4706',
    lon: str = '-0.461941',
    elevation: str = '83',
    country: str = 'GB',
    city: str = 'London',
    gps_code: str = 'EGLL',
    iata: str = 'LHR',
    local_code: str = '',
) -> str:
    """One OurAirports CSV line with all 18 columns."""
    fields = [
        '1', ident, airport_type, name, lat, lon, elevation, 'EU',
        country, f'{country}-ENG', city, 'yes', gps_code, iata,
        local_code, '', '', '',
    ]
    return ','.join(f'"{f}"' for f in fields)


def airports_csv(*rows: str) -> str:
    return '\n'.join((AIRPORTS_HEADER,) + rows) + '\n'


def make_state(
    icao24: str = 'abc123',
    callsign: Optional[str] = 'TST1',
    lat: Optional[float] = 50.0,
    lon: Optional[float] = 10.0,
    altitude: Optional[float] = 10000.0,
    speed: Optional[float] = 230.0,
    vertical_rate: Optional[float] = 0.0,
    on_ground: Optional[bool] = False,
    aircraft_type: Optional[str] = None,
    country: Optional[str] = 'Germany',
) -> AircraftState:
    """AircraftState with cruising defaults; override what the test cares about."""
    return AircraftState(
        id=icao24,
        callsign=callsign,
        origin_country=country,
        longitude=lon,
        latitude=lat,
        altitude=altitude,
        ground_speed=speed,
        heading=90.0,
        vertical_rate=vertical_rate,
        on_ground=on_ground,
        aircraft_type=aircraft_type,
    )
