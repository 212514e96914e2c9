"""
OpenSky Network API client.

Fetches the raw `states/all` envelope. Interpretation of the rows is left
to the live state normalizer; this module only deals with transport:
- Authentication (optional but recommended for higher rate limits)
- Bounding box queries for geographic filtering
- Rate limiting compliance
- Mapping every transport or envelope failure to FeedUnavailable

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max, space padded)
2: origin_country  - Country of registration
3: time_position   - Unix timestamp of last position update
4: last_contact    - Unix timestamp of last message
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
9: velocity        - Ground speed (m/s)
10: true_track     - Track angle (degrees, 0=north)
11: vertical_rate  - Vertical rate (m/s)
12+: sensors, geo_altitude, squawk, spi, position_source (unused)
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, List, Any

import requests
from requests.auth import HTTPBasicAuth

from skyboard.config import OpenSkyConfig
from skyboard.geo import GeoBox

logger = logging.getLogger(__name__)


class FeedUnavailable(Exception):
    """The telemetry feed could not be fetched or its envelope was unusable."""


@dataclass(frozen=True)
class TelemetryEnvelope:
    """
    Top-level feed response.

    Both fields are optional in the wire format. `states` holds the raw,
    still undecoded rows.
    """
    time: Optional[int]
    states: Optional[List[Any]]

    @classmethod
    def from_json(cls, data: Any) -> 'TelemetryEnvelope':
        """
        Build an envelope from the decoded JSON body.

        Raises:
            FeedUnavailable: if the body is not an object, or `states`
                is present but not an array
        """
        if not isinstance(data, dict):
            raise FeedUnavailable(f'Unexpected envelope type: {type(data).__name__}')

        states = data.get('states')
        if states is not None and not isinstance(states, list):
            raise FeedUnavailable('Envelope "states" is not an array')

        api_time = data.get('time')
        if isinstance(api_time, bool) or not isinstance(api_time, (int, float)):
            api_time = None
        else:
            api_time = int(api_time)

        return cls(time=api_time, states=states)


class OpenSkyClient:
    """
    Client for OpenSky Network API.

    Handles:
    - GET requests to /states/all endpoint
    - Optional authentication for higher rate limits
    - Bounding box filtering
    - Rate limiting (internal tracking)
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        min_interval: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.auth = None
        if username and password:
            self.auth = HTTPBasicAuth(username, password)
            logger.info('OpenSky client initialized with authentication')
        else:
            logger.warning('OpenSky client running without authentication (lower rate limits)')

        self.session = session or requests.Session()
        self.last_request_time: float = 0
        if min_interval is None:
            min_interval = 5.0 if self.auth else 10.0
        self._min_interval = min_interval

    @classmethod
    def from_config(cls, opensky: OpenSkyConfig, **kwargs) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            username=opensky.username,
            password=opensky.password,
            base_url=opensky.base_url,
            timeout=opensky.timeout_seconds,
            min_interval=float(opensky.rate_limit_seconds),
            **kwargs,
        )

    def _wait_for_rate_limit(self) -> None:
        """
        Enforce minimum interval between requests.

        OpenSky rate limits:
        - Anonymous: ~10 seconds between requests
        - Authenticated: ~5 seconds between requests
        """
        elapsed = time.time() - self.last_request_time
        if elapsed < self._min_interval:
            sleep_time = self._min_interval - elapsed
            logger.debug(f'Rate limiting: sleeping {sleep_time:.1f}s')
            time.sleep(sleep_time)

    def get_envelope(self, bbox: Optional[GeoBox] = None) -> TelemetryEnvelope:
        """
        Fetch the current state vectors envelope from OpenSky.

        Args:
            bbox: Optional bounding box to filter by geography

        Returns:
            TelemetryEnvelope with the raw rows

        Raises:
            FeedUnavailable on network errors, non-200 status or a
            malformed JSON body
        """
        self._wait_for_rate_limit()

        url = f'{self.base_url}/states/all'
        params = bbox.to_params() if bbox else {}

        logger.debug(f'Fetching states: {url} params={params}')

        try:
            response = self.session.get(
                url,
                params=params,
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error('OpenSky API timeout')
            raise FeedUnavailable('OpenSky API timeout') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise FeedUnavailable(str(e)) from e
        finally:
            # Failed attempts count against the rate limit too
            self.last_request_time = time.time()

        if response.status_code != 200:
            if response.status_code == 429:
                logger.warning('OpenSky rate limit exceeded')
            else:
                logger.error(f'OpenSky API error: {response.status_code}')
            raise FeedUnavailable(f'OpenSky returned HTTP {response.status_code}')

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f'OpenSky returned malformed JSON: {e}')
            raise FeedUnavailable('Malformed JSON envelope') from e

        envelope = TelemetryEnvelope.from_json(data)
        logger.info(f'Received {len(envelope.states or [])} state vectors from OpenSky')
        return envelope
