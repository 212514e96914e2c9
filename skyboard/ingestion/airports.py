"""
Airport reference data - OurAirports CSV ingestion with an on-disk cache.

Load order for load_airports():
1. Airports already loaded by this repository instance
2. The JSON cache file, if it exists and holds at least one record
3. The remote CSV, parsed, filtered and written back to the cache file

There is no expiry: a present, non-empty cache file is trusted as-is.
invalidate() removes it so the next load goes to the network.

CSV header (OurAirports):
id,ident,type,name,latitude_deg,longitude_deg,elevation_ft,continent,
iso_country,iso_region,municipality,scheduled_service,gps_code,iata_code,
local_code,home_link,wikipedia_link,keywords

Only the first 15 columns are read; rows with fewer are skipped.
"""

import json
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Optional, List, Dict

import requests

from skyboard.config import ReferenceDataConfig
from skyboard.ingestion.csv_parser import parse_csv
from skyboard.models import AirportRecord, ALLOWED_AIRPORT_TYPES

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1
MIN_COLUMNS = 15

COL_IDENT = 1
COL_TYPE = 2
COL_NAME = 3
COL_LATITUDE = 4
COL_LONGITUDE = 5
COL_ELEVATION = 6
COL_CONTINENT = 7
COL_ISO_COUNTRY = 8
COL_ISO_REGION = 9
COL_MUNICIPALITY = 10
COL_SCHEDULED_SERVICE = 11
COL_GPS_CODE = 12
COL_IATA_CODE = 13
COL_LOCAL_CODE = 14


def _blank_to_none(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def _parse_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def row_to_airport(row: List[str]) -> Optional[AirportRecord]:
    """
    Build an AirportRecord from one parsed CSV row.

    Returns None for short rows and for types outside the allow-list.
    """
    if len(row) < MIN_COLUMNS:
        return None

    airport_type = row[COL_TYPE].strip()
    if airport_type not in ALLOWED_AIRPORT_TYPES:
        return None

    icao = _blank_to_none(row[COL_GPS_CODE])
    iata = _blank_to_none(row[COL_IATA_CODE])
    ident = _blank_to_none(row[COL_IDENT])
    airport_id = icao or iata or ident or str(uuid.uuid4())

    return AirportRecord(
        id=airport_id,
        name=row[COL_NAME].strip() or 'Unknown',
        city=row[COL_MUNICIPALITY].strip(),
        country=row[COL_ISO_COUNTRY].strip(),
        iata=iata,
        icao=icao,
        latitude=_parse_float(row[COL_LATITUDE]),
        longitude=_parse_float(row[COL_LONGITUDE]),
        type=airport_type,
        elevation_ft=_parse_int(row[COL_ELEVATION]),
        continent=_blank_to_none(row[COL_CONTINENT]),
        iso_region=_blank_to_none(row[COL_ISO_REGION]),
        local_code=_blank_to_none(row[COL_LOCAL_CODE]),
        scheduled_service=_blank_to_none(row[COL_SCHEDULED_SERVICE]),
    )


def parse_airports(text: str) -> List[AirportRecord]:
    """Parse the full CSV text (header included) into filtered records."""
    airports = []
    for row in parse_csv(text, skip_header=True):
        airport = row_to_airport(row)
        if airport is not None:
            airports.append(airport)
    return airports


class AirportRepository:
    """
    Owns the airport collection and its cache file.

    Not safe for concurrent writers across processes: two repositories
    saving at once race on the cache file and the last rename wins.
    """

    def __init__(
        self,
        url: str = 'https://ourairports.com/data/airports.csv',
        cache_path: Optional[Path] = None,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.cache_path = Path(cache_path) if cache_path else None
        self.timeout = timeout
        self.session = session or requests.Session()

        self._airports: List[AirportRecord] = []
        self._by_id: Dict[str, AirportRecord] = {}
        self._lock = threading.RLock()

        # Where the current collection came from: None, 'cache' or 'network'
        self.source: Optional[str] = None

    @classmethod
    def from_config(cls, reference: ReferenceDataConfig, **kwargs) -> 'AirportRepository':
        return cls(
            url=reference.airports_url,
            cache_path=reference.cache_path,
            timeout=reference.timeout_seconds,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Cache file
    # -------------------------------------------------------------------------

    def read_cache(self) -> Optional[List[AirportRecord]]:
        """
        Read the cache file.

        Returns None when the file is missing, unreadable, corrupt or
        empty; every one of those is a cache miss.
        """
        if self.cache_path is None or not self.cache_path.exists():
            return None

        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
            if payload.get('format') != CACHE_FORMAT_VERSION:
                logger.warning(f'Ignoring airport cache with unknown format: {payload.get("format")!r}')
                return None
            airports = [AirportRecord.from_dict(item) for item in payload['airports']]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f'Airport cache unreadable, treating as miss: {e}')
            return None

        if not airports:
            return None
        return airports

    def write_cache(self, airports: List[AirportRecord]) -> bool:
        """
        Overwrite the cache file with the given collection.

        Written to a temporary file and renamed into place. Failures are
        logged and reported as False; they never raise.
        """
        if self.cache_path is None:
            return False

        tmp_path = self.cache_path.with_name(self.cache_path.name + '.tmp')
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            payload = {
                'format': CACHE_FORMAT_VERSION,
                'airports': [a.to_dict() for a in airports],
            }
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f)
            os.replace(tmp_path, self.cache_path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f'Failed to write airport cache {self.cache_path}: {e}')
            try:
                tmp_path.unlink()
            except OSError:
                pass
            return False

        logger.info(f'Wrote {len(airports)} airports to cache {self.cache_path}')
        return True

    def invalidate(self) -> None:
        """Drop the cache file and the in-memory collection."""
        with self._lock:
            self._set_airports([], None)
            if self.cache_path is not None:
                try:
                    self.cache_path.unlink()
                    logger.info(f'Removed airport cache {self.cache_path}')
                except FileNotFoundError:
                    pass
                except OSError as e:
                    logger.warning(f'Failed to remove airport cache {self.cache_path}: {e}')

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def fetch_csv(self) -> Optional[str]:
        """Download the reference CSV. Returns None on any transport failure."""
        logger.info(f'Downloading airport reference data from {self.url}')
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Airport reference download failed: {e}')
            return None

        if response.status_code != 200:
            logger.error(f'Airport reference download error: {response.status_code}')
            return None

        return response.content.decode('utf-8', errors='replace')

    def load_airports(self, force_refresh: bool = False) -> List[AirportRecord]:
        """
        Return the airport collection, loading it if needed.

        Never raises for network or cache problems. When the download
        fails or parses to no airports, the last good collection of this
        instance is returned and the cache file is left untouched
        (empty on a cold start).
        """
        with self._lock:
            if self._airports and not force_refresh:
                return list(self._airports)

            if not force_refresh:
                cached = self.read_cache()
                if cached:
                    logger.info(f'Loaded {len(cached)} airports from cache')
                    self._set_airports(cached, 'cache')
                    return list(cached)

            text = self.fetch_csv()
            if text is None:
                if self._airports:
                    logger.warning('Serving last good airport collection')
                return list(self._airports)

            airports = parse_airports(text)
            if not airports:
                logger.warning('Reference feed yielded no airports, keeping last good collection')
                return list(self._airports)
            logger.info(f'Parsed {len(airports)} airports from reference feed')

            self.write_cache(airports)
            self._set_airports(airports, 'network')
            return list(airports)

    def _set_airports(self, airports: List[AirportRecord], source: Optional[str]) -> None:
        self._airports = list(airports)
        self._by_id = {a.id: a for a in airports}
        self.source = source

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, airport_id: str) -> Optional[AirportRecord]:
        """Find an airport by id, falling back to its IATA or ICAO code."""
        airports = self.load_airports()
        key = airport_id.strip().upper()
        with self._lock:
            found = self._by_id.get(airport_id) or self._by_id.get(key)
        if found:
            return found
        for airport in airports:
            if airport.iata == key or airport.icao == key:
                return airport
        return None

    def find(
        self,
        query: Optional[str] = None,
        country: Optional[str] = None,
        limit: int = 50,
    ) -> List[AirportRecord]:
        """
        Case-insensitive search over name, city and codes.

        Args:
            query: Substring to match; None or '' matches everything
            country: ISO country code filter
            limit: Maximum results, in collection order
        """
        needle = (query or '').strip().lower()
        country = (country or '').strip().upper()

        results = []
        for airport in self.load_airports():
            if country and airport.country.upper() != country:
                continue
            if needle:
                haystack = (
                    airport.name.lower(),
                    airport.city.lower(),
                    (airport.iata or '').lower(),
                    (airport.icao or '').lower(),
                    airport.id.lower(),
                )
                if not any(needle in field for field in haystack):
                    continue
            results.append(airport)
            if len(results) >= limit:
                break
        return results

    @property
    def stats(self) -> dict:
        with self._lock:
            return {
                'airports': len(self._airports),
                'source': self.source,
                'cache_path': str(self.cache_path) if self.cache_path else None,
            }
