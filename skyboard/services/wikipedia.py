"""
Aircraft reference summaries from the Wikipedia REST API.

GET {base_url}/page/summary/{percent-encoded title} returns a JSON object
whose fields are all optional for our purposes:
- extract: plain-text summary
- thumbnail.source: image URL
- content_urls.desktop.page: article URL

Any missing field degrades to a placeholder (PLACEHOLDER_EXTRACT or None)
and any transport/JSON failure yields a placeholder summary, so a detail
view never fails because of this service.

Technical specs and history facts are pulled out of the extract with
simple case-insensitive patterns. They are best effort and often None.
"""

import logging
import re
import threading
import time
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, List, Tuple
from urllib.parse import quote

import requests

from skyboard.config import WikipediaConfig

logger = logging.getLogger(__name__)

PLACEHOLDER_EXTRACT = 'No summary available.'

# Titles offered for browsing
AIRCRAFT_TITLES: List[str] = [
    'Airbus A220',
    'Airbus A319',
    'Airbus A320',
    'Airbus A321',
    'Airbus A330',
    'Airbus A340',
    'Airbus A350',
    'Airbus A380',
    'Boeing 717',
    'Boeing 737',
    'Boeing 737 MAX',
    'Boeing 747',
    'Boeing 757',
    'Boeing 767',
    'Boeing 777',
    'Boeing 777X',
    'Boeing 787 Dreamliner',
    'Embraer E170',
    'Embraer E175',
    'Embraer E190',
    'Embraer E195',
    'ATR 42',
    'ATR 72',
    'Bombardier CRJ200',
    'Bombardier CRJ700',
    'Bombardier CRJ900',
    'Cessna Citation',
    'Gulfstream G650',
    'Pilatus PC-12',
    'Antonov An-124',
    'Sukhoi Superjet 100',
    'Comac C919',
]

_SPEC_PATTERNS: Dict[str, re.Pattern] = {
    'cruise_speed': re.compile(r'cruise speed[:\s]*([0-9,]+)\s*km/h', re.IGNORECASE),
    'range': re.compile(r'range[:\s]*([0-9,]+)\s*km', re.IGNORECASE),
    'passenger_capacity': re.compile(r'capacity[:\s]*([0-9,]+)\s*passengers?', re.IGNORECASE),
    'wingspan': re.compile(r'wingspan[:\s]*([0-9.]+)\s*m', re.IGNORECASE),
    'length': re.compile(r'length[:\s]*([0-9.]+)\s*m', re.IGNORECASE),
}

_HISTORY_PATTERNS: Dict[str, re.Pattern] = {
    'first_flight': re.compile(r'first flight[:\s]*([0-9]{4})', re.IGNORECASE),
    'manufacturer': re.compile(r'manufactured by[:\s]*([A-Za-z\s]+)', re.IGNORECASE),
    'units_built': re.compile(r'([0-9,]+)\s*built', re.IGNORECASE),
}


def _extract(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


@dataclass(frozen=True)
class TechnicalSpecs:
    cruise_speed: Optional[str] = None
    range: Optional[str] = None
    passenger_capacity: Optional[str] = None
    wingspan: Optional[str] = None
    length: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> 'TechnicalSpecs':
        return cls(**{name: _extract(p, text) for name, p in _SPEC_PATTERNS.items()})


@dataclass(frozen=True)
class History:
    first_flight: Optional[str] = None
    manufacturer: Optional[str] = None
    units_built: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> 'History':
        return cls(**{name: _extract(p, text) for name, p in _HISTORY_PATTERNS.items()})


@dataclass(frozen=True)
class PageSummary:
    """Summary of one article, or a placeholder when unavailable."""
    title: str
    extract: str = PLACEHOLDER_EXTRACT
    image_url: Optional[str] = None
    page_url: Optional[str] = None
    technical_specs: Optional[TechnicalSpecs] = None
    history: Optional[History] = None
    gallery: List[str] = field(default_factory=list)
    available: bool = False

    @classmethod
    def placeholder(cls, title: str) -> 'PageSummary':
        return cls(title=title)

    @classmethod
    def from_json(cls, title: str, data: dict) -> 'PageSummary':
        """Build a summary from the REST payload, tolerating missing fields."""
        extract = data.get('extract')
        if not isinstance(extract, str) or not extract.strip():
            extract = None

        thumbnail = data.get('thumbnail')
        image_url = thumbnail.get('source') if isinstance(thumbnail, dict) else None

        content_urls = data.get('content_urls')
        desktop = content_urls.get('desktop') if isinstance(content_urls, dict) else None
        page_url = desktop.get('page') if isinstance(desktop, dict) else None

        text = extract or ''
        return cls(
            title=data.get('title') or title,
            extract=extract or PLACEHOLDER_EXTRACT,
            image_url=image_url or None,
            page_url=page_url or None,
            technical_specs=TechnicalSpecs.parse(text),
            history=History.parse(text),
            gallery=[image_url] if image_url else [],
            available=extract is not None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


class WikipediaClient:
    """
    Fetches article summaries with a small in-memory cache.

    Placeholders are not cached, so a transient failure is retried on
    the next request.
    """

    def __init__(
        self,
        base_url: str = 'https://en.wikipedia.org/api/rest_v1',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        cache_ttl: int = 3600,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

        # Cache: title -> (PageSummary, timestamp)
        self._cache: Dict[str, Tuple[PageSummary, float]] = {}
        self._cache_ttl = cache_ttl
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, wikipedia: WikipediaConfig, **kwargs) -> 'WikipediaClient':
        return cls(base_url=wikipedia.base_url, timeout=wikipedia.timeout_seconds, **kwargs)

    def list_titles(self) -> List[str]:
        return list(AIRCRAFT_TITLES)

    def summary_url(self, title: str) -> str:
        # Slashes inside a title must not become extra path segments
        encoded = quote(title, safe='')
        return f'{self.base_url}/page/summary/{encoded}'

    def fetch_summary(self, title: str) -> PageSummary:
        """Summary for one title; never raises."""
        title = title.strip()
        if not title:
            return PageSummary.placeholder(title)

        with self._lock:
            if title in self._cache:
                summary, timestamp = self._cache[title]
                if time.time() - timestamp < self._cache_ttl:
                    return summary
                del self._cache[title]

        url = self.summary_url(title)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Wikipedia request failed for {title!r}: {e}')
            return PageSummary.placeholder(title)

        if response.status_code != 200:
            logger.warning(f'Wikipedia API error for {title!r}: {response.status_code}')
            return PageSummary.placeholder(title)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f'Wikipedia returned malformed JSON for {title!r}: {e}')
            return PageSummary.placeholder(title)

        if not isinstance(data, dict):
            logger.error(f'Unexpected Wikipedia payload for {title!r}: {type(data).__name__}')
            return PageSummary.placeholder(title)

        summary = PageSummary.from_json(title, data)
        with self._lock:
            self._cache[title] = (summary, time.time())
        return summary

    @property
    def stats(self) -> dict:
        with self._lock:
            return {'cache_size': len(self._cache)}
