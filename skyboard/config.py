"""
Configuration management for SkyBoard.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _default_cache_dir() -> str:
    """User cache directory, honouring XDG_CACHE_HOME when set."""
    base = os.getenv('XDG_CACHE_HOME') or str(Path.home() / '.cache')
    return str(Path(base) / 'skyboard')


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration."""
    username: Optional[str] = os.getenv('OPENSKY_USERNAME') or None
    password: Optional[str] = os.getenv('OPENSKY_PASSWORD') or None
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    timeout_seconds: float = float(os.getenv('OPENSKY_TIMEOUT_SECONDS', '30'))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username and self.password)

    @property
    def rate_limit_seconds(self) -> int:
        # Authenticated users can poll more frequently
        return 5 if self.is_authenticated else 10


@dataclass(frozen=True)
class ReferenceDataConfig:
    """Airport reference feed and on-disk cache location."""
    airports_url: str = os.getenv('AIRPORTS_CSV_URL', 'https://ourairports.com/data/airports.csv')
    cache_dir: str = os.getenv('SKYBOARD_CACHE_DIR') or _default_cache_dir()
    cache_filename: str = 'airports_cache.json'
    timeout_seconds: float = float(os.getenv('REFERENCE_TIMEOUT_SECONDS', '60'))

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir) / self.cache_filename


@dataclass(frozen=True)
class WikipediaConfig:
    """Wikipedia REST summary endpoint."""
    base_url: str = os.getenv('WIKIPEDIA_BASE_URL', 'https://en.wikipedia.org/api/rest_v1')
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class CacheConfig:
    """In-memory telemetry snapshot settings."""
    ttl_seconds: int = int(os.getenv('CACHE_TTL_SECONDS', '10'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    reference: ReferenceDataConfig
    wikipedia: WikipediaConfig
    cache: CacheConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        reference=ReferenceDataConfig(),
        wikipedia=WikipediaConfig(),
        cache=CacheConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


config = load_config()
