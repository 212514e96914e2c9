import pytest

from skyboard.ingestion import OpenSkyClient
from tests.helpers import FakeSession


@pytest.fixture
def fake_session() -> FakeSession:
    """Session with an empty response queue."""
    return FakeSession()


@pytest.fixture
def opensky_client(fake_session) -> OpenSkyClient:
    """OpenSky client on the fake session, without rate limiting."""
    return OpenSkyClient(session=fake_session, min_interval=0)


@pytest.fixture
def cache_path(tmp_path):
    """Return a cache file location inside a temporary directory."""
    return tmp_path / 'cache' / 'airports_cache.json'
