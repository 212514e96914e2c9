"""
Tests for the HTTP API, with every external service faked.
"""

import pytest

from skyboard.app import create_app
from skyboard.ingestion import AirportRepository, LiveStateNormalizer
from skyboard.ingestion.pipeline import TelemetryPipeline
from skyboard.services import WikipediaClient
from tests.helpers import FakeSession, airport_row, airports_csv, make_response

ROWS = [
    ['abc123', 'PS101 ', 'Ukraine', None, None, 30.45, 50.45, 2000, False, 61.1, 140, -1.2],
    ['a00001', 'UAL901', 'United States', None, None, -74.0, 40.7, 11000.0, False, 250.0, 80.0, 0.0],
    ['a00002', 'XQZ77', 'Japan', None, None, 139.7, 35.7, 0.0, True, 0.0, 0.0, 0.0],
]


@pytest.fixture
def feed_session(fake_session):
    fake_session.queue(make_response(200, {'time': 1700000000, 'states': ROWS}))
    return fake_session


@pytest.fixture
def app(feed_session, opensky_client, cache_path):
    pipeline = TelemetryPipeline(LiveStateNormalizer(client=opensky_client))

    airports = AirportRepository(
        url='https://example.test/airports.csv',
        cache_path=cache_path,
        session=FakeSession([make_response(200, text=airports_csv(
            airport_row(),
            airport_row(ident='KJFK', name='John F Kennedy International Airport', country='US',
                        city='New York', gps_code='KJFK', iata='JFK'),
        ))]),
    )

    wiki_session = FakeSession([make_response(200, {
        'title': 'Airbus A320',
        'extract': 'The Airbus A320 family first flight 1987.',
    })])
    wikipedia = WikipediaClient(session=wiki_session)

    app = create_app(pipeline=pipeline, airports=airports, wikipedia=wikipedia)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok'}

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Not found'}


class TestAircraftEndpoints:

    def test_list(self, client):
        data = client.get('/api/aircraft').get_json()

        assert data['count'] == 3
        assert data['aircraft'][0]['callsign'] == 'PS101'
        assert data['aircraft'][0]['speed_kmh'] == pytest.approx(219.96)
        assert data['snapshot']['used_fallback'] is False

    def test_airborne_only(self, client):
        data = client.get('/api/aircraft?airborne_only=true').get_json()
        assert [a['id'] for a in data['aircraft']] == ['abc123', 'a00001']

    def test_region_filter(self, client):
        data = client.get('/api/aircraft?region=americas').get_json()
        assert [a['id'] for a in data['aircraft']] == ['a00001']

    def test_unknown_region(self, client):
        response = client.get('/api/aircraft?region=Mars')
        assert response.status_code == 400
        assert 'Mars' in response.get_json()['error']

    def test_sort_and_limit(self, client):
        data = client.get('/api/aircraft?sort=altitude&limit=2').get_json()
        assert [a['id'] for a in data['aircraft']] == ['a00001', 'abc123']

    def test_detail(self, client):
        data = client.get('/api/aircraft/ABC123').get_json()

        assert data['callsign'] == 'PS101'
        assert data['airline']['name'] == 'Ukraine International Airlines'
        assert data['region'] == 'Europe'
        assert data['flight_phase'] == 'cruise'

    def test_detail_not_found(self, client):
        response = client.get('/api/aircraft/zzz999')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Aircraft not found'}


class TestAirlineEndpoints:

    def test_list(self, client):
        data = client.get('/api/airlines').get_json()
        names = [a['name'] for a in data['airlines']]

        assert data['count'] == 3
        assert 'Ukraine International Airlines' in names
        assert 'United Airlines' in names

    def test_resolved_only(self, client):
        data = client.get('/api/airlines?resolved_only=true').get_json()
        assert all(a['resolved'] for a in data['airlines'])
        assert data['count'] == 2

    def test_region_filter_uses_inferred_region(self, client):
        data = client.get('/api/airlines?region=asia').get_json()
        assert [a['callsign_prefix'] for a in data['airlines']] == ['XQZ']

    def test_resolve_known(self, client):
        data = client.get('/api/airlines/resolve/BA238').get_json()
        assert data['name'] == 'British Airways'
        assert data['region_inferred'] is False

    def test_resolve_unknown_infers_region(self, client):
        data = client.get('/api/airlines/resolve/XQZ12').get_json()

        assert data['resolved'] is False
        assert data['region'] == 'Asia'
        assert data['region_inferred'] is True


class TestMetricsEndpoints:

    def test_stats(self, client):
        data = client.get('/api/metrics/stats').get_json()

        assert data['stats']['total_aircraft'] == 3
        assert data['stats']['fastest']['callsign'] == 'UAL901'
        assert data['stats']['highest']['value'] == 11000.0
        assert data['used_fallback'] is False

    def test_status_before_any_run(self, client, feed_session):
        data = client.get('/api/metrics/status').get_json()

        assert data['status'] == 'healthy'
        assert data['pipeline']['run_count'] == 0
        assert data['airports']['airports'] == 0
        assert feed_session.calls == []

    def test_status_degraded_when_feed_is_down(self, client, feed_session):
        feed_session.responses.clear()
        client.get('/api/aircraft')

        data = client.get('/api/metrics/status').get_json()

        assert data['status'] == 'degraded'
        assert data['pipeline']['fallback_count'] == 1


class TestReferenceEndpoints:

    def test_search_airports(self, client):
        data = client.get('/api/airports?q=kennedy').get_json()

        assert data['count'] == 1
        assert data['airports'][0]['id'] == 'KJFK'
        assert data['source'] == 'network'

    def test_search_by_country(self, client):
        data = client.get('/api/airports?country=GB').get_json()
        assert [a['iata'] for a in data['airports']] == ['LHR']

    def test_airport_detail(self, client):
        data = client.get('/api/airports/lhr').get_json()
        assert data['id'] == 'EGLL'

    def test_airport_not_found(self, client):
        response = client.get('/api/airports/NOPE')
        assert response.status_code == 404

    def test_wiki_titles(self, client):
        data = client.get('/api/wiki').get_json()
        assert 'Airbus A320' in data['titles']
        assert data['count'] == len(data['titles'])

    def test_wiki_summary(self, client):
        data = client.get('/api/wiki/Airbus%20A320').get_json()

        assert data['available'] is True
        assert data['history']['first_flight'] == '1987'

    def test_wiki_unavailable_is_placeholder(self, client):
        client.get('/api/wiki/Airbus%20A320')
        response = client.get('/api/wiki/Boeing%20747')

        assert response.status_code == 200
        assert response.get_json()['available'] is False
