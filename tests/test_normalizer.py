"""
Tests for the live state normalizer and the OpenSky client.
"""

import pytest
import requests

from skyboard.geo import GeoBox
from skyboard.ingestion import FeedUnavailable, LiveStateNormalizer, OpenSkyClient, TelemetryEnvelope
from skyboard.ingestion.fallback import FALLBACK_AIRCRAFT
from skyboard.ingestion.normalizer import MAX_STATES
from tests.helpers import PS101_ROW, make_response

FALLBACK_IDS = ['abc123', 'def456', 'ghi789']


def _row(icao24, callsign='TST1', lat=50.0, lon=10.0):
    return [icao24, callsign, 'Germany', 1700000000, 1700000001, lon, lat, 10000.0, False, 230.0, 90.0, 0.0]


@pytest.fixture
def normalizer():
    return LiveStateNormalizer()


class TestFallback:
    """Failures and empty feeds always give the fixed three aircraft."""

    def test_failed_fetch(self, normalizer):
        states = normalizer.normalize(None)
        assert [s.id for s in states] == FALLBACK_IDS

    def test_absent_states(self, normalizer):
        states = normalizer.normalize(TelemetryEnvelope(time=1700000000, states=None))
        assert [s.id for s in states] == FALLBACK_IDS

    def test_empty_states(self, normalizer):
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=[]))
        assert [s.id for s in states] == FALLBACK_IDS

    def test_all_rows_undecodable(self, normalizer):
        envelope = TelemetryEnvelope(time=None, states=['bad', {'x': 1}, [[1]]])
        result = normalizer.normalize_with_status(envelope)

        assert result.used_fallback is True
        assert result.dropped_rows == 3
        assert [s.id for s in result.states] == FALLBACK_IDS

    def test_fallback_contents(self):
        ps101, ba238, dlh = FALLBACK_AIRCRAFT
        assert (ps101.callsign, ps101.origin_country) == ('PS101', 'Ukraine')
        assert (ba238.callsign, ba238.origin_country) == ('BA238', 'United Kingdom')
        assert (dlh.callsign, dlh.origin_country) == ('DLH4AB', 'Germany')
        assert all(s.on_ground is False for s in FALLBACK_AIRCRAFT)

    def test_fallback_list_is_a_copy(self, normalizer):
        states = normalizer.normalize(None)
        states.clear()
        assert len(normalizer.normalize(None)) == 3


class TestNormalize:

    def test_ps101_scenario(self, normalizer):
        envelope = TelemetryEnvelope(time=1700000000, states=[PS101_ROW])
        result = normalizer.normalize_with_status(envelope)

        assert result.used_fallback is False
        assert len(result.states) == 1
        state = result.states[0]
        assert state.id == 'abc123'
        assert state.callsign == 'PS101'
        assert state.origin_country == 'Ukraine'
        assert state.longitude == 30.45
        assert state.latitude == 50.45
        assert state.altitude == 2000
        assert state.on_ground is False
        assert state.ground_speed == 61.1
        assert state.heading == 140
        assert state.vertical_rate == -1.2
        assert state.time_position is None

    def test_caps_at_fifty_in_feed_order(self, normalizer):
        rows = [_row(f'{i:06x}') for i in range(MAX_STATES + 10)]
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=rows))

        assert len(states) == MAX_STATES
        assert states[0].id == '000000'
        assert states[-1].id == f'{MAX_STATES - 1:06x}'

    def test_callsigns_are_trimmed(self, normalizer):
        rows = [_row('a1', '  DLH4AB  '), _row('a2', 'BAW238\t'), _row('a3', '        ')]
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=rows))
        assert [s.callsign for s in states] == ['DLH4AB', 'BAW238', '']

    def test_identifier_without_kinematics_is_kept(self, normalizer):
        rows = [['abc999', None, None, None, None, None, None, None, None, None, None, None]]
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=rows))

        assert len(states) == 1
        assert states[0].id == 'abc999'
        assert states[0].has_position is False
        assert states[0].on_ground is None

    def test_short_row_is_kept(self, normalizer):
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=[['abc999', 'X1']]))
        assert states[0].callsign == 'X1'
        assert states[0].latitude is None

    def test_bad_rows_dropped_good_rows_kept(self, normalizer):
        rows = [_row('a1'), ['a2', [1, 2]], _row('a3')]
        result = normalizer.normalize_with_status(TelemetryEnvelope(time=None, states=rows))

        assert [s.id for s in result.states] == ['a1', 'a3']
        assert result.dropped_rows == 1
        assert result.used_fallback is False

    def test_numeric_strings_are_coerced(self, normalizer):
        row = ['a1', 'X', 'Y', '1700000000.9', None, '10.5', '50.25', '1000', False, None, None, None]
        state = normalizer.normalize(TelemetryEnvelope(time=None, states=[row]))[0]

        assert state.time_position == 1700000000
        assert state.longitude == 10.5
        assert state.latitude == 50.25
        assert state.altitude == 1000.0

    def test_non_finite_kinematics_are_absent(self, normalizer):
        row = ['a1', 'X', 'Y', None, None, 10.5, 50.25, 'NaN', False, 'Infinity', float('nan'), None]
        state = normalizer.normalize(TelemetryEnvelope(time=None, states=[row]))[0]

        assert state.altitude is None
        assert state.ground_speed is None
        assert state.heading is None
        assert state.speed_kmh is None
        assert state.has_position is True

    def test_aircraft_type_from_icao24_prefix(self, normalizer):
        states = normalizer.normalize(TelemetryEnvelope(time=None, states=[_row('4cc2a1'), _row('e48f00')]))
        assert states[0].aircraft_type == 'Boeing 737'
        assert states[1].aircraft_type is None


class TestFetchStates:

    def test_success(self, fake_session, opensky_client):
        fake_session.queue(make_response(200, {'time': 1700000000, 'states': [PS101_ROW]}))
        result = LiveStateNormalizer(client=opensky_client).fetch_states()

        assert result.used_fallback is False
        assert result.api_time == 1700000000
        assert result.states[0].callsign == 'PS101'

    def test_bbox_is_sent_as_query_params(self, fake_session, opensky_client):
        fake_session.queue(make_response(200, {'time': 1, 'states': []}))
        bbox = GeoBox(lat_min=45, lat_max=55, lon_min=5, lon_max=15)
        LiveStateNormalizer(client=opensky_client).fetch_states(bbox=bbox)

        call = fake_session.calls[0]
        assert call['url'] == 'https://opensky-network.org/api/states/all'
        assert call['params'] == {'lamin': 45, 'lamax': 55, 'lomin': 5, 'lomax': 15}

    @pytest.mark.parametrize('item', [
        requests.exceptions.ConnectionError('dns failure'),
        requests.exceptions.Timeout('timed out'),
        make_response(500, {'error': 'boom'}),
        make_response(429, text='slow down'),
        make_response(200, text='{not json'),
        make_response(200, json_body=['not', 'an', 'object']),
        make_response(200, json_body={'time': 1, 'states': 'nope'}),
    ])
    def test_failures_yield_fallback(self, fake_session, opensky_client, item):
        fake_session.queue(item)
        result = LiveStateNormalizer(client=opensky_client).fetch_states()

        assert result.used_fallback is True
        assert result.error
        assert [s.id for s in result.states] == FALLBACK_IDS

    def test_empty_feed_yields_fallback(self, fake_session, opensky_client):
        fake_session.queue(make_response(200, {'time': 1, 'states': None}))
        result = LiveStateNormalizer(client=opensky_client).fetch_states()
        assert result.used_fallback is True

    def test_without_client(self):
        result = LiveStateNormalizer().fetch_states()
        assert result.used_fallback is True
        assert len(result.states) == 3


class TestOpenSkyClient:

    def test_envelope_time(self, fake_session, opensky_client):
        fake_session.queue(make_response(200, {'time': 1700000000, 'states': []}))
        envelope = opensky_client.get_envelope()
        assert envelope.time == 1700000000
        assert envelope.states == []

    def test_missing_time(self, fake_session, opensky_client):
        fake_session.queue(make_response(200, {'states': [PS101_ROW]}))
        envelope = opensky_client.get_envelope()
        assert envelope.time is None
        assert envelope.states == [PS101_ROW]

    def test_non_200_raises_feed_unavailable(self, fake_session, opensky_client):
        fake_session.queue(make_response(503, text='down'))
        with pytest.raises(FeedUnavailable):
            opensky_client.get_envelope()

    def test_failed_request_counts_for_rate_limit(self, fake_session, opensky_client):
        fake_session.queue(requests.exceptions.ConnectionError('offline'))
        with pytest.raises(FeedUnavailable):
            opensky_client.get_envelope()
        assert opensky_client.last_request_time > 0

    def test_non_200_counts_for_rate_limit(self, fake_session, opensky_client):
        fake_session.queue(make_response(429, text='slow down'))
        with pytest.raises(FeedUnavailable):
            opensky_client.get_envelope()
        assert opensky_client.last_request_time > 0

    def test_authentication(self, fake_session):
        client = OpenSkyClient(username='user', password='secret', session=fake_session, min_interval=0)
        fake_session.queue(make_response(200, {'time': 1, 'states': []}))
        client.get_envelope()

        assert fake_session.calls[0]['auth'] is client.auth
        assert client.auth.username == 'user'

    def test_anonymous_default_interval(self):
        assert OpenSkyClient()._min_interval == 10.0
        assert OpenSkyClient(username='u', password='p')._min_interval == 5.0
