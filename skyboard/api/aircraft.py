"""
Aircraft and airline API endpoints.

Provides endpoints for:
- GET /api/aircraft - List aircraft of the current snapshot
- GET /api/aircraft/<icao24> - Get a single aircraft with its airline
- GET /api/airlines - Active flights per airline
- GET /api/airlines/resolve/<callsign> - Resolve one callsign
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify, request, current_app

from skyboard.geo import classify_region
from skyboard.models import Region

logger = logging.getLogger(__name__)

aircraft_bp = Blueprint('aircraft', __name__, url_prefix='/api/aircraft')
airlines_bp = Blueprint('airlines', __name__, url_prefix='/api/airlines')

_SORT_KEYS = {
    'altitude': lambda s: s.altitude if s.altitude is not None else float('-inf'),
    'speed': lambda s: s.ground_speed if s.ground_speed is not None else float('-inf'),
}


def _parse_region(value):
    """Region from a query value, case-insensitive. None when absent or unknown."""
    if not value:
        return None
    for region in Region:
        if region.value.lower() == value.strip().lower():
            return region
    return None


@aircraft_bp.route('', methods=['GET'])
def list_aircraft():
    """
    List aircraft of the current snapshot.

    Query parameters:
    - airborne_only: boolean, drop aircraft known to be on the ground (default false)
    - region: Europe|Asia|Americas|Africa|Oceania|Unclassified
    - sort: altitude|speed (default feed order)
    - limit: int, max results to return (default 50, max 500)
    """
    start_time = time.perf_counter()

    airborne_only = request.args.get('airborne_only', 'false').lower() == 'true'
    region_arg = request.args.get('region')
    sort_by = request.args.get('sort')
    limit = min(max(request.args.get('limit', 50, type=int), 0), 500)

    region = _parse_region(region_arg)
    if region_arg and region is None:
        return jsonify({'error': f'Unknown region: {region_arg}'}), 400

    cache = current_app.config['TELEMETRY_CACHE']
    snapshot = cache.get_snapshot()
    states = list(snapshot.states)

    if airborne_only:
        states = [s for s in states if not s.on_ground]
    if region is not None:
        states = [s for s in states if classify_region(s.latitude, s.longitude) is region]
    if sort_by in _SORT_KEYS:
        states.sort(key=_SORT_KEYS[sort_by], reverse=True)

    states = states[:limit]

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'aircraft': [s.to_dict() for s in states],
        'count': len(states),
        'snapshot': snapshot.to_dict(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@aircraft_bp.route('/<icao24>', methods=['GET'])
def get_aircraft(icao24: str):
    """Get one aircraft of the current snapshot, with airline and region."""
    cache = current_app.config['TELEMETRY_CACHE']
    resolver = current_app.config['IDENTIFIER_RESOLVER']

    state = cache.get(icao24)
    if state is None:
        return jsonify({'error': 'Aircraft not found'}), 404

    result = state.to_dict()
    result['airline'] = resolver.resolve_airline(state.callsign).to_dict()
    result['region'] = classify_region(state.latitude, state.longitude).value
    return jsonify(result)


@airlines_bp.route('', methods=['GET'])
def list_airlines():
    """
    Active flights per airline in the current snapshot.

    Query parameters:
    - region: only airlines attributed to this region
    - resolved_only: boolean, drop unresolved callsign prefixes (default false)
    """
    region_arg = request.args.get('region')
    resolved_only = request.args.get('resolved_only', 'false').lower() == 'true'

    region = _parse_region(region_arg)
    if region_arg and region is None:
        return jsonify({'error': f'Unknown region: {region_arg}'}), 400

    cache = current_app.config['TELEMETRY_CACHE']
    snapshot = cache.get_snapshot()
    airlines = snapshot.airlines

    if region is not None:
        airlines = [a for a in airlines if a.region is region]
    if resolved_only:
        airlines = [a for a in airlines if a.airline.resolved]

    return jsonify({
        'airlines': [a.to_dict() for a in airlines],
        'count': len(airlines),
        'used_fallback': snapshot.used_fallback,
    })


@airlines_bp.route('/resolve/<callsign>', methods=['GET'])
def resolve_callsign(callsign: str):
    """
    Resolve one callsign against the airline tables.

    Unresolved callsigns get a region inferred from the aircraft of the
    current snapshot sharing the same prefix.
    """
    resolver = current_app.config['IDENTIFIER_RESOLVER']
    airline = resolver.resolve_airline(callsign)

    result = airline.to_dict()
    if not airline.resolved:
        cache = current_app.config['TELEMETRY_CACHE']
        states = cache.get_snapshot().states
        result['region'] = resolver.infer_region(airline.callsign_prefix, states).value
        result['region_inferred'] = True
    else:
        result['region_inferred'] = False

    return jsonify(result)
