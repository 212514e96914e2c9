"""
Reference data API endpoints.

Provides endpoints for:
- GET /api/airports - Search airports
- GET /api/airports/<airport_id> - Get one airport by id, ICAO or IATA code
- GET /api/wiki - Aircraft titles with summaries available
- GET /api/wiki/<title> - Aircraft article summary
"""

import logging
import time

from flask import Blueprint, jsonify, request, current_app

logger = logging.getLogger(__name__)

airports_bp = Blueprint('airports', __name__, url_prefix='/api/airports')
wiki_bp = Blueprint('wiki', __name__, url_prefix='/api/wiki')


@airports_bp.route('', methods=['GET'])
def search_airports():
    """
    Search the airport reference collection.

    Query parameters:
    - q: substring of name, city, ICAO or IATA code
    - country: ISO 3166-1 alpha-2 code
    - limit: int, max results (default 50, max 500)

    The first call may download the reference feed; later calls use the
    loaded collection or the cache file.
    """
    start_time = time.perf_counter()

    query = request.args.get('q')
    country = request.args.get('country')
    limit = min(max(request.args.get('limit', 50, type=int), 0), 500)

    repository = current_app.config['AIRPORT_REPOSITORY']
    airports = repository.find(query=query, country=country, limit=limit)

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airports': [a.to_dict() for a in airports],
        'count': len(airports),
        'source': repository.source,
        'query_time_ms': round(query_time_ms, 2),
    })


@airports_bp.route('/<airport_id>', methods=['GET'])
def get_airport(airport_id: str):
    repository = current_app.config['AIRPORT_REPOSITORY']
    airport = repository.get(airport_id)
    if airport is None:
        return jsonify({'error': 'Airport not found'}), 404
    return jsonify(airport.to_dict())


@wiki_bp.route('', methods=['GET'])
def list_titles():
    client = current_app.config['WIKIPEDIA_CLIENT']
    titles = client.list_titles()
    return jsonify({'titles': titles, 'count': len(titles)})


@wiki_bp.route('/<path:title>', methods=['GET'])
def get_summary(title: str):
    """
    Article summary for an aircraft title.

    Always 200: an unavailable article yields the placeholder summary
    with `available` false.
    """
    client = current_app.config['WIKIPEDIA_CLIENT']
    summary = client.fetch_summary(title)
    return jsonify(summary.to_dict())
