"""
Metrics and status API endpoints.

Provides endpoints for:
- GET /api/metrics/stats - Fleet statistics of the current snapshot
- GET /api/metrics/status - Pipeline, cache and reference data status
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify, current_app

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__, url_prefix='/api/metrics')


@metrics_bp.route('/stats', methods=['GET'])
def get_fleet_stats():
    """
    Get aggregate statistics for the current snapshot.

    Returns:
    - Fastest / highest / lowest aircraft
    - Region and aircraft type buckets
    - Flight phase counts
    - Altitude and speed distributions
    """
    start_time = time.perf_counter()

    cache = current_app.config['TELEMETRY_CACHE']
    snapshot = cache.get_snapshot()

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'stats': snapshot.stats.to_dict(),
        'used_fallback': snapshot.used_fallback,
        'cache': cache.stats,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@metrics_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system status information.

    Does not trigger a pipeline run or an airport download.
    """
    pipeline = current_app.config['TELEMETRY_PIPELINE']
    cache = current_app.config['TELEMETRY_CACHE']
    repository = current_app.config['AIRPORT_REPOSITORY']
    client = pipeline.normalizer.client

    cache_stats = cache.stats
    pipeline_stats = pipeline.stats

    degraded = pipeline_stats['run_count'] > 0 and pipeline_stats['fallback_count'] == pipeline_stats['run_count']

    return jsonify({
        'status': 'degraded' if degraded else 'healthy',
        'pipeline': pipeline_stats,
        'cache': cache_stats,
        'airports': repository.stats,
        'config': {
            'opensky_authenticated': bool(client is not None and client.auth is not None),
            'cache_ttl_seconds': cache.ttl_seconds,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
