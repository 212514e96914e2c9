"""
SkyBoard Flask Application.

Main entry point for the web application. Wires:
- Telemetry pipeline (client -> normalizer -> resolver -> aggregation)
- Snapshot cache
- Airport reference repository
- Wikipedia summary client
- API routes

Every service can be injected, which is how tests run the app without
network access.

Usage:
    python -m skyboard.app

Or with gunicorn:
    gunicorn "skyboard.app:create_app()"
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from skyboard.config import AppConfig, config as default_config
from skyboard.api import aircraft_bp, airlines_bp, airports_bp, wiki_bp, metrics_bp
from skyboard.analytics import AggregationEngine
from skyboard.cache import TelemetryCache
from skyboard.enrichment import IdentifierResolver
from skyboard.ingestion import AirportRepository, LiveStateNormalizer, OpenSkyClient
from skyboard.ingestion.pipeline import TelemetryPipeline
from skyboard.services import WikipediaClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if default_config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def build_pipeline(app_config: AppConfig) -> TelemetryPipeline:
    """Construct the telemetry pipeline from configuration."""
    client = OpenSkyClient.from_config(app_config.opensky)
    resolver = IdentifierResolver()
    return TelemetryPipeline(
        normalizer=LiveStateNormalizer(client=client),
        resolver=resolver,
        engine=AggregationEngine(),
    )


def create_app(
    app_config: Optional[AppConfig] = None,
    pipeline: Optional[TelemetryPipeline] = None,
    airports: Optional[AirportRepository] = None,
    wikipedia: Optional[WikipediaClient] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        app_config: Configuration (module-level config if None)
        pipeline: Telemetry pipeline (built from config if None)
        airports: Airport repository (built from config if None)
        wikipedia: Wikipedia client (built from config if None)

    Returns:
        Configured Flask application instance.
    """
    app_config = app_config or default_config

    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = app_config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Services
    pipeline = pipeline or build_pipeline(app_config)
    app.config['TELEMETRY_PIPELINE'] = pipeline
    app.config['IDENTIFIER_RESOLVER'] = pipeline.resolver
    app.config['TELEMETRY_CACHE'] = TelemetryCache(
        pipeline,
        ttl_seconds=app_config.cache.ttl_seconds,
    )
    app.config['AIRPORT_REPOSITORY'] = airports or AirportRepository.from_config(app_config.reference)
    app.config['WIKIPEDIA_CLIENT'] = wikipedia or WikipediaClient.from_config(app_config.wikipedia)

    # Register API blueprints
    app.register_blueprint(aircraft_bp)
    app.register_blueprint(airlines_bp)
    app.register_blueprint(airports_bp)
    app.register_blueprint(wiki_bp)
    app.register_blueprint(metrics_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting SkyBoard API on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=default_config.debug,
        use_reloader=False,
    )


if __name__ == '__main__':
    run_development_server()
