"""
Domain models for SkyBoard.

Plain immutable dataclasses shared by ingestion, enrichment and analytics:
1. AircraftState - one normalized telemetry record
2. AirportRecord - one airport from the reference dataset
3. AirlineEntity - airline resolved from a callsign
"""

from skyboard.models.aircraft_state import AircraftState, FlightPhase, KMH_PER_MPS, detect_flight_phase
from skyboard.models.airport import AirportRecord, ALLOWED_AIRPORT_TYPES
from skyboard.models.airline import AirlineEntity, AirlineActivity, Region

__all__ = [
    'AircraftState',
    'FlightPhase',
    'KMH_PER_MPS',
    'detect_flight_phase',
    'AirportRecord',
    'ALLOWED_AIRPORT_TYPES',
    'AirlineEntity',
    'AirlineActivity',
    'Region',
]
