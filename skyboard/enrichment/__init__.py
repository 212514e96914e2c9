"""
Enrichment - resolving weak identifiers to richer entities.
"""

from skyboard.enrichment.airlines import IdentifierResolver, ICAO_AIRLINES, IATA_AIRLINES

__all__ = ['IdentifierResolver', 'ICAO_AIRLINES', 'IATA_AIRLINES']
