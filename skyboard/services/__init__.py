"""
External services for enrichment.

Provides:
- Aircraft article summaries from Wikipedia
"""

from skyboard.services.wikipedia import WikipediaClient, PageSummary

__all__ = ['WikipediaClient', 'PageSummary']
