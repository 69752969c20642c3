"""
Pluggable reverse geocoding used for location enrichment.
"""

from .base import GeocodingError, GeocodingProvider
from .resolver import build_geocoding_provider

__all__ = ["GeocodingError", "GeocodingProvider", "build_geocoding_provider"]
