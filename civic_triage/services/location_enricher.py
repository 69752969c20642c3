"""
Location enrichment - adds administrative metadata to raw coordinates.

Best-effort: any provider fault returns the input location unchanged.
Nothing is cached; every report is enriched afresh.
"""

from typing import Dict, Optional
import logging

from civic_triage.core.errors import CapabilityDegraded
from civic_triage.services.geocoding.base import GeocodingProvider
from civic_triage.utils.geo import coordinates_of

logger = logging.getLogger(__name__)


class LocationEnricher:

    def __init__(self, provider: GeocodingProvider):
        self.provider = provider

    def enrich(self, location: Optional[Dict]) -> Optional[Dict]:
        """
        Merge geocoding metadata into a location mapping.

        Returns:
            A new dict with the original keys plus address, ward, district,
            pincode, nearby_landmarks, administrative_area and provider; or
            the input itself when enrichment is not possible.
        """
        coordinates = coordinates_of(location)
        if coordinates is None:
            return location

        try:
            enrichment = self.provider.enrich(*coordinates)
        except Exception as e:
            degraded = CapabilityDegraded(f"Location enrichment failed ({self.provider.name}): {e}")
            logger.warning(f"⚠️ {degraded.message}; keeping raw coordinates")
            return location

        return {**location, **enrichment.model_dump()}
