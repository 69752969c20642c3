import logging

from civic_triage.models.report import LocationEnrichment
from .base import GeocodingProvider

logger = logging.getLogger(__name__)


class PlaceholderGeocodingProvider(GeocodingProvider):
    """
    Fixed-value provider used when no real geocoder is configured.

    Returns the same administrative shape for every coordinate so the rest
    of the pipeline (and the mobile client) can rely on the fields existing.
    """

    name = "placeholder"

    def enrich(self, latitude: float, longitude: float) -> LocationEnrichment:
        return LocationEnrichment(
            address="Mock Address, City, State",
            ward="Ward 15",
            district="Central District",
            pincode="110001",
            nearby_landmarks=["City Center", "Metro Station"],
            administrative_area="Municipal Corporation Area",
            provider=self.name,
        )
