from abc import ABC, abstractmethod
import logging

from civic_triage.models.report import LocationEnrichment

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised by providers when a lookup cannot be completed."""


class GeocodingProvider(ABC):
    """
    Abstract reverse-geocoding provider.

    Contract:
    - Input: latitude, longitude (floats)
    - Output: LocationEnrichment (address, ward, district, pincode,
      nearby_landmarks, administrative_area, provider)
    - Raises GeocodingError on failure; the LocationEnricher absorbs it.
    - Implementations should enforce a network timeout <= 3 seconds.
    """

    name = "base"

    @abstractmethod
    def enrich(self, latitude: float, longitude: float) -> LocationEnrichment:
        raise NotImplementedError
