import logging

from civic_triage.core.settings import Settings
from .base import GeocodingProvider
from .google_provider import GoogleMapsProvider
from .nominatim_provider import NominatimProvider
from .placeholder_provider import PlaceholderGeocodingProvider

logger = logging.getLogger(__name__)


def build_geocoding_provider(config: Settings) -> GeocodingProvider:
    """
    Resolve the geocoding provider from settings.

    Rules:
    - Default: placeholder (fixed values, no network).
    - "nominatim": OpenStreetMap, no API key required.
    - "google": only when GOOGLE_MAPS_API_KEY is set, otherwise placeholder.
    """
    provider_name = (config.GEOCODING_PROVIDER or "placeholder").lower()

    if provider_name == "google":
        if config.GOOGLE_MAPS_API_KEY:
            logger.info("Geocoding provider initialized: google")
            return GoogleMapsProvider(api_key=config.GOOGLE_MAPS_API_KEY)
        logger.warning("GEOCODING_PROVIDER=google but GOOGLE_MAPS_API_KEY is not set; using placeholder")

    if provider_name == "nominatim":
        logger.info("Geocoding provider initialized: nominatim")
        return NominatimProvider(user_agent=config.GEOCODING_USER_AGENT)

    logger.info("Geocoding provider initialized: placeholder")
    return PlaceholderGeocodingProvider()
