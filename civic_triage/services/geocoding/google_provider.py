import logging
from typing import Dict, Any, List, Optional

import requests

from civic_triage.models.report import LocationEnrichment
from .base import GeocodingProvider, GeocodingError

logger = logging.getLogger(__name__)


class GoogleMapsProvider(GeocodingProvider):
    """
    Google Maps reverse-geocoding provider.

    - Used only when GEOCODING_PROVIDER=google AND GOOGLE_MAPS_API_KEY is set.
    - Same output schema as other providers.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    name = "google"

    def __init__(self, api_key: str, timeout: float = 3.0):
        if not api_key:
            raise ValueError("GoogleMapsProvider requires an API key")
        self.api_key = api_key
        self.timeout = timeout

    def enrich(self, latitude: float, longitude: float) -> LocationEnrichment:
        params = {
            "latlng": f"{latitude},{longitude}",
            "key": self.api_key,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GeocodingError(f"Google Maps request failed: {e}") from e

        if resp.status_code != 200:
            raise GeocodingError(f"Google Maps reverse-geocode failed with status {resp.status_code}")

        data: Dict[str, Any] = resp.json()
        results = data.get("results") or []
        if not results:
            raise GeocodingError(f"Google Maps returned no results (status: {data.get('status')})")

        first = results[0]
        components = first.get("address_components") or []

        def _get_component(types: List[str]) -> Optional[str]:
            for c in components:
                if any(t in c.get("types", []) for t in types):
                    return c.get("long_name")
            return None

        landmarks = [
            r.get("formatted_address")
            for r in results[1:]
            if "point_of_interest" in r.get("types", []) and r.get("formatted_address")
        ][:3]

        return LocationEnrichment(
            address=first.get("formatted_address"),
            ward=_get_component(["sublocality", "neighborhood"]),
            district=_get_component(["administrative_area_level_2"]),
            pincode=_get_component(["postal_code"]),
            nearby_landmarks=landmarks,
            administrative_area=_get_component(["locality", "postal_town"]),
            provider=self.name,
        )
