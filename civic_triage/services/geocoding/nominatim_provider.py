import logging
from typing import Dict, Any

import requests

from civic_triage.models.report import LocationEnrichment
from .base import GeocodingProvider, GeocodingError

logger = logging.getLogger(__name__)


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim reverse-geocoding provider.

    - No API key required.
    - Uses a strict timeout (<= 3 seconds).
    - Includes a User-Agent header as required by Nominatim usage policy.
    """

    BASE_URL = "https://nominatim.openstreetmap.org/reverse"
    name = "nominatim"

    def __init__(self, user_agent: str = "civic-triage/0.1", timeout: float = 3.0):
        self.user_agent = user_agent
        self.timeout = timeout

    def enrich(self, latitude: float, longitude: float) -> LocationEnrichment:
        params = {
            "lat": latitude,
            "lon": longitude,
            "format": "json",
            "addressdetails": 1,
        }
        headers = {
            "User-Agent": self.user_agent,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise GeocodingError(f"Nominatim request failed: {e}") from e

        if resp.status_code != 200:
            raise GeocodingError(f"Nominatim reverse-geocode failed with status {resp.status_code}")

        data: Dict[str, Any] = resp.json()
        if "error" in data:
            raise GeocodingError(f"Nominatim error: {data['error']}")
        address = data.get("address") or {}

        ward = (
            address.get("suburb")
            or address.get("neighbourhood")
            or address.get("quarter")
        )
        district = address.get("city_district") or address.get("state_district") or address.get("county")
        landmarks = [data["name"]] if data.get("name") else []

        return LocationEnrichment(
            address=data.get("display_name"),
            ward=ward,
            district=district,
            pincode=address.get("postcode"),
            nearby_landmarks=landmarks,
            administrative_area=address.get("city") or address.get("town") or address.get("village"),
            provider=self.name,
        )
