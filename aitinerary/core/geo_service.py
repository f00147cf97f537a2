"""
Google Maps lookups used to enrich generated activities with an address and coordinates.
"""

import logging
from typing import Any

import requests

from aitinerary.core.schemas import Coordinates

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
FIND_PLACE_URL = "https://maps.googleapis.com/maps/api/place/findplacefromtext/json"


class GeoService:
    """Service for resolving free-text places with the Google Maps APIs."""

    def __init__(self, api_key: str, timeout: float = 10):
        if not api_key:
            logger.warning(
                "[Geocode] GOOGLE_MAPS_API_KEY not found. "
                "Activities will not get addresses or coordinates."
            )
        self.api_key = api_key
        self.timeout = timeout

    def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        if not self.api_key:
            return None
        try:
            response = requests.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"[Geocode] Request to {url} failed: {e}")
            return None

        if data.get("status") != "OK":
            logger.warning(f"[Geocode] Lookup for {params} returned status {data.get('status')}")
            return None
        return data

    def get_address(self, query: str) -> str | None:
        """
        Find the formatted street address of a place.

        Args:
            query: Place and city, e.g. "Louvre Museum, Paris"

        Returns:
            Formatted address or None if the place cannot be found
        """
        data = self._get(
            FIND_PLACE_URL,
            {"input": query, "inputtype": "textquery", "fields": "formatted_address"},
        )
        if not data or not data.get("candidates"):
            return None
        return data["candidates"][0].get("formatted_address")

    def get_coordinates(self, query: str) -> Coordinates | None:
        """Geocode a place to latitude/longitude."""
        data = self._get(GEOCODE_URL, {"address": query})
        if not data or not data.get("results"):
            return None
        try:
            location = data["results"][0]["geometry"]["location"]
            return Coordinates(lat=location["lat"], lng=location["lng"])
        except (KeyError, TypeError) as e:
            logger.warning(f"[Geocode] Unexpected geocode payload for '{query}': {e}")
            return None
