"""
Image lookup for generated days using the Google Custom Search JSON API.
"""

import logging

import requests

logger = logging.getLogger(__name__)

CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


class ImageSearchService:
    """Returns the first image result for a text query."""

    def __init__(self, api_key: str, engine_id: str, timeout: float = 10):
        if not api_key or not engine_id:
            logger.warning(
                "[ImageSearch] GOOGLE_SEARCH_API_KEY or GOOGLE_SEARCH_ENGINE_ID not found. "
                "Day images will not be available."
            )
        self.api_key = api_key
        self.engine_id = engine_id
        self.timeout = timeout

    def search(self, query: str) -> str | None:
        if not query or not self.api_key or not self.engine_id:
            return None

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "searchType": "image",
            "num": 1,
            "safe": "active",
        }
        try:
            response = requests.get(CUSTOM_SEARCH_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"[ImageSearch] Error searching for '{query}': {e}")
            return None

        items = data.get("items") or []
        if not items:
            logger.info(f"[ImageSearch] No results for '{query}'")
            return None
        return items[0].get("link")
