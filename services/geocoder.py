"""Reverse geocoding through the Google Maps Geocoding API."""

from typing import Optional

import httpx

from core.config import GEOCODE_TIMEOUT_SECONDS, GEOCODE_URL, GOOGLE_MAPS_API_KEY
from core.exceptions import ConfigurationError, UpstreamServiceError
from core.logger import get_logger

logger = get_logger("services.geocoder")

SERVICE_NAME = "google_geocoding"


class ReverseGeocoder:
    """Turns coordinates into a formatted street address.

    The HTTP client is injected so tests can supply an `httpx.MockTransport`.
    """

    def __init__(
        self,
        api_key: Optional[str] = GOOGLE_MAPS_API_KEY,
        client: Optional[httpx.Client] = None,
        url: str = GEOCODE_URL,
        timeout: float = GEOCODE_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.url = url
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return the first formatted address for the coordinates.

        Raises:
            ConfigurationError: No API key is configured.
            UpstreamServiceError: The request failed or returned no result.
        """
        if not self.api_key:
            raise ConfigurationError("Google Maps API key not configured", config_key="GOOGLE_MAPS_API_KEY")

        try:
            response = self.client.get(
                self.url,
                params={"latlng": f"{latitude},{longitude}", "key": self.api_key},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Reverse geocoding request for %s,%s failed: %s", latitude, longitude, exc)
            raise UpstreamServiceError(f"Reverse geocoding request failed: {exc}", service=SERVICE_NAME)

        status = data.get("status")
        results = data.get("results") or []
        if status == "OK" and results:
            address = results[0].get("formatted_address", "")
            logger.debug("Reverse geocoded %s,%s to %s", latitude, longitude, address)
            return address

        logger.warning("Reverse geocoding for %s,%s returned %s", latitude, longitude, status)
        raise UpstreamServiceError(f"Reverse geocoding failed: {status}", service=SERVICE_NAME)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
