"""
Geocoding client for place names.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from shared.logging import get_logger
from ..domain.models import LocationData


NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

SUPPORTED_PROVIDERS = ("openstreetmap", "google")


class GeocodingClient:
    """Resolves a place name to coordinates through a configured provider.

    Any failure (transport, HTTP status, unexpected body) is logged and
    reported as "not found", never raised.
    """

    def __init__(
        self,
        provider: str = "openstreetmap",
        *,
        api_key: Optional[str] = None,
        user_agent: str = "relief-coordination-service",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported geocoding provider: {provider}")
        if provider == "google" and not api_key:
            raise ValueError("The google geocoding provider requires an API key")

        self.provider = provider
        self.api_key = api_key
        self.logger = get_logger("disasters.geocoding")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def geocode(self, location_name: str) -> Optional[LocationData]:
        """Return the first match's coordinates, or None."""
        try:
            if self.provider == "google":
                return await self._geocode_google(location_name)
            return await self._geocode_openstreetmap(location_name)
        except Exception as exc:
            self.logger.error(
                "Geocoding service error",
                provider=self.provider,
                location_name=location_name,
                error=str(exc),
            )
            return None

    async def _geocode_openstreetmap(self, location_name: str) -> Optional[LocationData]:
        params: Dict[str, Any] = {"q": location_name, "format": "json", "limit": 1}
        response = await self._client.get(NOMINATIM_SEARCH_URL, params=params)
        response.raise_for_status()

        results = response.json()
        if not results:
            self.logger.info("No geocoding match", provider=self.provider, location_name=location_name)
            return None

        first = results[0]
        return LocationData(latitude=float(first["lat"]), longitude=float(first["lon"]))

    async def _geocode_google(self, location_name: str) -> Optional[LocationData]:
        params: Dict[str, Any] = {"address": location_name, "key": self.api_key}
        response = await self._client.get(GOOGLE_GEOCODE_URL, params=params)
        response.raise_for_status()

        body = response.json()
        status = body.get("status")
        if status == "ZERO_RESULTS":
            self.logger.info("No geocoding match", provider=self.provider, location_name=location_name)
            return None
        if status != "OK":
            raise RuntimeError(f"Google geocoding returned status {status}")

        location = body["results"][0]["geometry"]["location"]
        return LocationData(latitude=float(location["lat"]), longitude=float(location["lng"]))
