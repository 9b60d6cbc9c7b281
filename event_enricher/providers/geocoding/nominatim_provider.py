"""Nominatim (OpenStreetMap) geocoding provider.

Implements IGeocodingProvider against the public ``/search`` endpoint with
``format=jsonv2``.  Requests are spaced at least
``nominatim_min_interval_seconds`` apart as the usage policy requires, carry
a descriptive User-Agent, and are bounded by an explicit timeout.  The
``httpx.AsyncClient`` is injected for testability and connection pooling.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from event_enricher.config.settings import Settings
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.models.authority import NominatimPlace
from event_enricher.utils.errors import ExternalServiceError
from event_enricher.utils.logging import get_logger

_PLACES_ADAPTER = TypeAdapter(list[NominatimPlace])


class NominatimProvider(IGeocodingProvider):
    """Geocoding provider backed by Nominatim's search API."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http_client
        self._search_url = settings.nominatim_base_url.rstrip("/") + "/search"
        self._user_agent = settings.nominatim_user_agent
        self._min_interval = settings.nominatim_min_interval_seconds
        self._timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    async def _throttle(self) -> None:
        """Enforce the minimum interval between consecutive requests."""
        async with self._throttle_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if self._last_request_time > 0 and elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def _search(self, params: dict[str, str]) -> list[NominatimPlace]:
        await self._throttle()
        headers = {"accept-language": "en-US", "user-agent": self._user_agent}
        try:
            response = await self._http.get(
                self._search_url, params=params, headers=headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            self._logger.warning("nominatim_request_failed", params=params, error=str(exc))
            raise ExternalServiceError(
                message=f"request failed: {exc!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != 200:
            self._logger.warning(
                "nominatim_http_error", params=params, status=response.status_code
            )
            raise ExternalServiceError(
                message=f"returned non-200 status code: {response.status_code}",
                provider_name=self.get_provider_name(),
            )

        try:
            payload: Any = response.json()
            places = _PLACES_ADAPTER.validate_python(payload)
        except (ValueError, PydanticValidationError) as exc:
            self._logger.warning("nominatim_malformed_response", params=params, error=str(exc))
            raise ExternalServiceError(
                message=f"malformed response: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        self._logger.debug("nominatim_search_complete", params=params, results=len(places))
        return places

    # -- IGeocodingProvider implementation -------------------------------------

    async def search_city(self, city: str, country: str = "") -> list[NominatimPlace]:
        params = {"city": city, "format": "jsonv2"}
        if country:
            params["country"] = country
        return await self._search(params)

    async def search_venue(
        self, location: str, city: str, country: str = ""
    ) -> list[NominatimPlace]:
        params = {
            "amenity": location,
            "city": city,
            "addressdetails": "1",
            "format": "jsonv2",
        }
        if country:
            params["country"] = country
        return await self._search(params)

    def get_provider_name(self) -> str:
        return "nominatim"
