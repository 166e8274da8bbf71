"""HTTP client for the Google Maps geocoding and directions services."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinates

logger = logging.getLogger(__name__)


class MapsProviderError(Exception):
    """Raised when the provider answers with a non-OK status."""

    def __init__(self, status: str, message: str | None = None) -> None:
        self.status = status
        super().__init__(f"Google Maps request failed with status {status}: {message or 'no details'}")


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        mode: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = (base_url or settings.google_maps_base_url).rstrip("/")
        self.mode = mode or settings.maps_travel_mode
        self.timeout = timeout if timeout is not None else settings.maps_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.maps_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.maps_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    async def _get_json(self, endpoint: str, params: dict[str, str]) -> dict[str, Any]:
        url = f"{self.base_url}/{endpoint}/json"
        query = {**params, "key": self.api_key}

        async with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = await client.get(url, params=query)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    await asyncio.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Google Maps {endpoint} request failed after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))  # Exponential backoff
                    logger.debug(
                        f"Google Maps {endpoint} network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {e}"
                    )
                    await asyncio.sleep(wait_time)

    async def geocode(self, address: str) -> dict[str, float] | None:
        """Return the best match's ``{"lat", "lng"}`` for an address, or None when nothing matched."""
        data = await self._get_json("geocode", {"address": address})
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            raise MapsProviderError(str(status), data.get("error_message"))

        results = data.get("results") or []
        if not results:
            return None
        return results[0]["geometry"]["location"]

    async def directions(
        self,
        origin: Coordinates,
        destination: Coordinates,
        waypoints: Sequence[Coordinates] = (),
        optimize: bool = True,
    ) -> dict[str, Any]:
        """Request a route through ``waypoints`` and return the provider's first route.

        With ``optimize`` the provider is free to reorder the waypoints; the chosen
        order is reported back in the route's ``waypoint_order``.
        """
        params = {
            "origin": origin.as_param(),
            "destination": destination.as_param(),
            "mode": self.mode,
        }
        if waypoints:
            prefix = "optimize:true|" if optimize else ""
            params["waypoints"] = prefix + "|".join(point.as_param() for point in waypoints)

        data = await self._get_json("directions", params)
        status = data.get("status")
        if status != "OK":
            raise MapsProviderError(str(status), data.get("error_message"))

        routes = data.get("routes") or []
        if not routes:
            raise MapsProviderError("ZERO_ROUTES", "Directions response contained no routes")
        return routes[0]

    async def check_health(self) -> bool:
        """Check provider reachability and key validity with a small geocoding request."""
        try:
            await self.geocode("1600 Amphitheatre Parkway, Mountain View, CA")
            return True
        except (httpx.HTTPError, MapsProviderError):
            return False
