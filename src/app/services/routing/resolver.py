"""Address to coordinate resolution."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any, Protocol

from ...models.domain import Coordinates, Resolved, ResolveResult, Unresolved

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, address: str) -> dict[str, float] | None: ...


class LocationResolver:
    """Resolves free-text addresses through a geocoding provider.

    Failures of any kind come back as ``Unresolved``; nothing is raised to the
    caller and no coordinates are ever made up. With ``cache_ttl_seconds`` set,
    successful lookups are reused for the same literal address string; the
    cache holds at most ``cache_max_entries`` addresses, oldest evicted first.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        cache_ttl_seconds: float = 0.0,
        cache: OrderedDict[str, tuple[float, Coordinates]] | None = None,
        cache_max_entries: int = 1024,
    ) -> None:
        self.geocoder = geocoder
        self.cache_ttl_seconds = cache_ttl_seconds
        self.cache_max_entries = cache_max_entries
        self._cache = cache if cache is not None else OrderedDict()

    def _cached(self, address: str) -> Coordinates | None:
        if self.cache_ttl_seconds <= 0:
            return None
        entry = self._cache.get(address)
        if entry is None:
            return None
        stored_at, coordinates = entry
        if time.monotonic() - stored_at > self.cache_ttl_seconds:
            del self._cache[address]
            return None
        return coordinates

    def _store(self, address: str, coordinates: Coordinates) -> None:
        now = time.monotonic()
        self._cache.pop(address, None)
        # entries are kept in write order, so expired ones sit at the front
        while self._cache:
            stored_at, _ = next(iter(self._cache.values()))
            if now - stored_at <= self.cache_ttl_seconds:
                break
            self._cache.popitem(last=False)
        while self._cache and len(self._cache) >= self.cache_max_entries:
            self._cache.popitem(last=False)
        if self.cache_max_entries > 0:
            self._cache[address] = (now, coordinates)

    async def resolve(self, address: str) -> ResolveResult:
        if not address or not address.strip():
            return Unresolved(address=address, reason="empty_address")

        cached = self._cached(address)
        if cached is not None:
            return Resolved(address=address, coordinates=cached)

        try:
            location: Any = await self.geocoder.geocode(address)
        except Exception as e:
            logger.warning(f"Geocoding failed for '{address}': {e}")
            return Unresolved(address=address, reason="provider_error")

        if not location:
            logger.info(f"No geocoding match for '{address}'")
            return Unresolved(address=address, reason="not_found")

        try:
            coordinates = Coordinates(latitude=float(location["lat"]), longitude=float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed geocoding result for '{address}': {e}")
            return Unresolved(address=address, reason="malformed_result")

        if self.cache_ttl_seconds > 0:
            self._store(address, coordinates)
        return Resolved(address=address, coordinates=coordinates)
