"""Delivery route orchestration service."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Sequence

from ...config import settings
from ...data.orders_repository import OrderRepository, SupabaseOrderRepository
from ...db.supabase import get_supabase_client
from ...models.domain import Coordinates, NoRoute, Route, RouteResult
from ...schemas.routing import DriverLocation, RouteRequest, RouteResponse, RouteStopModel
from .builder import RouteBuilder
from .collector import StopCollector
from .formatting import format_distance, format_duration
from .maps_client import GoogleMapsClient
from .navigation import build_navigation_url
from .resolver import LocationResolver

logger = logging.getLogger(__name__)

# Shared across requests; only used when geocode_cache_ttl_seconds > 0
_geocode_cache: OrderedDict = OrderedDict()


class RoutingUnavailableError(RuntimeError):
    """Raised when a backing service needed to build routes is not configured."""


async def _order_repository() -> OrderRepository:
    client = await get_supabase_client()
    if client is None:
        raise RoutingUnavailableError(
            "Supabase is not configured. Set GREENBEAN_SUPABASE_URL and GREENBEAN_SUPABASE_KEY."
        )
    return SupabaseOrderRepository(client)


def _maps_client() -> GoogleMapsClient:
    try:
        return GoogleMapsClient()
    except ValueError as e:
        raise RoutingUnavailableError(
            "Google Maps is not configured. Set GREENBEAN_GOOGLE_MAPS_API_KEY."
        ) from e


def _to_coordinates(location: DriverLocation | None) -> Coordinates | None:
    if location is None:
        return None
    return Coordinates(latitude=location.latitude, longitude=location.longitude)


def to_route_response(result: RouteResult, unresolved_order_ids: Sequence[str] = ()) -> RouteResponse:
    """Convert a builder result into the API payload consumed by the driver screens."""
    if isinstance(result, NoRoute):
        return RouteResponse(
            status="no_route",
            reason=result.reason,
            unresolved_order_ids=list(unresolved_order_ids),
        )

    stops = [
        RouteStopModel(
            id=stop.id,
            kind=stop.kind.value,
            sequence=index,
            address=stop.address,
            latitude=stop.coordinates.latitude,
            longitude=stop.coordinates.longitude,
            order_id=stop.order_id,
            seller_name=stop.seller_name,
            item_count=stop.item_count,
        )
        for index, stop in enumerate(result.stops)
    ]
    return RouteResponse(
        status="ok",
        stops=stops,
        total_distance_meters=result.total_distance_meters,
        total_duration_seconds=result.total_duration_seconds,
        distance_display=format_distance(result.total_distance_meters),
        duration_display=format_duration(result.total_duration_seconds),
        path_encoding=result.path_encoding,
        navigation_url=build_navigation_url(result, "web", settings.maps_travel_mode),
        unresolved_order_ids=list(unresolved_order_ids),
    )


async def build_delivery_route(
    order_ids: Sequence[str],
    driver_location: Coordinates | None,
    orders: OrderRepository,
    maps: GoogleMapsClient,
) -> tuple[RouteResult, list[str]]:
    """Collect stops for ``order_ids`` and build an optimized route through them."""
    resolver = LocationResolver(
        maps,
        cache_ttl_seconds=settings.geocode_cache_ttl_seconds,
        cache=_geocode_cache,
        cache_max_entries=settings.geocode_cache_max_entries,
    )
    collector = StopCollector(orders, resolver, max_concurrent_lookups=settings.maps_max_concurrent_requests)
    collection = await collector.collect(order_ids, driver_location)
    builder = RouteBuilder(maps, max_waypoints=settings.maps_max_waypoints)
    result = await builder.build_route(collection.stops)
    if isinstance(result, Route):
        logger.info(
            f"Built route with {len(result.stops)} stops, "
            f"{result.total_distance_meters}m, {result.total_duration_seconds}s"
        )
    return result, collection.unresolved_order_ids


async def optimize_route(payload: RouteRequest) -> RouteResponse:
    if not payload.order_ids:
        return RouteResponse(status="no_route", reason="no_orders")

    orders = await _order_repository()
    maps = _maps_client()
    result, unresolved = await build_delivery_route(
        payload.order_ids,
        _to_coordinates(payload.driver_location),
        orders,
        maps,
    )
    return to_route_response(result, unresolved)


async def optimize_active_route(driver_location: DriverLocation | None = None) -> RouteResponse:
    """Build a route over every order currently waiting for or out for delivery."""
    orders = await _order_repository()
    try:
        order_ids = await orders.list_active_order_ids(settings.active_order_statuses)
    except Exception as e:
        logger.warning(f"Failed to load active orders: {e}")
        return RouteResponse(status="no_route", reason="orders_unavailable")

    if not order_ids:
        return RouteResponse(status="no_route", reason="no_orders")

    maps = _maps_client()
    result, unresolved = await build_delivery_route(order_ids, _to_coordinates(driver_location), orders, maps)
    return to_route_response(result, unresolved)
