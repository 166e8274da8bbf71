"""Route construction from collected stops.

The builder runs in named stages so each can be checked on its own:

1. ``partition_stops``     split stops into pickups and deliveries
2. ``select_origin``       driver start, else first pickup, else first delivery
3. ``select_destination``  last delivery by input order
4. ``select_waypoints``    everything else, pickups first
5. ``reorder_waypoints``   apply the provider's optimized order
6. ``aggregate_legs``      sum per-leg distance and duration

The provider decides the visiting order; no local optimization is attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

from ...models.domain import Coordinates, NoRoute, Route, RouteResult, Stop, StopKind

logger = logging.getLogger(__name__)


class DirectionsProvider(Protocol):
    async def directions(
        self,
        origin: Coordinates,
        destination: Coordinates,
        waypoints: Sequence[Coordinates] = (),
        optimize: bool = True,
    ) -> dict[str, Any]: ...


@dataclass(frozen=True, slots=True)
class RoutePlan:
    origin: Stop
    destination: Stop
    waypoints: tuple[Stop, ...]

    @property
    def is_single_stop(self) -> bool:
        return self.origin is self.destination


def partition_stops(stops: Iterable[Stop]) -> tuple[list[Stop], list[Stop]]:
    pickups: list[Stop] = []
    deliveries: list[Stop] = []
    for stop in stops:
        (deliveries if stop.kind is StopKind.DELIVERY else pickups).append(stop)
    return pickups, deliveries


def select_origin(pickups: Sequence[Stop], deliveries: Sequence[Stop]) -> Stop:
    for stop in pickups:
        if stop.is_driver_start:
            return stop
    if pickups:
        return pickups[0]
    return deliveries[0]


def select_destination(deliveries: Sequence[Stop]) -> Stop:
    return deliveries[-1]


def select_waypoints(
    pickups: Sequence[Stop],
    deliveries: Sequence[Stop],
    origin: Stop,
    destination: Stop,
) -> tuple[Stop, ...]:
    remaining_pickups = [stop for stop in pickups if stop is not origin]
    remaining_deliveries = [stop for stop in deliveries if stop is not origin and stop is not destination]
    return (*remaining_pickups, *remaining_deliveries)


def plan_stops(stops: Sequence[Stop]) -> RoutePlan | NoRoute:
    pickups, deliveries = partition_stops(stops)
    if not deliveries:
        return NoRoute(reason="no_deliveries")

    origin = select_origin(pickups, deliveries)
    destination = select_destination(deliveries)
    return RoutePlan(
        origin=origin,
        destination=destination,
        waypoints=select_waypoints(pickups, deliveries, origin, destination),
    )


def reorder_waypoints(waypoints: Sequence[Stop], waypoint_order: Sequence[int] | None) -> list[Stop]:
    """Return ``waypoints`` in the provider's order.

    A missing order keeps the input order. An order that is not a permutation of
    the waypoint indices raises ``ValueError``.
    """
    if waypoint_order is None:
        return list(waypoints)
    order = list(waypoint_order)
    if sorted(order) != list(range(len(waypoints))):
        raise ValueError(f"waypoint_order {order} is not a permutation of {len(waypoints)} waypoints")
    return [waypoints[index] for index in order]


def aggregate_legs(legs: Iterable[dict[str, Any]]) -> tuple[int, int]:
    total_distance = 0
    total_duration = 0
    for leg in legs:
        total_distance += int(leg["distance"]["value"])
        total_duration += int(leg["duration"]["value"])
    return total_distance, total_duration


class RouteBuilder:
    """Turns collected stops into a provider-optimized ``Route``.

    Every failure is reported as ``NoRoute``; ``build_route`` does not raise.
    """

    def __init__(self, provider: DirectionsProvider, max_waypoints: int | None = None) -> None:
        self.provider = provider
        self.max_waypoints = max_waypoints

    async def build_route(self, stops: Sequence[Stop]) -> RouteResult:
        plan = plan_stops(stops)
        if isinstance(plan, NoRoute):
            logger.info(f"No route built: {plan.reason}")
            return plan

        if plan.is_single_stop:
            return Route(stops=(plan.destination,), total_distance_meters=0, total_duration_seconds=0, path_encoding="")

        if self.max_waypoints is not None and len(plan.waypoints) > self.max_waypoints:
            logger.warning(f"Route has {len(plan.waypoints)} waypoints, provider limit is {self.max_waypoints}")
            return NoRoute(reason="too_many_waypoints")

        try:
            response = await self.provider.directions(
                plan.origin.coordinates,
                plan.destination.coordinates,
                [stop.coordinates for stop in plan.waypoints],
                optimize=True,
            )
        except Exception as e:
            logger.warning(f"Directions request failed: {e}")
            return NoRoute(reason="provider_error")

        if not isinstance(response, dict):
            logger.error(f"Unexpected directions response type: {type(response).__name__}")
            return NoRoute(reason="malformed_response")

        try:
            ordered = reorder_waypoints(plan.waypoints, response.get("waypoint_order"))
        except ValueError as e:
            logger.error(f"Rejecting directions response: {e}")
            return NoRoute(reason="invalid_waypoint_order")

        try:
            total_distance, total_duration = aggregate_legs(response.get("legs") or [])
            path_encoding = str(response["overview_polyline"]["points"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed directions response: {e}")
            return NoRoute(reason="malformed_response")

        return Route(
            stops=(plan.origin, *ordered, plan.destination),
            total_distance_meters=total_distance,
            total_duration_seconds=total_duration,
            path_encoding=path_encoding,
        )
