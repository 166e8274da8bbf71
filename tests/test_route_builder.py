import asyncio

from src.app.models.domain import Coordinates, NoRoute, Route, SellerRecord, Stop
from src.app.services.routing.builder import (
    RouteBuilder,
    aggregate_legs,
    plan_stops,
    reorder_waypoints,
)


def _delivery(order_id: str, lat: float, lon: float) -> Stop:
    return Stop.delivery(order_id, f"{order_id} Main St, Springfield, IL 62701", Coordinates(lat, lon))


def _pickup(seller_id: str, lat: float, lon: float) -> Stop:
    seller = SellerRecord(seller_id=seller_id, name=f"Farm {seller_id}", address=f"{seller_id} Farm Rd")
    return Stop.pickup(seller, Coordinates(lat, lon), item_count=1)


def _response(waypoint_order, distances, durations, points="encoded~path"):
    return {
        "waypoint_order": waypoint_order,
        "legs": [
            {"distance": {"value": distance}, "duration": {"value": duration}}
            for distance, duration in zip(distances, durations)
        ],
        "overview_polyline": {"points": points},
    }


class FakeDirections:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    async def directions(self, origin, destination, waypoints=(), optimize=True):
        self.calls.append({"origin": origin, "destination": destination, "waypoints": list(waypoints), "optimize": optimize})
        if self.error is not None:
            raise self.error
        return self.response


def _build(provider, stops, **kwargs):
    return asyncio.run(RouteBuilder(provider, **kwargs).build_route(stops))


def test_driver_pickup_delivery_route_sums_legs():
    driver = Stop.driver_start(Coordinates(40.0, -89.0))
    pickup = _pickup("S", 40.1, -89.1)
    delivery = _delivery("X", 40.2, -89.2)
    provider = FakeDirections(_response([0], [500, 1200], [120, 300]))

    result = _build(provider, [driver, delivery, pickup])

    assert isinstance(result, Route)
    assert [stop.id for stop in result.stops] == ["driver-start", "pickup-S", "delivery-X"]
    assert result.total_distance_meters == 1700
    assert result.total_duration_seconds == 420
    assert result.path_encoding == "encoded~path"

    call = provider.calls[0]
    assert call["origin"] == driver.coordinates
    assert call["destination"] == delivery.coordinates
    assert call["waypoints"] == [pickup.coordinates]
    assert call["optimize"] is True


def test_two_deliveries_without_pickups_route_between_them():
    first = _delivery("A", 40.0, -89.0)
    second = _delivery("B", 40.5, -89.5)
    provider = FakeDirections(_response([], [2000], [240]))

    result = _build(provider, [first, second])

    assert isinstance(result, Route)
    assert [stop.id for stop in result.stops] == ["delivery-A", "delivery-B"]
    assert provider.calls[0]["origin"] == first.coordinates
    assert provider.calls[0]["destination"] == second.coordinates
    assert provider.calls[0]["waypoints"] == []
    assert result.total_distance_meters == 2000


def test_no_deliveries_returns_no_route_without_calling_provider():
    provider = FakeDirections(_response([], [1], [1]))
    stops = [Stop.driver_start(Coordinates(40.0, -89.0)), _pickup("S1", 40.1, -89.1)]

    result = _build(provider, stops)

    assert result == NoRoute(reason="no_deliveries")
    assert provider.calls == []


def test_waypoints_follow_provider_order():
    p1, p2 = _pickup("P1", 40.0, -89.0), _pickup("P2", 40.1, -89.1)
    d1, d2, d3 = _delivery("D1", 40.2, -89.2), _delivery("D2", 40.3, -89.3), _delivery("D3", 40.4, -89.4)
    provider = FakeDirections(_response([2, 0, 1], [10, 20, 30, 40], [1, 2, 3, 4]))

    result = _build(provider, [d1, d2, d3, p1, p2])

    assert isinstance(result, Route)
    # waypoints sent as remaining pickups then remaining deliveries
    assert provider.calls[0]["waypoints"] == [p2.coordinates, d1.coordinates, d2.coordinates]
    assert [stop.id for stop in result.stops] == ["pickup-P1", "delivery-D2", "pickup-P2", "delivery-D1", "delivery-D3"]
    assert len({stop.id for stop in result.stops}) == 5
    assert result.stops[-1].kind.value == "delivery"
    assert result.total_distance_meters == 100
    assert result.total_duration_seconds == 10


def test_driver_start_is_origin_even_when_not_first():
    pickup = _pickup("S", 40.1, -89.1)
    driver = Stop.driver_start(Coordinates(40.0, -89.0))
    delivery = _delivery("X", 40.2, -89.2)

    plan = plan_stops([pickup, delivery, driver])

    assert plan.origin is driver
    assert plan.destination is delivery
    assert plan.waypoints == (pickup,)


def test_plan_is_deterministic_for_same_input():
    stops = [_delivery("A", 40.0, -89.0), _pickup("S1", 40.1, -89.1), _delivery("B", 40.2, -89.2)]

    first = plan_stops(stops)
    second = plan_stops(stops)

    assert first == second
    assert first.origin.id == "pickup-S1"
    assert first.destination.id == "delivery-B"
    assert [stop.id for stop in first.waypoints] == ["delivery-A"]


def test_provider_error_returns_no_route():
    provider = FakeDirections(error=ConnectionError("boom"))

    result = _build(provider, [_delivery("A", 40.0, -89.0), _delivery("B", 40.1, -89.1)])

    assert result == NoRoute(reason="provider_error")


def test_invalid_waypoint_order_is_rejected():
    provider = FakeDirections(_response([0, 0], [1, 1, 1], [1, 1, 1]))
    stops = [_delivery("A", 40.0, -89.0), _delivery("B", 40.1, -89.1), _delivery("C", 40.2, -89.2), _delivery("D", 40.3, -89.3)]

    result = _build(provider, stops)

    assert result == NoRoute(reason="invalid_waypoint_order")


def test_malformed_response_returns_no_route():
    provider = FakeDirections({"waypoint_order": [], "legs": [{"distance": {}}]})

    result = _build(provider, [_delivery("A", 40.0, -89.0), _delivery("B", 40.1, -89.1)])

    assert result == NoRoute(reason="malformed_response")


def test_single_delivery_needs_no_provider_call():
    provider = FakeDirections(_response([], [1], [1]))
    delivery = _delivery("A", 40.0, -89.0)

    result = _build(provider, [delivery])

    assert result == Route(stops=(delivery,), total_distance_meters=0, total_duration_seconds=0, path_encoding="")
    assert provider.calls == []


def test_too_many_waypoints_returns_no_route():
    provider = FakeDirections(_response([], [1], [1]))
    stops = [_delivery(f"O{i}", 40.0 + i * 0.01, -89.0) for i in range(5)]

    result = _build(provider, stops, max_waypoints=2)

    assert result == NoRoute(reason="too_many_waypoints")
    assert provider.calls == []


def test_reorder_waypoints_without_order_keeps_input():
    stops = [_delivery("A", 40.0, -89.0), _delivery("B", 40.1, -89.1)]

    assert reorder_waypoints(stops, None) == stops
    assert reorder_waypoints(stops, [1, 0]) == [stops[1], stops[0]]


def test_aggregate_legs_sums_values():
    legs = [
        {"distance": {"value": 500}, "duration": {"value": 120}},
        {"distance": {"value": 1200}, "duration": {"value": 300}},
    ]

    assert aggregate_legs(legs) == (1700, 420)
    assert aggregate_legs([]) == (0, 0)


def test_driver_start_without_pickups_routes_through_interior_deliveries():
    driver = Stop.driver_start(Coordinates(40.0, -89.0))
    d1, d2, d3 = _delivery("D1", 40.1, -89.1), _delivery("D2", 40.2, -89.2), _delivery("D3", 40.3, -89.3)
    provider = FakeDirections(_response([1, 0], [100, 200, 300], [10, 20, 30]))

    result = _build(provider, [driver, d1, d2, d3])

    call = provider.calls[0]
    assert call["origin"] == driver.coordinates
    assert call["destination"] == d3.coordinates
    assert call["waypoints"] == [d1.coordinates, d2.coordinates]
    assert isinstance(result, Route)
    assert [stop.id for stop in result.stops] == ["driver-start", "delivery-D2", "delivery-D1", "delivery-D3"]
    assert result.total_distance_meters == 600
    assert result.total_duration_seconds == 60
