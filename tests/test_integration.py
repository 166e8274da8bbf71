import pytest
from fastapi.testclient import TestClient

from src.app.main import create_app
from src.app.models.domain import AddressRecord, OrderItem, OrderRecord, SellerRecord

SELLER = SellerRecord(seller_id="S1", name="Green Acres", address="7 Farm Rd, Springfield, IL")
COORDS = {
    "1 Elm St, Springfield, IL 62701": {"lat": 39.70, "lng": -89.50},
    "2 Oak St, Springfield, IL 62701": {"lat": 39.60, "lng": -89.40},
    SELLER.address: {"lat": 39.90, "lng": -89.70},
}


def _order(order_id: str, street: str) -> OrderRecord:
    return OrderRecord(
        order_id=order_id,
        delivery_address=AddressRecord(street_address=street, city="Springfield", state="IL", zip_code="62701"),
    )


class FakeOrders:
    orders = {"X": _order("X", "1 Elm St"), "Y": _order("Y", "2 Oak St"), "Z": _order("Z", "9 Lost Ln")}
    items = {"X": [OrderItem(seller=SELLER)], "Y": [OrderItem(seller=SELLER)]}

    async def get_order(self, order_id):
        return self.orders.get(order_id)

    async def get_order_items(self, order_id):
        return self.items.get(order_id, [])

    async def list_active_order_ids(self, statuses):
        return ["X", "Y"]


class FakeMaps:
    def __init__(self):
        self.directions_calls = []

    async def geocode(self, address):
        return COORDS.get(address)

    async def directions(self, origin, destination, waypoints=(), optimize=True):
        self.directions_calls.append(list(waypoints))
        legs = [{"distance": {"value": 1000}, "duration": {"value": 600}} for _ in range(len(waypoints) + 1)]
        return {
            "waypoint_order": list(reversed(range(len(waypoints)))),
            "legs": legs,
            "overview_polyline": {"points": "_p~iF~ps|U"},
        }


@pytest.fixture
def maps() -> FakeMaps:
    return FakeMaps()


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch, maps: FakeMaps) -> TestClient:
    from src.app.services.routing import service as routing_service

    async def fake_repository():
        return FakeOrders()

    monkeypatch.setattr(routing_service, "_order_repository", fake_repository)
    monkeypatch.setattr(routing_service, "_maps_client", lambda: maps)
    return TestClient(create_app())


def test_optimize_endpoint_returns_ordered_stops(api_client: TestClient, maps: FakeMaps):
    response = api_client.post(
        "/api/routes/optimize",
        json={"order_ids": ["X", "Y", "Z"], "driver_location": {"latitude": 39.8, "longitude": -89.6}},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    # waypoints [pickup-S1, delivery-X] reversed by the provider
    assert [stop["id"] for stop in payload["stops"]] == ["driver-start", "delivery-X", "pickup-S1", "delivery-Y"]
    assert [stop["sequence"] for stop in payload["stops"]] == [0, 1, 2, 3]
    assert payload["stops"][2]["seller_name"] == "Green Acres"
    assert payload["stops"][2]["item_count"] == 2
    assert payload["total_distance_meters"] == 3000
    assert payload["total_duration_seconds"] == 1800
    assert payload["distance_display"] == "1.9 mi"
    assert payload["duration_display"] == "30 min"
    assert payload["path_encoding"] == "_p~iF~ps|U"
    assert payload["navigation_url"].startswith("https://www.google.com/maps/dir/?api=1&origin=39.8,-89.6")
    assert payload["unresolved_order_ids"] == ["Z"]
    assert len(maps.directions_calls) == 1


def test_optimize_endpoint_reports_no_route(api_client: TestClient, maps: FakeMaps):
    response = api_client.post("/api/routes/optimize", json={"order_ids": ["Z"]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "no_route"
    assert payload["reason"] == "no_deliveries"
    assert payload["stops"] == []
    assert payload["unresolved_order_ids"] == ["Z"]
    assert maps.directions_calls == []


def test_optimize_endpoint_without_orders(api_client: TestClient):
    response = api_client.post("/api/routes/optimize", json={"order_ids": []})

    assert response.status_code == 200
    assert response.json()["reason"] == "no_orders"


def test_active_endpoint_uses_active_orders(api_client: TestClient):
    response = api_client.get("/api/routes/active", params={"lat": 39.8, "lng": -89.6})

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert {stop["id"] for stop in payload["stops"]} == {"driver-start", "pickup-S1", "delivery-X", "delivery-Y"}
    assert payload["stops"][-1]["kind"] == "delivery"


def test_active_endpoint_requires_both_coordinates(api_client: TestClient):
    response = api_client.get("/api/routes/active", params={"lat": 39.8})

    assert response.status_code == 400


def test_invalid_driver_location_is_rejected(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"order_ids": ["X"], "driver_location": {"latitude": 123, "longitude": 0}},
    )

    assert response.status_code == 422


def test_unconfigured_database_returns_503(monkeypatch: pytest.MonkeyPatch):
    from src.app.config import settings
    from src.app.db.supabase import reset_supabase_client

    monkeypatch.setattr(settings, "supabase_url", None)
    monkeypatch.setattr(settings, "supabase_key", None)
    reset_supabase_client()

    client = TestClient(create_app())
    response = client.post("/api/routes/optimize", json={"order_ids": ["X"]})

    assert response.status_code == 503


def test_health_endpoint():
    client = TestClient(create_app())

    assert client.get("/api/health").json() == {"status": "ok"}
