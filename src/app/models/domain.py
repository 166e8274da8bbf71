"""Domain models for delivery stops, routes and marketplace records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

DRIVER_START_ID = "driver-start"
DRIVER_START_LABEL = "Your Location"


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def as_param(self) -> str:
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True, slots=True)
class Resolved:
    address: str
    coordinates: Coordinates


@dataclass(frozen=True, slots=True)
class Unresolved:
    address: str
    reason: str


ResolveResult = Union[Resolved, Unresolved]


class StopKind(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(frozen=True, slots=True)
class Stop:
    """A physical location the driver must visit."""

    id: str
    kind: StopKind
    address: str
    coordinates: Coordinates
    order_id: Optional[str] = None
    seller_name: Optional[str] = None
    item_count: Optional[int] = None

    @property
    def is_driver_start(self) -> bool:
        return self.id == DRIVER_START_ID

    @classmethod
    def driver_start(cls, location: Coordinates) -> "Stop":
        return cls(id=DRIVER_START_ID, kind=StopKind.PICKUP, address=DRIVER_START_LABEL, coordinates=location)

    @classmethod
    def delivery(cls, order_id: str, address: str, coordinates: Coordinates) -> "Stop":
        return cls(
            id=f"delivery-{order_id}",
            kind=StopKind.DELIVERY,
            address=address,
            coordinates=coordinates,
            order_id=order_id,
        )

    @classmethod
    def pickup(cls, seller: "SellerRecord", coordinates: Coordinates, item_count: int | None = None) -> "Stop":
        name = seller.name.strip() if seller.name else ""
        return cls(
            id=f"pickup-{seller.seller_id}",
            kind=StopKind.PICKUP,
            address=seller.address,
            coordinates=coordinates,
            seller_name=name or None,
            item_count=item_count,
        )


@dataclass(frozen=True, slots=True)
class Route:
    """Computed itinerary for a set of orders."""

    stops: tuple[Stop, ...]
    total_distance_meters: int
    total_duration_seconds: int
    path_encoding: str


@dataclass(frozen=True, slots=True)
class NoRoute:
    reason: str


RouteResult = Union[Route, NoRoute]


@dataclass(frozen=True, slots=True)
class AddressRecord:
    """Postal address as stored on an order."""

    street_address: str
    city: str
    state: str
    zip_code: str

    def format(self) -> str:
        return f"{self.street_address}, {self.city}, {self.state} {self.zip_code}"


@dataclass(frozen=True, slots=True)
class SellerRecord:
    seller_id: str
    name: Optional[str]
    address: str


@dataclass(frozen=True, slots=True)
class OrderRecord:
    order_id: str
    delivery_address: Optional[AddressRecord]


@dataclass(frozen=True, slots=True)
class OrderItem:
    """A single line item; ``seller`` is None when no pickup is needed for it."""

    seller: Optional[SellerRecord]


@dataclass(slots=True)
class StopCollection:
    stops: list[Stop] = field(default_factory=list)
    unresolved_order_ids: list[str] = field(default_factory=list)

    @property
    def deliveries(self) -> list[Stop]:
        return [stop for stop in self.stops if stop.kind is StopKind.DELIVERY]

    @property
    def pickups(self) -> list[Stop]:
        return [stop for stop in self.stops if stop.kind is StopKind.PICKUP]
