"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class DriverLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class RouteRequest(BaseModel):
    order_ids: List[str] = Field(default_factory=list, description="Orders the driver is delivering.")
    driver_location: Optional[DriverLocation] = Field(
        default=None,
        description="Driver's current position. When present the route starts here.",
    )


class RouteStopModel(BaseModel):
    id: str
    kind: Literal["pickup", "delivery"]
    sequence: int
    address: str
    latitude: float
    longitude: float
    order_id: Optional[str] = None
    seller_name: Optional[str] = None
    item_count: Optional[int] = None


class RouteResponse(BaseModel):
    status: Literal["ok", "no_route"]
    reason: Optional[str] = None
    stops: List[RouteStopModel] = Field(default_factory=list)
    total_distance_meters: int = 0
    total_duration_seconds: int = 0
    distance_display: Optional[str] = None
    duration_display: Optional[str] = None
    path_encoding: Optional[str] = Field(
        default=None,
        description="Encoded polyline of the route, passed through from the provider.",
    )
    navigation_url: Optional[str] = None
    unresolved_order_ids: List[str] = Field(
        default_factory=list,
        description="Orders left off the route because their delivery address could not be resolved.",
    )
