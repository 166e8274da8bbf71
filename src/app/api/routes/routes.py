"""Delivery routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.routing import DriverLocation, RouteRequest, RouteResponse
from ...services.routing.service import RoutingUnavailableError, optimize_active_route, optimize_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def optimize(payload: RouteRequest) -> RouteResponse:
    """Build an optimized pickup and delivery route for the given orders."""
    try:
        return await optimize_route(payload)
    except RoutingUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing delivery route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize delivery route: {str(exc)}"
        ) from exc


@router.get("/active", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def active(
    lat: float | None = Query(default=None, ge=-90, le=90, description="Driver latitude"),
    lng: float | None = Query(default=None, ge=-180, le=180, description="Driver longitude"),
) -> RouteResponse:
    """Build a route over all orders that are ready for or out for delivery."""
    if (lat is None) != (lng is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lat and lng must be supplied together",
        )
    driver_location = DriverLocation(latitude=lat, longitude=lng) if lat is not None else None
    try:
        return await optimize_active_route(driver_location)
    except RoutingUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error building active delivery route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build active delivery route: {str(exc)}"
        ) from exc
