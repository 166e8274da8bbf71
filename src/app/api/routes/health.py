"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/maps", status_code=status.HTTP_200_OK)
async def health_maps() -> dict:
    """Check Google Maps reachability and API key."""
    from ...services.routing.maps_client import GoogleMapsClient

    try:
        healthy = await GoogleMapsClient().check_health()
        return {"service": "google_maps", "healthy": healthy}
    except Exception as e:
        return {"service": "google_maps", "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
async def check_database() -> dict:
    """Check database connection and orders table access."""
    from ...db.supabase import get_supabase_client

    supabase = await get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set GREENBEAN_SUPABASE_URL and GREENBEAN_SUPABASE_KEY environment variables.",
        }

    try:
        await supabase.table("orders").select("id").limit(1).execute()
        return {
            "configured": True,
            "connected": True,
            "message": "Database connected and orders table is readable.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
