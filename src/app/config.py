"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GREENBEAN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Greenbean Delivery Routing API"
    api_prefix: str = "/api"

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    # Google Maps configuration
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="API key with Geocoding and Directions enabled.",
    )
    google_maps_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        description="Base URL for the Google Maps web services.",
    )
    maps_travel_mode: Literal["driving", "bicycling", "walking"] = Field(
        default="driving",
        description="Travel mode requested from the directions endpoint.",
    )
    maps_timeout_seconds: float = Field(default=10.0, gt=0.0)
    maps_max_retries: int = Field(default=2, ge=0)
    maps_backoff_seconds: float = Field(default=0.5, ge=0.0)
    maps_max_waypoints: int = Field(
        default=25,
        ge=0,
        description="Maximum intermediate waypoints accepted by the directions endpoint.",
    )
    geocode_cache_ttl_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds to reuse a geocoding result for the same address. 0 disables caching.",
    )
    geocode_cache_max_entries: int = Field(
        default=1024,
        ge=0,
        description="Maximum addresses held in the geocoding cache; oldest entries are evicted first.",
    )
    maps_max_concurrent_requests: int = Field(
        default=5,
        ge=1,
        description="Maximum geocoding requests in flight at once while resolving pickups.",
    )

    active_order_statuses: tuple[str, ...] = Field(
        default=("ready_for_delivery", "out_for_delivery"),
        description="Order statuses that put an order on the driver's map.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:19006",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", "active_order_statuses", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()


settings = Settings()
