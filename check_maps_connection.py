#!/usr/bin/env python3
"""Script to verify Google Maps geocoding and directions connectivity."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from src.app.config import settings
from src.app.services.routing.maps_client import GoogleMapsClient
from src.app.models.domain import Coordinates

SAMPLE_ADDRESS = "1600 Amphitheatre Parkway, Mountain View, CA 94043"


async def run() -> int:
    print("=" * 60)
    print("Google Maps Connection Test")
    print("=" * 60)
    print()

    print("1. Checking Google Maps configuration...")
    if not settings.google_maps_api_key:
        print("   [ERROR] Google Maps API key is not configured")
        print("   Please set GREENBEAN_GOOGLE_MAPS_API_KEY in your .env file")
        return 1

    print(f"   [OK] Base URL: {settings.google_maps_base_url}")
    print(f"   [OK] Travel mode: {settings.maps_travel_mode}")
    print()

    client = GoogleMapsClient()

    print("2. Testing geocoding request...")
    try:
        location = await client.geocode(SAMPLE_ADDRESS)
        if not location:
            print(f"   [ERROR] No match for '{SAMPLE_ADDRESS}'")
            return 1
        print(f"   [OK] {SAMPLE_ADDRESS} -> {location['lat']:.6f},{location['lng']:.6f}")
    except Exception as e:
        print(f"   [ERROR] Error during geocoding: {e}")
        return 1
    print()

    print("3. Testing directions request with waypoint optimization...")
    try:
        route = await client.directions(
            Coordinates(37.422, -122.084),
            Coordinates(37.3861, -122.0839),
            [Coordinates(37.4030, -122.0326), Coordinates(37.3947, -122.1503)],
        )
        legs = route.get("legs", [])
        print(f"   [OK] Directions request successful, {len(legs)} legs")
        print(f"   [OK] Waypoint order: {route.get('waypoint_order')}")
    except Exception as e:
        print(f"   [ERROR] Error during directions request: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Google Maps is connected and working!")
    print("=" * 60)
    return 0


def main() -> int:
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
