#!/usr/bin/env python3
"""Helper script to check and create .env file for Supabase and Google Maps configuration."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Supabase Configuration (Required for order lookups)
# Get these from: https://supabase.com/dashboard -> Your Project -> Settings -> API
GREENBEAN_SUPABASE_URL=https://your-project-id.supabase.co
GREENBEAN_SUPABASE_KEY=your-service-role-key-here

# Google Maps (Required for geocoding and route optimization)
GREENBEAN_GOOGLE_MAPS_API_KEY=your-google-maps-key-here
# GREENBEAN_MAPS_TRAVEL_MODE=driving
# GREENBEAN_GEOCODE_CACHE_TTL_SECONDS=300

# API Configuration
GREENBEAN_API_PREFIX=/api
# GREENBEAN_FRONTEND_ALLOWED_ORIGINS - JSON array: ["http://localhost:8081"]
"""

SECRET_KEYS = ("GREENBEAN_SUPABASE_KEY", "GREENBEAN_GOOGLE_MAPS_API_KEY")


def _mask(line: str) -> str:
    name, _, value = line.partition("=")
    value = value.strip()
    if name.strip() in SECRET_KEYS and len(value) > 20:
        return f"{name}={value[:8]}...{value[-4:]}"
    return line


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Environment Variables Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"[ERROR] .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"[OK] Created template .env file at: {env_file}")
        print("Please edit .env and add your Supabase and Google Maps credentials.")
        return 1

    print(f"[OK] Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    for name in ("GREENBEAN_SUPABASE_URL", *SECRET_KEYS):
        status = "set in environment" if os.getenv(name) else "not in environment (may come from .env)"
        print(f"{name}: {status}")
    print()

    print("Testing config loading...")
    try:
        sys.path.insert(0, str(project_root))
        from src.app.config import settings
    except Exception as e:
        print(f"[ERROR] Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    missing = [
        name
        for name, value in (
            ("supabase_url", settings.supabase_url),
            ("supabase_key", settings.supabase_key),
            ("google_maps_api_key", settings.google_maps_api_key),
        )
        if not value
    ]
    print("=" * 60)
    if missing:
        print(f"[ERROR] Missing configuration: {', '.join(missing)}")
        print("Make sure variables start with the GREENBEAN_ prefix and restart the backend after editing .env")
        print("=" * 60)
        return 1
    print("[SUCCESS] Supabase and Google Maps are configured!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
