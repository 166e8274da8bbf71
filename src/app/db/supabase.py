"""Supabase client for Python backend."""

import logging

from supabase import AsyncClient, acreate_client

from ..config import settings

_client: AsyncClient | None = None


async def get_supabase_client() -> AsyncClient | None:
    """Get cached async Supabase client instance.

    Returns:
        Supabase AsyncClient instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    global _client
    if _client is not None:
        return _client

    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        _client = await acreate_client(settings.supabase_url, settings.supabase_key)
        return _client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


def reset_supabase_client() -> None:
    """Drop the cached client so the next call reads settings again."""
    global _client
    _client = None
