"""Supabase client for Python backend."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings


@lru_cache()
def get_supabase_client(url: str | None = None, key: str | None = None) -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    url = url or settings.supabase_url
    key = key or settings.supabase_key
    if not url or not key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None
