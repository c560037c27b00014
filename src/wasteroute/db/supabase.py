"""Supabase client used to read household pickup signals."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the shared Supabase client, or ``None`` when it cannot be built.

    Creating the client does not contact the server; queries can still fail
    later with network errors, and callers treat that as "no signals".
    """
    if not is_configured():
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
