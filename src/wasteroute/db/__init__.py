"""Database clients and utilities."""

from .supabase import get_supabase_client, is_configured

__all__ = ["get_supabase_client", "is_configured"]
