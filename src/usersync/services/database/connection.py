"""Supabase database connection management."""

from functools import lru_cache

from supabase import Client, create_client

from src.usersync.config import settings


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Get Supabase admin client with service role key (singleton pattern).

    Webhook deliveries carry no end-user session, so every write goes through
    the service role and bypasses Row-Level Security. Authenticity is
    established by the webhook signature check instead.

    Returns:
        Configured Supabase client with service role key

    Example:
        >>> client = get_supabase_admin_client()
        >>> response = client.table("users").select("*").execute()
    """
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
