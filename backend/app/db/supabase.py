"""
Supabase Client
===============
Provides a configured Supabase client shared by the auth helper and the
Supabase-backed activity repository.

Uses the service_role key because the backend writes activity history
and tracking sessions on behalf of the authenticated user.
"""

from functools import lru_cache

from supabase import Client, create_client

from app.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)
