from supabase import Client, create_client

from config.config import settings


def create_supabase_client() -> Client:
    """Create a Supabase client from the configured URL and key."""
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set to use the supabase backend")
    return create_client(settings.supabase_url, settings.supabase_key)
