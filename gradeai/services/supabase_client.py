"""
Lazy Supabase client shared by all services.
Uses the service key; row ownership is enforced by the callers' user_id filters.
"""
from supabase import create_client, Client

from ..config import config

_supabase: Client = None


def get_supabase() -> Client:
    """Get or create Supabase client."""
    global _supabase
    if _supabase is None:
        url = config.supabase_url
        key = config.supabase_service_key
        if not url or not key:
            raise Exception("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_SERVICE_KEY in .env")
        _supabase = create_client(url, key)
    return _supabase
