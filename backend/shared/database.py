"""
Database client factory for Supabase.

Provides both service-role clients (for backend operations bypassing RLS)
and user-authenticated clients (for operations respecting RLS).
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def is_supabase_configured() -> bool:
    """Return True when the Supabase URL and at least one API key are set."""
    settings = get_settings()
    return bool(
        settings.supabase_url
        and (settings.supabase_service_role_key or settings.supabase_anon_key)
    )


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that need full database access,
    such as creating a profile row on behalf of a newly signed-up user.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_user_client(access_token: Optional[str] = None) -> Client:
    """
    Get Supabase client using the anon key.

    Use this for operations that should respect Row Level Security (RLS)
    and for client sessions that sign in and listen to auth-state changes.

    Args:
        access_token: Optional JWT access token from Supabase Auth. When
            given, the client session is set to that token.

    Returns:
        Supabase client configured with the anon key
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )
    if access_token:
        # refresh_token can be empty for backend use
        client.auth.set_session(access_token, "")
    return client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
