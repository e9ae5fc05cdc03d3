"""
Database client factory for Supabase.

Provides the service-role client used by repositories. The client is
created on demand from settings; ownership of the instance belongs to the
caller (the API service container), not to this module.
"""

from supabase import create_client, Client

from .config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role (bypasses RLS).

    Args:
        settings: Application settings with Supabase URL and key

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If Supabase configuration is missing
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
        )
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )
