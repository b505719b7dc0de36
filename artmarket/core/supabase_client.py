# artmarket/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from artmarket.core.config import get_settings


@lru_cache
def supabase_admin() -> Client:
    """
    Storage client for artwork, profile, portfolio and reference images.

    Built once per process with the service-role key, which lets the
    backend write to the media bucket and remove images that a product
    or profile no longer points at. The key stays server-side.

    Raises:
        RuntimeError: SUPABASE_SERVICE_ROLE_KEY is not configured.
    """
    settings = get_settings()
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "SUPABASE_SERVICE_ROLE_KEY must be set to upload or delete images"
        )
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
