"""Supabase connection for the snapshot table."""

import logging

from supabase import Client, create_client

from bookwhen_watch.config import Settings
from bookwhen_watch.errors import SnapshotError

logger = logging.getLogger(__name__)


def connect_supabase(settings: Settings) -> Client:
    """
    Open a Supabase client with the service role key from settings.

    The service role key is needed because the snapshot table has row
    level security enabled.

    Raises:
        SnapshotError: If the project URL or key is missing, or the
            client cannot be created
    """
    missing = [
        name
        for name, value in (
            ("SUPABASE_URL", settings.supabase_url),
            ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
        )
        if not value
    ]
    if missing:
        raise SnapshotError(f"Supabase snapshot backend needs {', '.join(missing)}")

    logger.debug(f"Connecting to Supabase at {settings.supabase_url}")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_role_key)
    except Exception as e:
        raise SnapshotError(f"Could not connect to Supabase: {e}") from e
