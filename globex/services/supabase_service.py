import logging
from typing import Optional

from supabase import create_client, Client

from ..core.config import Config
from ..core.errors import NotFound


logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "username, email, first_name, last_name, created_at"


def get_client() -> Client:
    """Client acting as the site visitor; user-scoped calls go through it."""
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_ANON_KEY)


def get_service_client() -> Client:
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_KEY)


def fetch_profile(supabase: Client, user_id: Optional[str]) -> dict:
    if not user_id:
        raise NotFound("Profile not found")

    try:
        result = (
            supabase
            .table('profiles')
            .select(PROFILE_COLUMNS)
            .eq('id', user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to fetch profile for user {user_id}: {e}")
        raise

    if not result.data:
        raise NotFound("Profile not found")

    return result.data[0]


def check_connection() -> None:
    supabase = get_service_client()
    supabase.table('profiles').select('id').limit(1).execute()
