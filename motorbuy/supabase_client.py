import logging
from functools import lru_cache

from supabase import Client, create_client

from .config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """
    Service-role client shared by all repositories. It bypasses row level
    security, so every permission check lives in ``dependencies``.
    """
    settings = get_settings()
    logger.info("Connecting to Supabase at %s", settings.SUPABASE_URL)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
