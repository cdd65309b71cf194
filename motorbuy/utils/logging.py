import logging
from typing import Any, Optional

from supabase import Client

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
AUDIT_TABLE = "audit_logs"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def audit_row(
    actor: dict,
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[Any] = None,
) -> dict:
    """Audit row for ``actor``, the session user dict from ``get_current_user``."""
    return {
        "user_id": actor.get("id"),
        "user_name": actor.get("name") or actor.get("email"),
        "user_role": actor.get("role"),
        "action": action,
        "resource_type": resource_type,
        "resource_id": resource_id,
        "details": details,
    }


def log_action(
    supabase: Client,
    actor: dict,
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[Any] = None,
) -> None:
    """
    Records an admin or financial mutation in the audit trail.

    Called after the mutation has been written, so a failed insert is only
    logged.
    """
    row = audit_row(actor, action, resource_type, resource_id, details)
    try:
        supabase.table(AUDIT_TABLE).insert(row).execute()
    except Exception:
        logger.exception("Could not write audit row %s on %s %s", action, resource_type, resource_id)
        return
    logger.debug("Audit: %s %s %s by %s", action, resource_type, resource_id, row["user_id"])
