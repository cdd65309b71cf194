from datetime import datetime
from typing import Any, Optional

from .base import ApiModel


class AuditLogOut(ApiModel):
    """One ``log_action`` row: who did what to which resource."""

    id: str
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    details: Optional[Any] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_role: Optional[str] = None
    created_at: datetime
