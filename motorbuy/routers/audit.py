from fastapi import APIRouter, Depends, Query

from ..dependencies import get_audit_repository, require_admin
from ..repositories import AuditRepository
from ..schemas.audit import AuditLogOut

router = APIRouter(prefix="/admin/audit", tags=["audit"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[AuditLogOut])
def get_audit_logs(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    resource_type: str | None = Query(None, alias="resourceType"),
    audit: AuditRepository = Depends(get_audit_repository),
):
    """Fetch system audit logs. Admin only."""
    return audit.list_recent(limit, offset, resource_type)
